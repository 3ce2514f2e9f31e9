from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..core.config import settings


class CRUDService:
    def get_service(self, db: Session, service_id: int) -> Optional[models.Service]:
        return (
            db.query(models.Service)
            .options(joinedload(models.Service.provider), joinedload(models.Service.category))
            .filter(models.Service.id == service_id)
            .first()
        )

    def list_services(
        self,
        db: Session,
        *,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        city: Optional[str] = None,
        provider_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[models.Service], int]:
        """Return one page of active listings and the total for the same filter.

        Featured listings come first, then the newest.
        """
        query = db.query(models.Service).filter(models.Service.is_active.is_(True))
        if category_id is not None:
            query = query.filter(models.Service.category_id == category_id)
        if provider_id is not None:
            query = query.filter(models.Service.provider_id == provider_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    models.Service.title.ilike(pattern),
                    models.Service.description.ilike(pattern),
                )
            )
        if min_price is not None:
            query = query.filter(models.Service.price >= min_price)
        if max_price is not None:
            query = query.filter(models.Service.price <= max_price)
        if min_rating is not None:
            query = query.filter(models.Service.average_rating >= min_rating)
        if city:
            query = query.filter(models.Service.city.ilike(city.strip()))

        total = query.count()
        items = (
            query.options(joinedload(models.Service.provider), joinedload(models.Service.category))
            .order_by(
                models.Service.is_featured.desc(),
                models.Service.created_at.desc(),
                models.Service.id.desc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def create_service(
        self,
        db: Session,
        service: schemas.ServiceCreate,
        provider_id: int,
        category_id: Optional[int],
    ) -> models.Service:
        data = service.model_dump(exclude={"category_slug", "category_id"}, exclude_none=True)
        data.setdefault("currency", settings.DEFAULT_CURRENCY)
        db_service = models.Service(**data, provider_id=provider_id, category_id=category_id)
        db.add(db_service)
        db.commit()
        db.refresh(db_service)
        return db_service

    def update_service(
        self,
        db: Session,
        db_service: models.Service,
        service_in: schemas.ServiceUpdate,
        category_id: Optional[int] = None,
    ) -> models.Service:
        update_data = service_in.model_dump(exclude_unset=True, exclude={"category_slug"})
        if category_id is not None:
            update_data["category_id"] = category_id
        for field, value in update_data.items():
            setattr(db_service, field, value)
        db.commit()
        db.refresh(db_service)
        return db_service

    def delete_service(self, db: Session, db_service: models.Service) -> None:
        db.delete(db_service)
        db.commit()

    def count_by_provider(self, db: Session, provider_id: int) -> int:
        return db.query(models.Service).filter(models.Service.provider_id == provider_id).count()

    def feature_provider_services(self, db: Session, provider_id: int) -> int:
        """Mark every listing of ``provider_id`` as featured; returns rows touched.

        Does not commit.
        """
        return (
            db.query(models.Service)
            .filter(models.Service.provider_id == provider_id)
            .update({models.Service.is_featured: True}, synchronize_session="fetch")
        )


service = CRUDService()
