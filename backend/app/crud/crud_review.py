from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple

from .. import models, schemas


class CRUDReview:
    def get_review(self, db: Session, review_id: int) -> Optional[models.Review]:
        return db.query(models.Review).filter(models.Review.id == review_id).first()

    def get_review_by_booking(self, db: Session, booking_id: int) -> Optional[models.Review]:
        return db.query(models.Review).filter(models.Review.booking_id == booking_id).first()

    def _approved_page(
        self, db: Session, column, value: int, skip: int, limit: int
    ) -> Tuple[List[models.Review], int]:
        query = db.query(models.Review).filter(
            column == value,
            models.Review.is_approved.is_(True),
        )
        total = query.count()
        items = (
            query.options(joinedload(models.Review.customer))
            .order_by(models.Review.created_at.desc(), models.Review.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def get_reviews_by_service(
        self, db: Session, service_id: int, skip: int = 0, limit: int = 10
    ) -> Tuple[List[models.Review], int]:
        return self._approved_page(db, models.Review.service_id, service_id, skip, limit)

    def get_reviews_by_provider(
        self, db: Session, provider_id: int, skip: int = 0, limit: int = 10
    ) -> Tuple[List[models.Review], int]:
        return self._approved_page(db, models.Review.provider_id, provider_id, skip, limit)

    def has_review_by_customer(self, db: Session, customer_id: int) -> bool:
        return (
            db.query(models.Review.id)
            .filter(models.Review.customer_id == customer_id)
            .first()
            is not None
        )

    def create_review(
        self, db: Session, review: schemas.ReviewCreate, booking: models.Booking
    ) -> models.Review:
        db_review = models.Review(
            **review.model_dump(exclude={"booking_id"}),
            booking_id=booking.id,
            customer_id=booking.customer_id,
            provider_id=booking.provider_id,
            service_id=booking.service_id,
        )
        db.add(db_review)
        db.flush()
        self.recompute_service_rating(db, booking.service_id)
        db.commit()
        db.refresh(db_review)
        return db_review

    def update_review(
        self, db: Session, db_review: models.Review, review_in: schemas.ReviewUpdate
    ) -> models.Review:
        for field, value in review_in.model_dump(exclude_unset=True).items():
            setattr(db_review, field, value)
        db.flush()
        self.recompute_service_rating(db, db_review.service_id)
        db.commit()
        db.refresh(db_review)
        return db_review

    def delete_review(self, db: Session, db_review: models.Review) -> None:
        service_id = db_review.service_id
        db.delete(db_review)
        db.flush()
        self.recompute_service_rating(db, service_id)
        db.commit()

    def recompute_service_rating(self, db: Session, service_id: Optional[int]) -> None:
        """Refresh ``average_rating`` and ``total_reviews`` from live reviews."""
        if service_id is None:
            return
        db_service = db.query(models.Service).filter(models.Service.id == service_id).first()
        if db_service is None:
            return
        avg, count = (
            db.query(func.avg(models.Review.rating), func.count(models.Review.id))
            .filter(models.Review.service_id == service_id)
            .one()
        )
        db_service.average_rating = round(float(avg), 2) if count else 0.0
        db_service.total_reviews = count or 0


review = CRUDReview()
