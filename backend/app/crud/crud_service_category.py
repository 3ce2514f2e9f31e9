from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models


def list_categories(db: Session) -> List[models.ServiceCategory]:
    return db.query(models.ServiceCategory).order_by(models.ServiceCategory.name_en.asc()).all()


def get_category(db: Session, category_id: int) -> Optional[models.ServiceCategory]:
    return db.query(models.ServiceCategory).filter(models.ServiceCategory.id == category_id).first()


def get_category_by_slug(db: Session, slug: str) -> Optional[models.ServiceCategory]:
    return (
        db.query(models.ServiceCategory)
        .filter(models.ServiceCategory.slug == slug.strip().lower())
        .first()
    )
