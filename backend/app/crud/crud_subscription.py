from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..models.subscription import PlanType, SubscriptionStatus


def get_subscription(db: Session, user_id: int) -> Optional[models.Subscription]:
    return db.query(models.Subscription).filter(models.Subscription.user_id == user_id).first()


def create_subscription(
    db: Session, user_id: int, sub_in: schemas.SubscriptionCreate
) -> models.Subscription:
    now = datetime.utcnow()
    db_sub = models.Subscription(
        user_id=user_id,
        plan_type=sub_in.plan_type,
        status=SubscriptionStatus.ACTIVE,
        current_period_start=now,
        current_period_end=now + timedelta(days=30),
    )
    db.add(db_sub)
    db.commit()
    db.refresh(db_sub)
    return db_sub


def update_subscription(
    db: Session, db_sub: models.Subscription, sub_in: schemas.SubscriptionUpdate
) -> models.Subscription:
    for field, value in sub_in.model_dump(exclude_unset=True).items():
        setattr(db_sub, field, value)
    db.commit()
    db.refresh(db_sub)
    return db_sub


def cancel_subscription(db: Session, db_sub: models.Subscription) -> models.Subscription:
    """Keep access until the period ends, then lapse."""
    db_sub.cancel_at_period_end = True
    db_sub.status = SubscriptionStatus.CANCELLED
    db.commit()
    db.refresh(db_sub)
    return db_sub


def grant_premium(db: Session, user_id: int, days: int) -> models.Subscription:
    """Upsert an active premium subscription running ``days`` from now.

    Does not commit.
    """
    now = datetime.utcnow()
    db_sub = get_subscription(db, user_id)
    if db_sub is None:
        db_sub = models.Subscription(user_id=user_id)
        db.add(db_sub)
    db_sub.plan_type = PlanType.PREMIUM
    db_sub.status = SubscriptionStatus.ACTIVE
    db_sub.current_period_start = now
    db_sub.current_period_end = now + timedelta(days=days)
    db_sub.cancel_at_period_end = False
    db.flush()
    return db_sub
