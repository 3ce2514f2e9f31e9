from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models


def create_notification(
    db: Session,
    user_id: int,
    type: models.NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> models.Notification:
    db_obj = models.Notification(
        user_id=user_id, type=type, title=title, message=message, link=link
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_notifications_for_user(
    db: Session, user_id: int, skip: int = 0, limit: int = 10
) -> Tuple[List[models.Notification], int]:
    """Return notifications newest first with the total count."""
    query = db.query(models.Notification).filter(models.Notification.user_id == user_id)
    total = query.count()
    items = (
        query.order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def get_unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(models.Notification)
        .filter(
            models.Notification.user_id == user_id,
            models.Notification.is_read.is_(False),
        )
        .count()
    )


def get_notification(db: Session, notification_id: int) -> Optional[models.Notification]:
    return (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id)
        .first()
    )


def mark_as_read(db: Session, db_obj: models.Notification) -> models.Notification:
    db_obj.is_read = True
    db.commit()
    db.refresh(db_obj)
    return db_obj


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(models.Notification)
        .filter(
            models.Notification.user_id == user_id,
            models.Notification.is_read.is_(False),
        )
        .update({models.Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, db_obj: models.Notification) -> None:
    db.delete(db_obj)
    db.commit()
