"""Notification delivery for the workflows.

Workflows receive a :class:`NotificationSink` and call ``publish`` with the
recipient's account id; they never reach for socket or Redis state directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session

from app.crud import crud_notification
from app.models import NotificationType
from app.realtime import bus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)


class NotificationSink(Protocol):
    def publish(self, account_id: int, event: NotificationEvent) -> None:
        ...


class DatabaseNotificationSink:
    """Persist an in-app notification and mirror it onto the realtime bus."""

    def __init__(self, db: Session):
        self.db = db

    def publish(self, account_id: int, event: NotificationEvent) -> None:
        db_obj = crud_notification.create_notification(
            self.db,
            user_id=account_id,
            type=event.type,
            title=event.title,
            message=event.message,
            link=event.link,
        )
        logger.info(
            "notification.created",
            extra={"account_id": account_id, "notification_type": event.type.value},
        )
        bus.publish_user_event(
            account_id,
            {
                "type": "notification",
                "payload": {
                    "id": db_obj.id,
                    "type": event.type.value,
                    "title": event.title,
                    "message": event.message,
                    "link": event.link,
                    "data": event.data,
                    "createdAt": db_obj.created_at,
                },
            },
        )

