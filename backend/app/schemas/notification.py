from datetime import datetime
from typing import Optional

from ..models.notification import NotificationType
from .common import CamelModel


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime


class UnreadCount(CamelModel):
    count: int
