from __future__ import annotations

from app import models
from app.models import NotificationType
from app.notifications.sink import NotificationEvent, NotificationSink

_PREVIEW_LENGTH = 80


def _preview(content: str) -> str:
    if len(content) <= _PREVIEW_LENGTH:
        return content
    return content[: _PREVIEW_LENGTH - 3].rstrip() + "..."


def send_new_message_notification(
    sink: NotificationSink, message: models.Message, sender: models.User
) -> None:
    sink.publish(
        message.receiver_id,
        NotificationEvent(
            type=NotificationType.NEW_MESSAGE,
            title=f"New message from {sender.full_name}",
            message=_preview(message.content),
            link=f"/messages?userId={sender.id}",
            data={
                "messageId": message.id,
                "senderId": sender.id,
                "bookingId": message.booking_id,
            },
        ),
    )
