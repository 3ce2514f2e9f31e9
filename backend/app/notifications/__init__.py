from .sink import DatabaseNotificationSink, NotificationEvent, NotificationSink

__all__ = [
    "DatabaseNotificationSink",
    "NotificationEvent",
    "NotificationSink",
]
