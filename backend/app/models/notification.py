from sqlalchemy import Column, Integer, String, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship

from .base import BaseModel, LenientEnum, enum_values


class NotificationType(LenientEnum):
    NEW_BOOKING = "new_booking"
    BOOKING_STATUS_UPDATED = "booking_status_updated"
    REVIEW_RECEIVED = "review_received"
    REFERRAL_COMPLETED = "referral_completed"
    NEW_MESSAGE = "new_message"
    INFO = "info"


class Notification(BaseModel):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(
        Enum(NotificationType, values_callable=enum_values, native_enum=False, name="notificationtype"),
        nullable=False,
        default=NotificationType.INFO,
    )
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    link = Column(String, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)

    user = relationship("User", backref="notifications")
