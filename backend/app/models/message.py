from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, JSON, Text
from sqlalchemy.orm import relationship

from .base import BaseModel, LenientEnum, enum_values


class MessageType(LenientEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"


class Message(BaseModel):
    __tablename__ = "messages"
    __table_args__ = (
        # Conversation reads filter on the sender/receiver pair, newest first
        Index("ix_messages_pair_time", "sender_id", "receiver_id", "created_at"),
    )

    id           = Column(Integer, primary_key=True, index=True)
    sender_id    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id  = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_id   = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True, index=True)
    content      = Column(Text, nullable=False)
    message_type = Column(
        Enum(MessageType, values_callable=enum_values, native_enum=False, name="messagetype"),
        nullable=False,
        default=MessageType.TEXT,
    )
    attachments  = Column(JSON, nullable=False, default=list)
    is_read      = Column(Boolean, nullable=False, default=False)
    read_at      = Column(DateTime, nullable=True)

    sender   = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    booking  = relationship("Booking")
