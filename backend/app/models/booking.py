# backend/app/models/booking.py

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel, enum_values
from .booking_status import BookingStatus


class Booking(BaseModel):
    __tablename__ = "bookings"

    id             = Column(Integer, primary_key=True, index=True)
    customer_id    = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id    = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id     = Column(Integer, ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(String(5), nullable=False)  # HH:MM
    duration_minutes = Column(Integer, nullable=True)
    status         = Column(
        Enum(BookingStatus, values_callable=enum_values, native_enum=False, name="bookingstatus"),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    total_amount   = Column(Numeric(10, 2), nullable=False)
    address        = Column(String, nullable=False)
    city           = Column(String, nullable=True)
    postal_code    = Column(String, nullable=True)
    notes          = Column(Text, nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    completion_notes    = Column(Text, nullable=True)
    completed_at   = Column(DateTime, nullable=True)
    cancelled_at   = Column(DateTime, nullable=True)

    # Relationships
    customer = relationship("User", foreign_keys=[customer_id])
    provider = relationship("User", foreign_keys=[provider_id])
    service  = relationship("Service", back_populates="bookings")
    review   = relationship("Review", back_populates="booking", uselist=False)
