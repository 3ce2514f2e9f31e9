from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class Review(BaseModel):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("customer_id", "booking_id", name="uq_reviews_customer_booking"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id  = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id  = Column(Integer, ForeignKey("services.id", ondelete="SET NULL"), nullable=True, index=True)

    rating      = Column(Integer, nullable=False)  # 1..5
    title       = Column(String, nullable=True)
    comment     = Column(Text, nullable=True)
    images      = Column(JSON, nullable=False, default=list)
    is_approved = Column(Boolean, nullable=False, default=True)

    provider_response = Column(Text, nullable=True)
    response_date     = Column(DateTime, nullable=True)

    # Each Review is attached to exactly one Booking
    booking  = relationship("Booking", back_populates="review")
    service  = relationship("Service", back_populates="reviews")
    customer = relationship("User", foreign_keys=[customer_id])
    provider = relationship("User", foreign_keys=[provider_id])
