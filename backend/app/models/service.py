# backend/app/models/service.py
from sqlalchemy import (
    Boolean,
    Column,
    Enum as SQLAlchemyEnum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from .base import BaseModel, LenientEnum, enum_values


class PriceType(LenientEnum):
    FIXED = "fixed"
    HOURLY = "hourly"
    NEGOTIABLE = "negotiable"


class Service(BaseModel):
    """A provider's published listing."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        Integer, ForeignKey("service_categories.id", ondelete="SET NULL"), nullable=True
    )
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    price_type = Column(
        SQLAlchemyEnum(
            PriceType,
            values_callable=enum_values,
            native_enum=False,
            name="pricetype",
        ),
        nullable=False,
        default=PriceType.FIXED,
    )
    currency = Column(String(3), nullable=False, default="EUR")
    duration_minutes = Column(Integer, nullable=True)
    city = Column(String, nullable=True)

    is_available = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # Visibility boost granted by the referral program
    is_featured = Column(Boolean, nullable=False, default=False)

    # Aggregates maintained from live reviews
    average_rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)

    provider = relationship("User", back_populates="services")
    category = relationship("ServiceCategory", back_populates="services")

    # Deleting a listing keeps bookings and reviews; their service_id is nulled
    bookings = relationship("Booking", back_populates="service")
    reviews = relationship("Review", back_populates="service")
