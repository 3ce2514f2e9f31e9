# backend/app/models/provider_profile.py

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class ProviderProfile(BaseModel):
    """Business details of a provider account."""

    __tablename__ = "provider_profiles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    business_name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    website = Column(String, nullable=True)
    has_insurance = Column(Boolean, nullable=False, default=False)
    # Set by an admin after documents were checked
    is_verified = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="provider_profile")
