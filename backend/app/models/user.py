# backend/app/models/user.py

from sqlalchemy import Boolean, Column, Integer, String, Enum
from sqlalchemy.orm import relationship
from .base import BaseModel, LenientEnum, enum_values


class UserRole(LenientEnum):
    """Enumeration of all supported account roles."""

    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"


class Language(LenientEnum):
    LATVIAN = "latvian"
    RUSSIAN = "russian"
    ENGLISH = "english"


class User(BaseModel):
    __tablename__ = "users"

    id           = Column(Integer, primary_key=True, index=True)
    email        = Column(String, unique=True, index=True, nullable=False)
    password     = Column(String, nullable=False)
    first_name   = Column(String, nullable=False)
    last_name    = Column(String, nullable=False)
    phone        = Column(String, nullable=True)
    role         = Column(
        Enum(UserRole, values_callable=enum_values, native_enum=False, name="userrole"),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    language     = Column(
        Enum(Language, values_callable=enum_values, native_enum=False, name="language"),
        nullable=False,
        default=Language.LATVIAN,
    )
    is_active    = Column(Boolean, nullable=False, default=True)
    is_verified  = Column(Boolean, nullable=False, default=False)

    # If this account is a provider it gets exactly one profile here
    provider_profile = relationship(
        "ProviderProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    services = relationship(
        "Service",
        back_populates="provider",
        cascade="all, delete-orphan",
    )

    subscription = relationship(
        "Subscription",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
