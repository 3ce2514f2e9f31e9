# backend/app/schemas/user.py

import re
from datetime import datetime
from typing import Annotated, Optional

from pydantic import EmailStr, Field, field_validator

from ..models.user import Language, UserRole
from .common import CamelModel

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

Name = Annotated[str, Field(min_length=2, max_length=50)]


class UserBase(CamelModel):
    email: EmailStr
    first_name: Name
    last_name: Name
    phone: Optional[str] = None
    language: Language = Language.LATVIAN


class UserCreate(UserBase):
    password: Annotated[str, Field(min_length=8)]
    # Self-registration can only pick customer or provider
    role: UserRole = UserRole.CUSTOMER
    business_name: Optional[str] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not _PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return v

    @field_validator("role")
    @classmethod
    def no_admin_signup(cls, v: UserRole) -> UserRole:
        if v == UserRole.ADMIN:
            raise ValueError("Role must be either customer or provider")
        return v


class UserLogin(CamelModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1)]


class UserUpdate(CamelModel):
    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    phone: Optional[str] = None
    language: Optional[Language] = None


class ProviderProfileUpdate(CamelModel):
    business_name: Optional[Annotated[str, Field(min_length=2, max_length=100)]] = None
    description: Optional[Annotated[str, Field(min_length=10, max_length=1000)]] = None
    address: Optional[Annotated[str, Field(min_length=5, max_length=200)]] = None
    city: Optional[Annotated[str, Field(min_length=2, max_length=50)]] = None
    postal_code: Optional[Annotated[str, Field(min_length=4, max_length=10)]] = None
    website: Optional[str] = None
    has_insurance: Optional[bool] = None


class ProviderProfileResponse(CamelModel):
    user_id: int
    business_name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    website: Optional[str] = None
    has_insurance: bool
    is_verified: bool


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: UserRole
    language: Language
    is_active: bool
    is_verified: bool
    created_at: datetime
    provider_profile: Optional[ProviderProfileResponse] = None


class UserSummary(CamelModel):
    """Compact account details nested inside bookings and reviews."""

    id: int
    first_name: str
    last_name: str


class UserStats(CamelModel):
    total_bookings: int
    completed_bookings: int
    total_reviews: int
    total_services: int = 0
    average_rating: float = 0.0


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# TokenData for extracting "sub" (email) from JWT
class TokenData(CamelModel):
    email: Optional[str] = None
