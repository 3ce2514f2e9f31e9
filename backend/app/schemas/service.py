from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field, model_validator

from ..models.service import PriceType
from .common import CamelModel
from .service_category import ServiceCategoryResponse
from .user import UserSummary


# Shared properties
class ServiceBase(CamelModel):
    title: Optional[Annotated[str, Field(min_length=3, max_length=100)]] = None
    description: Optional[Annotated[str, Field(min_length=10, max_length=1000)]] = None
    price: Optional[Annotated[Decimal, Field(ge=0)]] = None
    price_type: Optional[PriceType] = None
    currency: Optional[str] = None
    duration_minutes: Optional[Annotated[int, Field(gt=0)]] = None
    city: Optional[str] = None
    category_id: Optional[int] = None
    # Clients may send a category slug like "cleaning" instead of the id.
    category_slug: Optional[str] = None
    is_available: Optional[bool] = None


# Properties to receive on item creation
class ServiceCreate(ServiceBase):
    title: Annotated[str, Field(min_length=3, max_length=100)]
    description: Annotated[str, Field(min_length=10, max_length=1000)]
    price: Annotated[Decimal, Field(ge=0)]
    price_type: PriceType = PriceType.FIXED

    @model_validator(mode="after")
    def category_required(cls, model: "ServiceCreate") -> "ServiceCreate":
        """Ensure that a category is provided either by slug or ID."""
        if model.category_id is None and not model.category_slug:
            raise ValueError("Either categorySlug or categoryId must be provided.")
        return model


# Properties to receive on item update
class ServiceUpdate(ServiceBase):
    is_active: Optional[bool] = None


# Properties to return to client
class ServiceResponse(CamelModel):
    id: int
    provider_id: int
    category_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    price: Decimal
    price_type: PriceType
    currency: str
    duration_minutes: Optional[int] = None
    city: Optional[str] = None
    is_available: bool
    is_active: bool
    is_featured: bool
    average_rating: float
    total_reviews: int
    created_at: datetime
    updated_at: datetime
    provider: Optional[UserSummary] = None
    category: Optional[ServiceCategoryResponse] = None


class ServiceSummary(CamelModel):
    id: int
    title: str
    price: Decimal
    price_type: PriceType
