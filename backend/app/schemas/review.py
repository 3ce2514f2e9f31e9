from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field

from .common import CamelModel
from .user import UserSummary

Rating = Annotated[int, Field(ge=1, le=5)]


class ReviewBase(CamelModel):
    rating: Rating
    title: Optional[Annotated[str, Field(min_length=3, max_length=100)]] = None
    comment: Optional[Annotated[str, Field(min_length=10, max_length=500)]] = None
    images: List[str] = Field(default_factory=list)


class ReviewCreate(ReviewBase):
    """Customer -> provider review payload (booking-bound)."""

    booking_id: int


class ReviewUpdate(CamelModel):
    rating: Optional[Rating] = None
    title: Optional[Annotated[str, Field(min_length=3, max_length=100)]] = None
    comment: Optional[Annotated[str, Field(min_length=10, max_length=500)]] = None
    images: Optional[List[str]] = None


class ReviewRespond(CamelModel):
    response: Annotated[str, Field(min_length=1, max_length=1000)]


class ReviewResponse(ReviewBase):
    id: int
    booking_id: int
    customer_id: int
    provider_id: int
    service_id: Optional[int] = None
    is_approved: bool
    provider_response: Optional[str] = None
    response_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[UserSummary] = None
