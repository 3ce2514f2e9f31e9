from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field

from ..models.booking_status import BookingStatus
from .common import CamelModel
from .service import ServiceSummary
from .user import UserSummary

TimeOfDay = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


class BookingCreate(CamelModel):
    service_id: int
    scheduled_date: date
    scheduled_time: TimeOfDay
    duration_minutes: Optional[Annotated[int, Field(gt=0)]] = None
    address: Annotated[str, Field(min_length=5, max_length=200)]
    city: Annotated[str, Field(min_length=2, max_length=50)]
    postal_code: Optional[str] = None
    notes: Optional[str] = None
    # Falls back to the listing price when omitted
    total_amount: Optional[Annotated[Decimal, Field(ge=0)]] = None


class BookingStatusUpdate(CamelModel):
    status: BookingStatus
    cancellation_reason: Optional[str] = None
    completion_notes: Optional[str] = None


class BookingCancel(CamelModel):
    cancellation_reason: Optional[str] = None


class BookingResponse(CamelModel):
    id: int
    customer_id: int
    provider_id: int
    service_id: Optional[int] = None
    scheduled_date: date
    scheduled_time: str
    duration_minutes: Optional[int] = None
    status: BookingStatus
    total_amount: Decimal
    address: str
    city: Optional[str] = None
    postal_code: Optional[str] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    completion_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    # Nested details for dashboards
    customer: Optional[UserSummary] = None
    provider: Optional[UserSummary] = None
    service: Optional[ServiceSummary] = None
