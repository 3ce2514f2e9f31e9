"""Booking lifecycle: creation, status transitions and scoped reads.

Transitions follow ``BOOKING_TRANSITIONS``; who may request a target status
is looked up in ``_ALLOWED_TARGETS`` rather than branched on inline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app import crud, models
from app.models.booking_status import BOOKING_TRANSITIONS, BookingStatus
from app.notifications.intents.booking_lifecycle import (
    send_booking_status_update_notification,
    send_new_booking_notification,
)
from app.notifications.sink import NotificationSink
from app.utils.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    UnavailableError,
)

logger = logging.getLogger(__name__)

_PROVIDER = "provider"
_CUSTOMER = "customer"

# Target statuses each side of a booking may request
_ALLOWED_TARGETS: dict[str, frozenset[BookingStatus]] = {
    _PROVIDER: frozenset(
        {
            BookingStatus.CONFIRMED,
            BookingStatus.IN_PROGRESS,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
        }
    ),
    _CUSTOMER: frozenset({BookingStatus.CANCELLED}),
}

# Source statuses from which each side may cancel
_CANCELLABLE_FROM: dict[str, frozenset[BookingStatus]] = {
    _PROVIDER: frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
    _CUSTOMER: frozenset({BookingStatus.PENDING}),
}


@dataclass(frozen=True)
class Schedule:
    scheduled_date: date
    scheduled_time: str
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class Location:
    address: str
    city: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass
class BookingPage:
    items: list[models.Booking]
    total: int


class BookingLifecycleManager:
    def __init__(self, db: Session, sink: NotificationSink):
        self.db = db
        self.sink = sink

    def create(
        self,
        customer_id: int,
        listing_id: int,
        schedule: Schedule,
        location: Location,
        amount: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> models.Booking:
        listing = crud.service.get_service(self.db, listing_id)
        if listing is None:
            raise NotFoundError("Service not found")
        if not listing.is_available or not listing.is_active:
            raise UnavailableError("Service is not available")

        booking = crud.booking.create_booking(
            self.db,
            customer_id=customer_id,
            # Provider is snapshotted from the listing at creation time
            provider_id=listing.provider_id,
            service_id=listing.id,
            scheduled_date=schedule.scheduled_date,
            scheduled_time=schedule.scheduled_time,
            duration_minutes=schedule.duration_minutes or listing.duration_minutes,
            total_amount=amount if amount is not None else listing.price,
            address=location.address,
            city=location.city,
            postal_code=location.postal_code,
            notes=notes,
        )
        logger.info(
            "booking.created",
            extra={
                "booking_id": booking.id,
                "customer_id": customer_id,
                "provider_id": booking.provider_id,
                "service_id": listing.id,
            },
        )
        send_new_booking_notification(self.sink, booking)
        return booking

    def _side_of(self, booking: models.Booking, account_id: int) -> Optional[str]:
        if booking.provider_id == account_id:
            return _PROVIDER
        if booking.customer_id == account_id:
            return _CUSTOMER
        return None

    def advance_status(
        self,
        booking_id: int,
        acting_account_id: int,
        target_status: BookingStatus,
        cancellation_reason: Optional[str] = None,
        completion_notes: Optional[str] = None,
    ) -> models.Booking:
        booking = crud.booking.get_booking(self.db, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")

        side = self._side_of(booking, acting_account_id)
        if side is None:
            raise ForbiddenError("Access denied")
        if target_status not in _ALLOWED_TARGETS[side]:
            raise ForbiddenError("Only the service provider can update booking status")

        current = booking.status
        if target_status == BookingStatus.CANCELLED and current == BookingStatus.CANCELLED:
            raise InvalidTransitionError("Booking is already cancelled")
        if target_status not in BOOKING_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Cannot change booking status from {current.value} to {target_status.value}"
            )
        if target_status == BookingStatus.CANCELLED and current not in _CANCELLABLE_FROM[side]:
            raise InvalidTransitionError(
                f"A {current.value} booking can no longer be cancelled by the {side}"
            )

        now = datetime.utcnow()
        booking.status = target_status
        if target_status == BookingStatus.COMPLETED:
            booking.completed_at = now
            booking.completion_notes = completion_notes
        elif target_status == BookingStatus.CANCELLED:
            booking.cancelled_at = now
            booking.cancellation_reason = cancellation_reason
        self.db.commit()
        self.db.refresh(booking)

        logger.info(
            "booking.status_changed",
            extra={
                "booking_id": booking.id,
                "from_status": current.value,
                "to_status": target_status.value,
                "actor_id": acting_account_id,
            },
        )
        counterparty = booking.customer_id if side == _PROVIDER else booking.provider_id
        send_booking_status_update_notification(self.sink, booking, counterparty, target_status)
        return booking

    def get(self, booking_id: int, acting_account_id: int) -> models.Booking:
        booking = crud.booking.get_booking(self.db, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if self._side_of(booking, acting_account_id) is None:
            raise ForbiddenError("Access denied")
        return booking

    def list_for_customer(
        self,
        account_id: int,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> BookingPage:
        items, total = crud.booking.get_bookings_by_customer(
            self.db, account_id, status, skip=(page - 1) * page_size, limit=page_size
        )
        return BookingPage(items=items, total=total)

    def list_for_provider(
        self,
        account_id: int,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> BookingPage:
        items, total = crud.booking.get_bookings_by_provider(
            self.db, account_id, status, skip=(page - 1) * page_size, limit=page_size
        )
        return BookingPage(items=items, total=total)
