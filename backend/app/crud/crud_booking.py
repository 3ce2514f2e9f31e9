from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple

from .. import models
from ..models.booking_status import BookingStatus


class CRUDBooking:
    def get_booking(self, db: Session, booking_id: int) -> Optional[models.Booking]:
        return (
            db.query(models.Booking)
            .options(
                joinedload(models.Booking.customer),
                joinedload(models.Booking.provider),
                joinedload(models.Booking.service),
            )
            .filter(models.Booking.id == booking_id)
            .first()
        )

    def _list_by(
        self,
        db: Session,
        column,
        account_id: int,
        status: Optional[BookingStatus],
        skip: int,
        limit: int,
    ) -> Tuple[List[models.Booking], int]:
        query = db.query(models.Booking).filter(column == account_id)
        if status is not None:
            query = query.filter(models.Booking.status == status)
        total = query.count()
        items = (
            query.options(
                joinedload(models.Booking.customer),
                joinedload(models.Booking.provider),
                joinedload(models.Booking.service),
            )
            .order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def get_bookings_by_customer(
        self,
        db: Session,
        customer_id: int,
        status: Optional[BookingStatus] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[models.Booking], int]:
        return self._list_by(db, models.Booking.customer_id, customer_id, status, skip, limit)

    def get_bookings_by_provider(
        self,
        db: Session,
        provider_id: int,
        status: Optional[BookingStatus] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[models.Booking], int]:
        return self._list_by(db, models.Booking.provider_id, provider_id, status, skip, limit)

    def create_booking(self, db: Session, **fields) -> models.Booking:
        db_booking = models.Booking(status=BookingStatus.PENDING, **fields)
        db.add(db_booking)
        db.commit()
        db.refresh(db_booking)
        return db_booking

    def has_completed_booking(self, db: Session, account_id: int) -> bool:
        """True when ``account_id`` took part in a completed booking on either side."""
        return (
            db.query(models.Booking.id)
            .filter(
                models.Booking.status == BookingStatus.COMPLETED,
                or_(
                    models.Booking.customer_id == account_id,
                    models.Booking.provider_id == account_id,
                ),
            )
            .first()
            is not None
        )


booking = CRUDBooking()
