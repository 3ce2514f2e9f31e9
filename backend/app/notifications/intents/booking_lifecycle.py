from __future__ import annotations

from app import models
from app.models import BookingStatus, NotificationType
from app.notifications.sink import NotificationEvent, NotificationSink


def _service_name(booking: models.Booking) -> str:
    return booking.service.title if booking.service is not None else "your service"


def send_new_booking_notification(sink: NotificationSink, booking: models.Booking) -> None:
    """Tell the provider a customer booked one of their listings."""
    sink.publish(
        booking.provider_id,
        NotificationEvent(
            type=NotificationType.NEW_BOOKING,
            title="New Booking",
            message=(
                f"New booking for {_service_name(booking)} on "
                f"{booking.scheduled_date.isoformat()} at {booking.scheduled_time}."
            ),
            link=f"/bookings/{booking.id}",
            data={"bookingId": booking.id},
        ),
    )


def send_booking_status_update_notification(
    sink: NotificationSink,
    booking: models.Booking,
    recipient_id: int,
    status: BookingStatus,
) -> None:
    sink.publish(
        recipient_id,
        NotificationEvent(
            type=NotificationType.BOOKING_STATUS_UPDATED,
            title="Booking Status Updated",
            message=f"Your booking for {_service_name(booking)} is now {status.value.replace('_', ' ')}.",
            link=f"/bookings/{booking.id}",
            data={"bookingId": booking.id, "status": status.value},
        ),
    )
