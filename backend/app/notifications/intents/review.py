from __future__ import annotations

from app import models
from app.models import NotificationType
from app.notifications.sink import NotificationEvent, NotificationSink


def send_review_received_notification(sink: NotificationSink, review: models.Review) -> None:
    service_name = review.service.title if review.service is not None else "your service"
    sink.publish(
        review.provider_id,
        NotificationEvent(
            type=NotificationType.REVIEW_RECEIVED,
            title="New Review Received",
            message=f"You received a {review.rating}-star review for {service_name}.",
            link=f"/reviews/{review.id}",
            data={"reviewId": review.id, "rating": review.rating},
        ),
    )
