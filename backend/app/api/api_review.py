from datetime import datetime
from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..crud.crud_booking import booking as crud_booking
from ..crud.crud_review import review as crud_review
from ..database import get_db
from ..models import BookingStatus, User
from ..notifications.intents.review import send_review_received_notification
from ..notifications.sink import NotificationSink
from ..schemas.common import ApiResponse, Pagination
from ..schemas.review import ReviewCreate, ReviewRespond, ReviewResponse, ReviewUpdate
from ..utils import error_response
from .dependencies import (
    PageParams,
    get_current_user,
    get_notification_sink,
    get_page_params,
)

router = APIRouter(tags=["Reviews"])


def _get_review_or_404(db: Session, review_id: int):
    db_review = crud_review.get_review(db, review_id)
    if db_review is None:
        raise error_response(
            "Review not found",
            {"review_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_review


@router.post(
    "",
    response_model=ApiResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    *,
    db: Session = Depends(get_db),
    review_in: ReviewCreate,
    current_user: User = Depends(get_current_user),
    sink: NotificationSink = Depends(get_notification_sink),
) -> Any:
    """
    Create a review for a booking.
    Only the customer who made the booking can review it, and only if it's completed.
    """
    booking = crud_booking.get_booking(db, review_in.booking_id)
    if not booking:
        raise error_response(
            "Booking not found",
            {"bookingId": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )

    if booking.customer_id != current_user.id:
        raise error_response(
            "You can only review your own bookings",
            {},
            status.HTTP_403_FORBIDDEN,
        )

    if booking.status != BookingStatus.COMPLETED:
        raise error_response(
            "Booking must be completed to leave a review",
            {"bookingId": "not_completed"},
            status.HTTP_400_BAD_REQUEST,
        )

    if crud_review.get_review_by_booking(db, booking.id):
        raise error_response(
            "You have already reviewed this booking",
            {"bookingId": "already_reviewed"},
            status.HTTP_400_BAD_REQUEST,
        )

    db_review = crud_review.create_review(db, review_in, booking)
    send_review_received_notification(sink, db_review)
    return ApiResponse(
        message="Review created successfully",
        data=ReviewResponse.model_validate(db_review),
    )


@router.put("/{review_id}", response_model=ApiResponse[ReviewResponse])
def update_review(
    review_id: int,
    review_in: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_review = _get_review_or_404(db, review_id)
    if db_review.customer_id != current_user.id:
        raise error_response("You can only update your own reviews", {}, status.HTTP_403_FORBIDDEN)
    db_review = crud_review.update_review(db, db_review, review_in)
    return ApiResponse(
        message="Review updated successfully",
        data=ReviewResponse.model_validate(db_review),
    )


@router.delete("/{review_id}", response_model=ApiResponse)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_review = _get_review_or_404(db, review_id)
    if db_review.customer_id != current_user.id:
        raise error_response("You can only delete your own reviews", {}, status.HTTP_403_FORBIDDEN)
    crud_review.delete_review(db, db_review)
    return ApiResponse(message="Review deleted successfully")


@router.put("/{review_id}/respond", response_model=ApiResponse[ReviewResponse])
def respond_to_review(
    review_id: int,
    body: ReviewRespond,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_review = _get_review_or_404(db, review_id)
    if db_review.provider_id != current_user.id:
        raise error_response(
            "You can only respond to reviews of your own services",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    db_review.provider_response = body.response
    db_review.response_date = datetime.utcnow()
    db.commit()
    db.refresh(db_review)
    return ApiResponse(
        message="Response added successfully",
        data=ReviewResponse.model_validate(db_review),
    )


@router.get("/service/{service_id}", response_model=ApiResponse[List[ReviewResponse]])
def list_service_reviews(
    service_id: int,
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    items, total = crud_review.get_reviews_by_service(db, service_id, params.skip, params.limit)
    return ApiResponse(
        data=[ReviewResponse.model_validate(r) for r in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.get("/provider/{provider_id}", response_model=ApiResponse[List[ReviewResponse]])
def list_provider_reviews(
    provider_id: int,
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    items, total = crud_review.get_reviews_by_provider(db, provider_id, params.skip, params.limit)
    return ApiResponse(
        data=[ReviewResponse.model_validate(r) for r in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )
