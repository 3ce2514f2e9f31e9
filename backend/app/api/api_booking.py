# backend/app/api/api_booking.py


from typing import List, Optional


from fastapi import APIRouter, Depends, Query, status


from ..models import BookingStatus, User
from ..schemas.booking import (
    BookingCancel,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
)
from ..schemas.common import ApiResponse, Pagination
from ..services.booking_lifecycle import BookingLifecycleManager, Location, Schedule
from .dependencies import (
    PageParams,
    get_booking_manager,
    get_current_provider,
    get_current_user,
    get_page_params,
)


router = APIRouter()


def _page_response(items, total: int, params: PageParams) -> ApiResponse[List[BookingResponse]]:
    return ApiResponse(
        data=[BookingResponse.model_validate(b) for b in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=ApiResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_in: BookingCreate,
    current_user: User = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    booking = manager.create(
        customer_id=current_user.id,
        listing_id=booking_in.service_id,
        schedule=Schedule(
            scheduled_date=booking_in.scheduled_date,
            scheduled_time=booking_in.scheduled_time,
            duration_minutes=booking_in.duration_minutes,
        ),
        location=Location(
            address=booking_in.address,
            city=booking_in.city,
            postal_code=booking_in.postal_code,
        ),
        amount=booking_in.total_amount,
        notes=booking_in.notes,
    )
    return ApiResponse(
        message="Booking created successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.get("/user", response_model=ApiResponse[List[BookingResponse]])
def read_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    page = manager.list_for_customer(current_user.id, status_filter, params.page, params.limit)
    return _page_response(page.items, page.total, params)


@router.get("/user/{booking_id}", response_model=ApiResponse[BookingResponse])
def read_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    booking = manager.get(booking_id, current_user.id)
    return ApiResponse(data=BookingResponse.model_validate(booking))


@router.get("/provider", response_model=ApiResponse[List[BookingResponse]])
def read_provider_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(get_current_provider),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    page = manager.list_for_provider(current_user.id, status_filter, params.page, params.limit)
    return _page_response(page.items, page.total, params)


@router.get("/provider/{booking_id}", response_model=ApiResponse[BookingResponse])
def read_provider_booking(
    booking_id: int,
    current_user: User = Depends(get_current_provider),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    booking = manager.get(booking_id, current_user.id)
    return ApiResponse(data=BookingResponse.model_validate(booking))


@router.put("/user/{booking_id}/cancel", response_model=ApiResponse[BookingResponse])
def cancel_booking(
    booking_id: int,
    body: Optional[BookingCancel] = None,
    current_user: User = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    booking = manager.advance_status(
        booking_id,
        current_user.id,
        BookingStatus.CANCELLED,
        cancellation_reason=body.cancellation_reason if body else None,
    )
    return ApiResponse(
        message="Booking cancelled successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.put("/provider/{booking_id}/status", response_model=ApiResponse[BookingResponse])
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager),
):
    booking = manager.advance_status(
        booking_id,
        current_user.id,
        update.status,
        cancellation_reason=update.cancellation_reason,
        completion_notes=update.completion_notes,
    )
    return ApiResponse(
        message="Booking status updated successfully",
        data=BookingResponse.model_validate(booking),
    )
