from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from .. import models, crud
from ..schemas.common import ApiResponse, Pagination
from ..schemas.notification import NotificationResponse, UnreadCount
from .dependencies import PageParams, get_db, get_current_user, get_page_params
from ..utils import error_response

router = APIRouter(tags=["notifications"])

logger = logging.getLogger(__name__)


def _get_own_notification(db: Session, notification_id: int, user: models.User):
    db_notif = crud.crud_notification.get_notification(db, notification_id)
    if not db_notif or db_notif.user_id != user.id:
        raise error_response(
            "Notification not found",
            {"notification_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_notif


@router.get("/notifications", response_model=ApiResponse[List[NotificationResponse]])
def read_my_notifications(
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Retrieve the caller's notifications, newest first."""
    items, total = crud.crud_notification.get_notifications_for_user(
        db, current_user.id, skip=params.skip, limit=params.limit
    )
    return ApiResponse(
        data=[NotificationResponse.model_validate(n) for n in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.get("/notifications/unread-count", response_model=ApiResponse[UnreadCount])
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    count = crud.crud_notification.get_unread_count(db, current_user.id)
    return ApiResponse(data=UnreadCount(count=count))


@router.put("/notifications/read-all", response_model=ApiResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Mark all notifications as read for the current user."""
    updated = crud.crud_notification.mark_all_read(db, current_user.id)
    logger.info("Marked %s notifications read for user %s", updated, current_user.id)
    return ApiResponse(message="All notifications marked as read")


@router.put(
    "/notifications/{notification_id}/read",
    response_model=ApiResponse[NotificationResponse],
)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Mark a notification as read."""
    db_notif = _get_own_notification(db, notification_id, current_user)
    updated = crud.crud_notification.mark_as_read(db, db_notif)
    return ApiResponse(data=NotificationResponse.model_validate(updated))


@router.delete("/notifications/{notification_id}", response_model=ApiResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    db_notif = _get_own_notification(db, notification_id, current_user)
    crud.crud_notification.delete_notification(db, db_notif)
    return ApiResponse(message="Notification deleted successfully")
