import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..core.config import settings
from ..database import get_db
from ..notifications.intents.message import send_new_message_notification
from ..notifications.sink import NotificationSink
from ..schemas.common import ApiResponse, Pagination
from ..schemas.message import (
    ConversationSummary,
    MessageCreate,
    MessageResponse,
    MessagesMarkRead,
    MessagesMarkedRead,
)
from ..schemas.user import UserSummary
from ..utils import error_response
from .dependencies import get_current_user, get_notification_sink

router = APIRouter(tags=["messages"])

logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    message_in: MessageCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    sink: NotificationSink = Depends(get_notification_sink),
) -> Any:
    """Send a direct message, optionally tied to a booking both sides share."""
    if message_in.receiver_id == current_user.id:
        raise error_response(
            "You cannot send a message to yourself",
            {"receiverId": "self"},
            status.HTTP_400_BAD_REQUEST,
        )
    receiver = crud.user.get_user(db, message_in.receiver_id)
    if receiver is None or not receiver.is_active:
        raise error_response(
            "Receiver not found",
            {"receiverId": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )

    if message_in.booking_id is not None:
        booking = crud.booking.get_booking(db, message_in.booking_id)
        if booking is None:
            raise error_response(
                "Booking not found",
                {"bookingId": "not_found"},
                status.HTTP_404_NOT_FOUND,
            )
        if current_user.id not in (booking.customer_id, booking.provider_id):
            raise error_response(
                "Access denied to this booking",
                {},
                status.HTTP_403_FORBIDDEN,
            )

    msg = crud.crud_message.create_message(
        db,
        sender_id=current_user.id,
        receiver_id=receiver.id,
        content=message_in.content,
        message_type=message_in.message_type,
        booking_id=message_in.booking_id,
        attachments=message_in.attachments,
    )
    logger.info(
        "message.sent",
        extra={
            "message_id": msg.id,
            "sender_id": current_user.id,
            "receiver_id": receiver.id,
            "booking_id": msg.booking_id,
        },
    )
    send_new_message_notification(sink, msg, current_user)
    return ApiResponse(
        message="Message sent successfully",
        data=MessageResponse.model_validate(msg),
    )


@router.get("/conversations", response_model=ApiResponse[List[ConversationSummary]])
def read_conversations(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    conversations = crud.crud_message.get_conversations_for_user(db, current_user.id)
    return ApiResponse(
        data=[
            ConversationSummary(
                other_user=UserSummary.model_validate(other),
                last_message=MessageResponse.model_validate(last),
                unread_count=unread,
            )
            for other, last, unread in conversations
        ]
    )


@router.get("/conversation", response_model=ApiResponse[List[MessageResponse]])
def read_conversation(
    other_user_id: int = Query(..., alias="otherUserId", ge=1),
    booking_id: Optional[int] = Query(None, alias="bookingId", ge=1),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Messages exchanged with ``otherUserId``; pages count back from the newest."""
    items, total = crud.crud_message.get_conversation(
        db,
        current_user.id,
        other_user_id,
        booking_id=booking_id,
        skip=(page - 1) * limit,
        limit=limit,
    )
    return ApiResponse(
        data=[MessageResponse.model_validate(m) for m in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.put("/read", response_model=ApiResponse[MessagesMarkedRead])
def mark_messages_read(
    body: MessagesMarkRead,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    updated = crud.crud_message.mark_messages_read(db, current_user.id, body.message_ids)
    return ApiResponse(
        message="Messages marked as read",
        data=MessagesMarkedRead(updated=updated),
    )


@router.delete("/{message_id}", response_model=ApiResponse)
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    msg = crud.crud_message.get_message(db, message_id)
    if msg is None:
        raise error_response(
            "Message not found",
            {"message_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    # Only the original sender may delete a message
    if msg.sender_id != current_user.id:
        raise error_response(
            "You can only delete your own messages",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    crud.crud_message.delete_message(db, msg)
    logger.info("message.deleted", extra={"message_id": message_id, "sender_id": current_user.id})
    return ApiResponse(message="Message deleted successfully")
