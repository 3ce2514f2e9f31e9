from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, field_validator

from ..models.message import MessageType
from .common import CamelModel
from .user import UserSummary


class MessageCreate(CamelModel):
    receiver_id: int
    booking_id: Optional[int] = None
    content: Annotated[str, Field(min_length=1, max_length=1000)]
    message_type: MessageType = MessageType.TEXT
    attachments: List[str] = Field(default_factory=list)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    booking_id: Optional[int] = None
    content: str
    message_type: MessageType
    attachments: List[str] = Field(default_factory=list)
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None


class ConversationSummary(CamelModel):
    """Latest message exchanged with one other account."""

    other_user: UserSummary
    last_message: MessageResponse
    unread_count: int = 0


class MessagesMarkRead(CamelModel):
    message_ids: List[int]


class MessagesMarkedRead(CamelModel):
    updated: int
