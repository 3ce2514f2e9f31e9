from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, selectinload

from .. import models


def create_message(
    db: Session,
    sender_id: int,
    receiver_id: int,
    content: str,
    message_type: models.MessageType = models.MessageType.TEXT,
    booking_id: Optional[int] = None,
    attachments: Optional[List[str]] = None,
) -> models.Message:
    db_msg = models.Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        booking_id=booking_id,
        content=content,
        message_type=message_type,
        attachments=list(attachments or []),
    )
    db.add(db_msg)
    db.commit()
    db.refresh(db_msg)
    return db_msg


def get_message(db: Session, message_id: int) -> Optional[models.Message]:
    return db.query(models.Message).filter(models.Message.id == message_id).first()


def _with_parties(query):
    return query.options(
        selectinload(models.Message.sender),
        selectinload(models.Message.receiver),
    )


def get_conversation(
    db: Session,
    user_id: int,
    other_user_id: int,
    booking_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
) -> Tuple[List[models.Message], int]:
    """Return one page of the thread between two accounts, oldest first.

    Pages are cut from the newest end, so page 1 holds the latest messages.
    """
    query = db.query(models.Message).filter(
        or_(
            and_(
                models.Message.sender_id == user_id,
                models.Message.receiver_id == other_user_id,
            ),
            and_(
                models.Message.sender_id == other_user_id,
                models.Message.receiver_id == user_id,
            ),
        )
    )
    if booking_id is not None:
        query = query.filter(models.Message.booking_id == booking_id)
    total = query.count()
    items = (
        _with_parties(query)
        .order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    items.reverse()
    return items, total


def get_unread_counts_by_sender(db: Session, user_id: int) -> Dict[int, int]:
    rows = (
        db.query(models.Message.sender_id, func.count(models.Message.id))
        .filter(
            models.Message.receiver_id == user_id,
            models.Message.is_read.is_(False),
        )
        .group_by(models.Message.sender_id)
        .all()
    )
    return {sender_id: count for sender_id, count in rows}


def get_conversations_for_user(
    db: Session, user_id: int
) -> List[Tuple[models.User, models.Message, int]]:
    """Latest message per counterparty, most recent conversation first.

    Each entry is ``(other_user, last_message, unread_count)``.
    """
    messages = (
        _with_parties(db.query(models.Message))
        .filter(
            or_(
                models.Message.sender_id == user_id,
                models.Message.receiver_id == user_id,
            )
        )
        .order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .all()
    )
    unread = get_unread_counts_by_sender(db, user_id)
    latest: Dict[int, models.Message] = {}
    for msg in messages:
        other_id = msg.receiver_id if msg.sender_id == user_id else msg.sender_id
        latest.setdefault(other_id, msg)
    return [
        (
            msg.receiver if msg.sender_id == user_id else msg.sender,
            msg,
            unread.get(other_id, 0),
        )
        for other_id, msg in latest.items()
    ]


def mark_messages_read(db: Session, user_id: int, message_ids: List[int]) -> int:
    """Mark the given messages addressed to ``user_id`` as read.

    Messages sent to someone else and ones already read are left alone.
    """
    if not message_ids:
        return 0
    updated = (
        db.query(models.Message)
        .filter(
            models.Message.id.in_(message_ids),
            models.Message.receiver_id == user_id,
            models.Message.is_read.is_(False),
        )
        .update(
            {models.Message.is_read: True, models.Message.read_at: datetime.utcnow()},
            synchronize_session="fetch",
        )
    )
    db.commit()
    return int(updated)


def delete_message(db: Session, db_msg: models.Message) -> None:
    db.delete(db_msg)
    db.commit()
