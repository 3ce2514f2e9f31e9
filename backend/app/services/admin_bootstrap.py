from __future__ import annotations

import logging
import os
from typing import Optional

from sqlalchemy.orm import Session

from ..database import get_db_session
from ..models import User, UserRole
from ..utils.auth import get_password_hash, normalize_email

logger = logging.getLogger(__name__)


def promote_to_admin(db: Session, email: str) -> Optional[User]:
    """Give an existing account the admin role; None when no such account."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        return None
    user.role = UserRole.ADMIN
    user.is_verified = True
    user.is_active = True
    db.commit()
    db.refresh(user)
    logger.info("admin.promoted", extra={"user_id": user.id})
    return user


def ensure_default_admin() -> Optional[User]:
    """Create an admin account from DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD.

    Does nothing unless both variables are set, or when an admin exists.
    """
    email = (os.getenv("DEFAULT_ADMIN_EMAIL") or "").strip()
    password = os.getenv("DEFAULT_ADMIN_PASSWORD") or ""
    if not email or not password:
        return None

    with get_db_session() as session:
        if session.query(User).filter(User.role == UserRole.ADMIN).count() > 0:
            return None
        user = promote_to_admin(session, email)
        if user is not None:
            return user
        user = User(
            email=normalize_email(email),
            password=get_password_hash(password),
            first_name="Admin",
            last_name="User",
            role=UserRole.ADMIN,
            is_verified=True,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("admin.bootstrapped", extra={"user_id": user.id})
        return user
