from dataclasses import dataclass

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, joinedload
from jose import JWTError, jwt

from ..core.config import settings
from ..database import get_db
from ..models.user import User, UserRole
from ..notifications.sink import DatabaseNotificationSink, NotificationSink
from ..services.booking_lifecycle import BookingLifecycleManager
from ..services.referral_engine import ReferralRewardEngine
from ..utils.auth import normalize_email
from ..utils.errors import ForbiddenError, UnauthenticatedError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise UnauthenticatedError("Authentication required")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token")
    email = payload.get("sub")
    if email is None:
        raise UnauthenticatedError("Invalid or expired token")
    # Eager load provider_profile to save queries in dependent functions
    user = (
        db.query(User)
        .options(joinedload(User.provider_profile))
        .filter(User.email == normalize_email(email))
        .first()
    )
    if user is None:
        raise UnauthenticatedError("User not found")
    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated")
    return user


def get_current_provider(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the current user is an active service provider."""
    if current_user.role != UserRole.PROVIDER:
        raise ForbiddenError("Only providers can perform this action")
    return current_user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenError("Admin access required")
    return current_user


def get_notification_sink(db: Session = Depends(get_db)) -> NotificationSink:
    return DatabaseNotificationSink(db)


def get_booking_manager(
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
) -> BookingLifecycleManager:
    return BookingLifecycleManager(db, sink)


def get_referral_engine(
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
) -> ReferralRewardEngine:
    return ReferralRewardEngine(db, sink)


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)
