from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..models import User, UserRole
from ..schemas.common import ApiResponse
from ..schemas.user import ProviderProfileResponse, UserResponse
from ..utils.errors import InvalidStateError, NotFoundError
from .dependencies import get_current_admin

router = APIRouter(prefix="/admin", tags=["admin"])


def _load_user(db: Session, user_id: int) -> User:
    db_user = crud.user.get_user(db, user_id)
    if db_user is None:
        raise NotFoundError("User not found")
    return db_user


@router.post("/users/{user_id}/verify-email", response_model=ApiResponse[UserResponse])
def verify_user_email(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    db_user = crud.user.mark_email_verified(db, _load_user(db, user_id))
    return ApiResponse(
        message="Email verified successfully",
        data=UserResponse.model_validate(db_user),
    )


@router.post("/providers/{user_id}/verify", response_model=ApiResponse[ProviderProfileResponse])
def verify_provider(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Mark a provider's business profile as checked by an admin."""
    db_user = _load_user(db, user_id)
    if db_user.role != UserRole.PROVIDER:
        raise InvalidStateError("User is not a service provider")
    profile = crud.user.verify_provider(db, db_user)
    return ApiResponse(
        message="Provider verified successfully",
        data=ProviderProfileResponse.model_validate(profile),
    )
