import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..models import User
from ..schemas.common import ApiResponse
from ..schemas.user import (
    ProviderProfileResponse,
    ProviderProfileUpdate,
    UserResponse,
    UserStats,
    UserUpdate,
)
from .dependencies import get_current_provider, get_current_user

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


@router.get("/users/profile", response_model=ApiResponse[UserResponse])
def read_profile(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.put("/users/profile", response_model=ApiResponse[UserResponse])
def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update basic profile fields for the current user."""
    db_user = crud.user.update_user(db, current_user, payload)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserResponse.model_validate(db_user),
    )


@router.put("/users/provider-profile", response_model=ApiResponse[ProviderProfileResponse])
def update_provider_profile(
    payload: ProviderProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_provider),
):
    profile = crud.user.update_provider_profile(db, current_user, payload)
    return ApiResponse(
        message="Provider profile updated successfully",
        data=ProviderProfileResponse.model_validate(profile),
    )


@router.get("/users/stats", response_model=ApiResponse[UserStats])
def read_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=UserStats(**crud.user.get_stats(db, current_user)))


@router.delete("/users/account", response_model=ApiResponse)
def deactivate_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Disable the current account. The row and its history are kept."""
    crud.user.deactivate(db, current_user)
    logger.info("user.deactivated", extra={"user_id": current_user.id})
    return ApiResponse(message="Account deactivated successfully")
