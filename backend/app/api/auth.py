# backend/app/api/auth.py

from datetime import datetime, timedelta
from typing import Optional
import logging

from fastapi import APIRouter, Depends, status
from jose import jwt
from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_user
from ..database import get_db
from ..models.user import User
from ..schemas.common import ApiResponse
from ..schemas.user import Token, UserCreate, UserLogin, UserResponse
from ..utils.auth import verify_password
from ..utils.errors import ConflictError, UnauthenticatedError
from .dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token({"sub": user.email}),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=ApiResponse[Token],
    status_code=status.HTTP_201_CREATED,
)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    if crud_user.user.get_user_by_email(db, user_data.email):
        raise ConflictError("User with this email already exists")

    db_user = crud_user.user.create_user(db, user_data)
    logger.info(
        "user.registered",
        extra={"user_id": db_user.id, "role": db_user.role.value},
    )
    return ApiResponse(
        message="User registered successfully",
        data=_token_for(db_user),
    )


@router.post("/login", response_model=ApiResponse[Token])
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = crud_user.user.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        logger.info("Failed login for %s", credentials.email)
        raise UnauthenticatedError("Invalid email or password")
    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated")
    return ApiResponse(message="Login successful", data=_token_for(user))


@router.get("/me", response_model=ApiResponse[UserResponse])
def read_current_user(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.post("/refresh-token", response_model=ApiResponse[Token])
def refresh_token(current_user: User = Depends(get_current_user)):
    """Issue a fresh token for a still-active account."""
    return ApiResponse(message="Token refreshed successfully", data=_token_for(current_user))
