from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base class for domain failures raised by the workflows.

    ``main.py`` renders every subclass into the response envelope using
    ``status_code`` and ``message``.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class UnauthenticatedError(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class ForbiddenError(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidStateError(MarketplaceError):
    default_message = "Invalid state"


class InvalidTransitionError(MarketplaceError):
    default_message = "Invalid status transition"


class UnavailableError(MarketplaceError):
    default_message = "Service is not available"


class VerificationFailedError(MarketplaceError):
    default_message = "Verification step failed"


class SelfReferralError(MarketplaceError):
    default_message = "Cannot refer yourself"


class AlreadyUsedError(MarketplaceError):
    default_message = "You have already used a referral code"


class ConflictError(MarketplaceError):
    default_message = "Already exists"


class InternalError(MarketplaceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)
