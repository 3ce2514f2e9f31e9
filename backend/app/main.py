# backend/app/main.py

import logging
import os
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401  registers every table on Base.metadata
from .api import (
    api_admin,
    api_booking,
    api_message,
    api_notification,
    api_referral,
    api_review,
    api_service,
    api_subscription,
    api_user,
    auth,
)
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine
from .db_utils import seed_service_categories
from .middleware.security_headers import SecurityHeadersMiddleware
from .schemas.common import envelope
from .services.admin_bootstrap import ensure_default_admin
from .utils.errors import MarketplaceError
from .utils.redis_client import close_redis_client
from .utils.status_logger import register_status_listeners

setup_logging()
logger = logging.getLogger(__name__)

_bootstrap_started_at = datetime.utcnow()

# Register SQLAlchemy listeners that log status transitions
register_status_listeners()

# ─── Ensure database schema is up-to-date ──────────────────────────────────
_skip_db_bootstrap = os.getenv("SKIP_DB_BOOTSTRAP", "0").strip().lower() in {"1", "true", "yes"}
if not _skip_db_bootstrap:
    Base.metadata.create_all(bind=engine)
    seed_service_categories(engine)
    try:
        ensure_default_admin()
    except Exception as _exc:
        logger.warning("Default admin bootstrap skipped: %s", _exc)

logger.info(
    "startup.bootstrap.end duration_ms=%s skip_db_bootstrap=%s pid=%s",
    int((datetime.utcnow() - _bootstrap_started_at).total_seconds() * 1000),
    _skip_db_bootstrap,
    os.getpid(),
)

# Always use ORJSONResponse for JSON payloads
app = FastAPI(title=settings.PROJECT_NAME, default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # Browsers reject a wildcard origin combined with credentials
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", settings.CORS_ORIGINS)
app.add_middleware(SecurityHeadersMiddleware)


# ─── Error envelope ─────────────────────────────────────────────────────────
@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error("%s at %s: %s", type(exc).__name__, request.url.path, exc.message)
    return ORJSONResponse(
        status_code=exc.status_code,
        content=envelope(message=exc.message, success=False),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render ``HTTPException`` (including ``error_response``) as an envelope."""
    detail = exc.detail
    body = envelope(success=False)
    if isinstance(detail, dict):
        body["message"] = detail.get("message") or "Request failed"
        if detail.get("field_errors"):
            body["errors"] = detail["field_errors"]
    else:
        body["message"] = str(detail)
    return ORJSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors as a 400 envelope and log them for debugging."""
    errors = jsonable_encoder(exc.errors())
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    body = envelope(message="Validation failed", success=False)
    body["errors"] = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
            "message": err.get("msg"),
        }
        for err in errors
    ]
    return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error at %s: %s", request.url.path, exc)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope(message="Internal server error", success=False),
    )


api_prefix = settings.API_V1_STR  # usually "/api/v1"


# ─── AUTH ROUTES (no version prefix) ────────────────────────────────────────
# Clients will POST to /auth/register and /auth/login
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# ─── VERSIONED ROUTES ───────────────────────────────────────────────────────
app.include_router(api_booking.router, prefix=f"{api_prefix}/bookings", tags=["bookings"])
app.include_router(api_referral.router, prefix=f"{api_prefix}/referrals", tags=["referrals"])
app.include_router(api_service.router, prefix=f"{api_prefix}/services")
app.include_router(api_review.router, prefix=f"{api_prefix}/reviews", tags=["reviews"])
app.include_router(api_message.router, prefix=f"{api_prefix}/messages", tags=["messages"])
app.include_router(
    api_subscription.router, prefix=f"{api_prefix}/subscriptions", tags=["subscriptions"]
)
app.include_router(api_user.router, prefix=f"{api_prefix}", tags=["users"])
app.include_router(api_notification.router, prefix=f"{api_prefix}", tags=["notifications"])
app.include_router(api_admin.router, prefix=f"{api_prefix}", tags=["admin"])


# ─── A simple root check ────────────────────────────────────────────────────
@app.get("/")
async def root():
    return envelope(message=f"Welcome to {settings.PROJECT_NAME}")


@app.on_event("shutdown")
def shutdown_redis_client() -> None:
    """Close Redis connections when the application shuts down."""
    logger.info("Closing Redis client")
    close_redis_client()
