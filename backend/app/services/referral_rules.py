"""Lookup tables driving the referral program.

Keyed by the closed ``UserRole``, ``ReferralStep`` and ``RewardType`` enums so
that every role, step and reward has an entry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from app import crud, models
from app.core.config import settings
from app.models import ReferralStep, RewardType, UserRole

COMMON_STEPS: tuple[ReferralStep, ...] = (
    ReferralStep.EMAIL_VERIFICATION,
    ReferralStep.PHONE_VERIFICATION,
    ReferralStep.PROFILE_COMPLETION,
)

_CUSTOMER_STEPS = COMMON_STEPS + (
    ReferralStep.FIRST_BOOKING,
    ReferralStep.REVIEW_SUBMISSION,
)

REQUIRED_STEPS: dict[UserRole, tuple[ReferralStep, ...]] = {
    UserRole.PROVIDER: COMMON_STEPS
    + (
        ReferralStep.SERVICE_CREATION,
        ReferralStep.PROFILE_VERIFICATION,
        ReferralStep.FIRST_BOOKING,
    ),
    UserRole.CUSTOMER: _CUSTOMER_STEPS,
    UserRole.ADMIN: _CUSTOMER_STEPS,
}

# Reward a referrer earns, by the referrer's own role
REWARD_TYPE_BY_ROLE: dict[UserRole, RewardType] = {
    UserRole.PROVIDER: RewardType.VISIBILITY_BOOST,
    UserRole.CUSTOMER: RewardType.PREMIUM_MONTH,
    UserRole.ADMIN: RewardType.PREMIUM_MONTH,
}

# Which party receives the reward named on the referral itself
REWARD_RECIPIENT: dict[RewardType, str] = {
    RewardType.PREMIUM_MONTH: "referred",
    RewardType.VISIBILITY_BOOST: "referrer",
}


def required_steps(role: UserRole) -> tuple[ReferralStep, ...]:
    return REQUIRED_STEPS[role]


# --- step verifiers -------------------------------------------------------

StepVerifier = Callable[[Session, models.User, dict[str, Any]], bool]


def _email_verified(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    return bool(account.is_verified)


def _phone_matches(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    phone = (account.phone or "").strip()
    submitted = str(payload.get("phone") or "").strip()
    return bool(phone) and phone == submitted


def _profile_complete(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    return all((account.first_name, account.last_name, account.phone))


def _owns_listing(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    return crud.service.count_by_provider(db, account.id) > 0


def _provider_verified(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    profile = account.provider_profile
    return profile is not None and bool(profile.is_verified)


def _has_completed_booking(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    return crud.booking.has_completed_booking(db, account.id)


def _has_written_review(db: Session, account: models.User, payload: dict[str, Any]) -> bool:
    return crud.review.has_review_by_customer(db, account.id)


STEP_VERIFIERS: dict[ReferralStep, StepVerifier] = {
    ReferralStep.EMAIL_VERIFICATION: _email_verified,
    ReferralStep.PHONE_VERIFICATION: _phone_matches,
    ReferralStep.PROFILE_COMPLETION: _profile_complete,
    ReferralStep.SERVICE_CREATION: _owns_listing,
    ReferralStep.PROFILE_VERIFICATION: _provider_verified,
    ReferralStep.FIRST_BOOKING: _has_completed_booking,
    ReferralStep.REVIEW_SUBMISSION: _has_written_review,
}


# --- reward disbursers ----------------------------------------------------

RewardDisburser = Callable[[Session, int], Optional[datetime]]


def _grant_premium_month(db: Session, account_id: int) -> Optional[datetime]:
    sub = crud.crud_subscription.grant_premium(db, account_id, settings.REFERRAL_REWARD_DAYS)
    return sub.current_period_end


def _boost_visibility(db: Session, account_id: int) -> Optional[datetime]:
    crud.service.feature_provider_services(db, account_id)
    return None


REWARD_DISBURSERS: dict[RewardType, RewardDisburser] = {
    RewardType.PREMIUM_MONTH: _grant_premium_month,
    RewardType.VISIBILITY_BOOST: _boost_visibility,
}
