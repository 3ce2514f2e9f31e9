"""Referral reward engine.

A referrer mints a code, another account applies it, completes the
verification checklist for its role, and both parties are rewarded once the
checklist is done. State changes that can race (claiming a code, completing
a referral) are single conditional updates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud, models
from app.core.config import settings
from app.models import ReferralStatus, ReferralStep, RewardType
from app.notifications.intents.referral import send_referral_completed_notifications
from app.notifications.sink import NotificationSink
from app.services import referral_rules
from app.utils import referral_codes
from app.utils.errors import (
    AlreadyUsedError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    SelfReferralError,
    VerificationFailedError,
)

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    referral_id: int
    verification_steps: list[ReferralStep]


@dataclass
class StepResult:
    referral: models.Referral
    all_steps_completed: bool
    remaining_steps: list[ReferralStep]


@dataclass
class ReferralStatusReport:
    referrals: list[models.Referral]
    stats: dict[str, int] = field(default_factory=dict)


class ReferralRewardEngine:
    def __init__(self, db: Session, sink: NotificationSink):
        self.db = db
        self.sink = sink

    def _get_account(self, account_id: int) -> models.User:
        account = crud.user.get_user(self.db, account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    # --- GenerateCode ----------------------------------------------------

    def generate_code(self, referrer_id: int) -> models.Referral:
        """Return the referrer's open referral, minting a new code if needed."""
        existing = crud.referral.get_pending_for_referrer(self.db, referrer_id)
        if existing is not None:
            return existing

        referrer = self._get_account(referrer_id)
        reward_type = referral_rules.REWARD_TYPE_BY_ROLE[referrer.role]
        for _ in range(settings.REFERRAL_CODE_MAX_ATTEMPTS):
            code = referral_codes.generate_referral_code(settings.REFERRAL_CODE_LENGTH)
            if crud.referral.code_exists(self.db, code):
                continue
            try:
                referral = crud.referral.create_referral(self.db, referrer_id, code, reward_type)
            except IntegrityError:
                # Another request stored the same code between check and insert
                self.db.rollback()
                continue
            logger.info(
                "referral.code_generated",
                extra={
                    "referral_id": referral.id,
                    "referrer_id": referrer_id,
                    "reward_type": reward_type.value,
                },
            )
            return referral
        logger.error("Could not mint a unique referral code for account %s", referrer_id)
        raise InternalError("Failed to generate referral code")

    # --- ApplyCode -------------------------------------------------------

    def apply_code(self, applicant_id: int, code: str) -> ApplyResult:
        referral = crud.referral.get_by_code(
            self.db, referral_codes.normalize_referral_code(code)
        )
        if referral is None:
            raise NotFoundError("Invalid referral code")
        if referral.referrer_id == applicant_id:
            raise SelfReferralError("Cannot refer yourself")
        if referral.status != ReferralStatus.PENDING:
            raise InvalidStateError("Referral code has already been used or expired")
        if crud.referral.has_referred_with_status(
            self.db, applicant_id, (ReferralStatus.COMPLETED,)
        ):
            raise AlreadyUsedError("You have already used a referral code")

        applicant = self._get_account(applicant_id)
        if not crud.referral.claim(self.db, referral.id, applicant_id):
            raise InvalidStateError("Referral code has already been used or expired")

        logger.info(
            "referral.applied",
            extra={"referral_id": referral.id, "referred_id": applicant_id},
        )
        return ApplyResult(
            referral_id=referral.id,
            verification_steps=list(referral_rules.required_steps(applicant.role)),
        )

    # --- CompleteStep ----------------------------------------------------

    def complete_step(
        self,
        referral_id: int,
        applicant_id: int,
        step: ReferralStep,
        payload: Optional[dict[str, Any]] = None,
    ) -> StepResult:
        payload = payload or {}
        referral = crud.referral.get_in_verification(self.db, referral_id, applicant_id)
        if referral is None:
            raise NotFoundError("Referral not found or already completed")

        applicant = self._get_account(applicant_id)
        required = referral_rules.required_steps(applicant.role)
        if step not in required:
            raise VerificationFailedError(
                f"Step {step.value} is not part of the {applicant.role.value} checklist"
            )
        verifier = referral_rules.STEP_VERIFIERS[step]
        if not verifier(self.db, applicant, payload):
            raise VerificationFailedError("Verification step failed")

        if crud.referral.add_step(self.db, referral, step, payload):
            logger.info(
                "referral.step_completed",
                extra={"referral_id": referral.id, "step": step.value},
            )

        completed = set(referral.completed_steps)
        remaining = [s for s in required if s not in completed]
        if not remaining:
            self.complete_referral(referral.id)
            self.db.refresh(referral)
        return StepResult(
            referral=referral,
            all_steps_completed=not remaining,
            remaining_steps=remaining,
        )

    def is_eligible(self, referral: models.Referral) -> bool:
        if referral.referred_id is None:
            return False
        referred = self._get_account(referral.referred_id)
        completed = set(referral.completed_steps)
        return all(s in completed for s in referral_rules.required_steps(referred.role))

    # --- CompleteReferral ------------------------------------------------

    def complete_referral(self, referral_id: int) -> bool:
        """Finish an eligible referral and disburse rewards.

        Returns True for the caller that won the status update; everyone else
        gets False and disburses nothing.
        """
        referral = crud.referral.get_referral(self.db, referral_id)
        if referral is None or referral.status != ReferralStatus.PENDING_VERIFICATION:
            return False
        if not self.is_eligible(referral):
            return False
        if crud.referral.has_referred_with_status(
            self.db, referral.referred_id, (ReferralStatus.COMPLETED,), exclude_id=referral.id
        ):
            raise AlreadyUsedError("You have already used a referral code")

        now = datetime.utcnow()
        try:
            if not crud.referral.mark_completed(self.db, referral.id, now):
                self.db.rollback()
                return False
            referrer = self._get_account(referral.referrer_id)
            grants = self._reward_plan(referral, referrer)
            for account_id, reward_type in grants:
                self._grant(referral, account_id, reward_type)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to complete referral %s", referral_id)
            raise InternalError("Internal server error")

        self.db.refresh(referral)
        logger.info(
            "referral.completed",
            extra={
                "referral_id": referral.id,
                "referrer_id": referral.referrer_id,
                "referred_id": referral.referred_id,
                "from_status": ReferralStatus.PENDING_VERIFICATION.value,
                "to_status": ReferralStatus.COMPLETED.value,
            },
        )
        send_referral_completed_notifications(self.sink, referral)
        return True

    def _reward_plan(
        self, referral: models.Referral, referrer: models.User
    ) -> list[tuple[int, RewardType]]:
        """Grants owed for a completed referral, in disbursement order."""
        parties = {"referrer": referral.referrer_id, "referred": referral.referred_id}
        recipient = parties[referral_rules.REWARD_RECIPIENT[referral.reward_type]]
        return [
            (recipient, referral.reward_type),
            (referral.referrer_id, referral_rules.REWARD_TYPE_BY_ROLE[referrer.role]),
        ]

    def _grant(self, referral: models.Referral, account_id: int, reward_type: RewardType) -> None:
        ledger_row = crud.referral.record_reward(self.db, referral.id, account_id, reward_type)
        if ledger_row is None:
            return
        ledger_row.expires_at = referral_rules.REWARD_DISBURSERS[reward_type](self.db, account_id)
        logger.info(
            "referral.reward_granted",
            extra={
                "referral_id": referral.id,
                "account_id": account_id,
                "reward_type": reward_type.value,
            },
        )

    # --- Status ----------------------------------------------------------

    def status(self, account_id: int) -> ReferralStatusReport:
        referrals = crud.referral.list_for_account(self.db, account_id)
        stats = {
            "total_referrals": len(referrals),
            "completed_referrals": sum(
                1 for r in referrals if r.status == ReferralStatus.COMPLETED
            ),
            "pending_referrals": sum(
                1 for r in referrals if r.status == ReferralStatus.PENDING_VERIFICATION
            ),
        }
        return ReferralStatusReport(referrals=referrals, stats=stats)
