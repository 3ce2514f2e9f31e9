from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..models.referral import ReferralStatus, ReferralStep, RewardType


class CRUDReferral:
    def get_referral(self, db: Session, referral_id: int) -> Optional[models.Referral]:
        return db.query(models.Referral).filter(models.Referral.id == referral_id).first()

    def get_by_code(self, db: Session, code: str) -> Optional[models.Referral]:
        return db.query(models.Referral).filter(models.Referral.referral_code == code).first()

    def code_exists(self, db: Session, code: str) -> bool:
        return (
            db.query(models.Referral.id)
            .filter(models.Referral.referral_code == code)
            .first()
            is not None
        )

    def get_pending_for_referrer(self, db: Session, referrer_id: int) -> Optional[models.Referral]:
        return (
            db.query(models.Referral)
            .filter(
                models.Referral.referrer_id == referrer_id,
                models.Referral.status == ReferralStatus.PENDING,
            )
            .order_by(models.Referral.id.asc())
            .first()
        )

    def get_in_verification(
        self, db: Session, referral_id: int, referred_id: int
    ) -> Optional[models.Referral]:
        return (
            db.query(models.Referral)
            .filter(
                models.Referral.id == referral_id,
                models.Referral.referred_id == referred_id,
                models.Referral.status == ReferralStatus.PENDING_VERIFICATION,
            )
            .first()
        )

    def create_referral(
        self, db: Session, referrer_id: int, code: str, reward_type: RewardType
    ) -> models.Referral:
        db_referral = models.Referral(
            referrer_id=referrer_id,
            referral_code=code,
            reward_type=reward_type,
            status=ReferralStatus.PENDING,
        )
        db.add(db_referral)
        db.commit()
        db.refresh(db_referral)
        return db_referral

    def has_referred_with_status(
        self,
        db: Session,
        referred_id: int,
        statuses: tuple,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = db.query(models.Referral.id).filter(
            models.Referral.referred_id == referred_id,
            models.Referral.status.in_(statuses),
        )
        if exclude_id is not None:
            query = query.filter(models.Referral.id != exclude_id)
        return query.first() is not None

    def claim(self, db: Session, referral_id: int, referred_id: int) -> bool:
        """Bind ``referred_id`` and start verification in one conditional update.

        Returns False when another caller already claimed the referral.
        """
        updated = (
            db.query(models.Referral)
            .filter(
                models.Referral.id == referral_id,
                models.Referral.status == ReferralStatus.PENDING,
                models.Referral.referred_id.is_(None),
            )
            .update(
                {
                    models.Referral.referred_id: referred_id,
                    models.Referral.status: ReferralStatus.PENDING_VERIFICATION,
                    models.Referral.updated_at: datetime.utcnow(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    def mark_completed(self, db: Session, referral_id: int, completed_at: datetime) -> bool:
        """Move ``pending_verification -> completed``; True only for the winner.

        Does not commit.
        """
        updated = (
            db.query(models.Referral)
            .filter(
                models.Referral.id == referral_id,
                models.Referral.status == ReferralStatus.PENDING_VERIFICATION,
            )
            .update(
                {
                    models.Referral.status: ReferralStatus.COMPLETED,
                    models.Referral.completed_at: completed_at,
                    models.Referral.updated_at: completed_at,
                },
                synchronize_session=False,
            )
        )
        return updated == 1

    def add_step(
        self,
        db: Session,
        db_referral: models.Referral,
        step: ReferralStep,
        step_data: Optional[dict] = None,
    ) -> bool:
        """Record a verified step; False when it was already recorded."""
        if step in db_referral.completed_steps:
            return False
        db.add(
            models.ReferralStepCompletion(
                referral_id=db_referral.id,
                step=step,
                step_data=step_data or None,
            )
        )
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request recorded the same step first
            db.rollback()
            db.refresh(db_referral)
            return False
        db.refresh(db_referral)
        return True

    def record_reward(
        self,
        db: Session,
        referral_id: int,
        account_id: int,
        reward_type: RewardType,
    ) -> Optional[models.ReferralReward]:
        """Add a ledger row unless the same grant exists; does not commit.

        Returns None for a grant that was already recorded.
        """
        exists = (
            db.query(models.ReferralReward.id)
            .filter(
                models.ReferralReward.referral_id == referral_id,
                models.ReferralReward.account_id == account_id,
                models.ReferralReward.reward_type == reward_type,
            )
            .first()
        )
        if exists is not None:
            return None
        row = models.ReferralReward(
            referral_id=referral_id,
            account_id=account_id,
            reward_type=reward_type,
        )
        db.add(row)
        db.flush()
        return row

    def list_for_account(self, db: Session, account_id: int) -> List[models.Referral]:
        return (
            db.query(models.Referral)
            .options(selectinload(models.Referral.step_completions))
            .filter(
                or_(
                    models.Referral.referrer_id == account_id,
                    models.Referral.referred_id == account_id,
                )
            )
            .order_by(models.Referral.created_at.desc(), models.Referral.id.desc())
            .all()
        )


referral = CRUDReferral()
