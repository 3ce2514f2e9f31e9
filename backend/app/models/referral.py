# backend/app/models/referral.py

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel, LenientEnum, enum_values


class ReferralStatus(LenientEnum):
    PENDING = "pending"
    PENDING_VERIFICATION = "pending_verification"
    COMPLETED = "completed"


class RewardType(LenientEnum):
    PREMIUM_MONTH = "premium_month"
    VISIBILITY_BOOST = "visibility_boost"


class ReferralStep(LenientEnum):
    EMAIL_VERIFICATION = "email_verification"
    PHONE_VERIFICATION = "phone_verification"
    PROFILE_COMPLETION = "profile_completion"
    SERVICE_CREATION = "service_creation"
    PROFILE_VERIFICATION = "profile_verification"
    FIRST_BOOKING = "first_booking"
    REVIEW_SUBMISSION = "review_submission"


class Referral(BaseModel):
    __tablename__ = "referrals"

    id            = Column(Integer, primary_key=True, index=True)
    referrer_id   = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    referred_id   = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    referral_code = Column(String(16), unique=True, nullable=False, index=True)
    status        = Column(
        Enum(ReferralStatus, values_callable=enum_values, native_enum=False, name="referralstatus"),
        nullable=False,
        default=ReferralStatus.PENDING,
        index=True,
    )
    reward_type   = Column(
        Enum(RewardType, values_callable=enum_values, native_enum=False, name="rewardtype"),
        nullable=False,
    )
    completed_at  = Column(DateTime, nullable=True)

    referrer = relationship("User", foreign_keys=[referrer_id])
    referred = relationship("User", foreign_keys=[referred_id])
    step_completions = relationship(
        "ReferralStepCompletion",
        back_populates="referral",
        cascade="all, delete-orphan",
        order_by="ReferralStepCompletion.id",
    )
    rewards = relationship(
        "ReferralReward",
        back_populates="referral",
        cascade="all, delete-orphan",
    )

    @property
    def completed_steps(self) -> list[ReferralStep]:
        return [row.step for row in self.step_completions]


class ReferralStepCompletion(BaseModel):
    """One verified checklist step of a referral."""

    __tablename__ = "referral_step_completions"
    __table_args__ = (
        UniqueConstraint("referral_id", "step", name="uq_referral_step"),
    )

    id          = Column(Integer, primary_key=True)
    referral_id = Column(Integer, ForeignKey("referrals.id", ondelete="CASCADE"), nullable=False, index=True)
    step        = Column(
        Enum(ReferralStep, values_callable=enum_values, native_enum=False, name="referralstep"),
        nullable=False,
    )
    step_data   = Column(JSON, nullable=True)

    referral = relationship("Referral", back_populates="step_completions")


class ReferralReward(BaseModel):
    """Ledger of rewards disbursed for a completed referral."""

    __tablename__ = "referral_rewards"
    __table_args__ = (
        UniqueConstraint("referral_id", "account_id", "reward_type", name="uq_referral_reward"),
    )

    id          = Column(Integer, primary_key=True)
    referral_id = Column(Integer, ForeignKey("referrals.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id  = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reward_type = Column(
        Enum(RewardType, values_callable=enum_values, native_enum=False, name="rewardtype"),
        nullable=False,
    )
    expires_at  = Column(DateTime, nullable=True)

    referral = relationship("Referral", back_populates="rewards")
