from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..models.referral import ReferralStatus, ReferralStep, RewardType
from .common import CamelModel


class ReferralCodeResponse(CamelModel):
    referral_code: str
    status: ReferralStatus


class ReferralApply(CamelModel):
    referral_code: str = Field(min_length=8, max_length=8)


class ReferralApplyResponse(CamelModel):
    referral_id: int
    verification_steps: List[ReferralStep]


class ReferralVerifyStep(CamelModel):
    referral_id: int
    step_type: ReferralStep
    step_data: Dict[str, Any] = Field(default_factory=dict)


class ReferralResponse(CamelModel):
    id: int
    referrer_id: int
    referred_id: Optional[int] = None
    referral_code: str
    status: ReferralStatus
    reward_type: RewardType
    completed_steps: List[ReferralStep] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ReferralStepResult(CamelModel):
    referral: ReferralResponse
    all_steps_completed: bool
    remaining_steps: List[ReferralStep]


class ReferralStats(CamelModel):
    total_referrals: int
    completed_referrals: int
    pending_referrals: int


class ReferralStatusResponse(CamelModel):
    referrals: List[ReferralResponse]
    stats: ReferralStats
