# backend/app/api/api_referral.py

from fastapi import APIRouter, Depends

from ..models import User
from ..schemas.common import ApiResponse
from ..schemas.referral import (
    ReferralApply,
    ReferralApplyResponse,
    ReferralCodeResponse,
    ReferralResponse,
    ReferralStats,
    ReferralStatusResponse,
    ReferralStepResult,
    ReferralVerifyStep,
)
from ..services.referral_engine import ReferralRewardEngine
from .dependencies import get_current_user, get_referral_engine

router = APIRouter()


@router.post("/generate", response_model=ApiResponse[ReferralCodeResponse])
def generate_referral_code(
    current_user: User = Depends(get_current_user),
    engine: ReferralRewardEngine = Depends(get_referral_engine),
):
    referral = engine.generate_code(current_user.id)
    return ApiResponse(
        data=ReferralCodeResponse(referral_code=referral.referral_code, status=referral.status),
    )


@router.post("/apply", response_model=ApiResponse[ReferralApplyResponse])
def apply_referral_code(
    body: ReferralApply,
    current_user: User = Depends(get_current_user),
    engine: ReferralRewardEngine = Depends(get_referral_engine),
):
    result = engine.apply_code(current_user.id, body.referral_code)
    return ApiResponse(
        message="Referral code applied successfully",
        data=ReferralApplyResponse(
            referral_id=result.referral_id,
            verification_steps=result.verification_steps,
        ),
    )


@router.post("/verify-step", response_model=ApiResponse[ReferralStepResult])
def verify_referral_step(
    body: ReferralVerifyStep,
    current_user: User = Depends(get_current_user),
    engine: ReferralRewardEngine = Depends(get_referral_engine),
):
    result = engine.complete_step(
        body.referral_id, current_user.id, body.step_type, body.step_data
    )
    return ApiResponse(
        message="Verification step completed",
        data=ReferralStepResult(
            referral=ReferralResponse.model_validate(result.referral),
            all_steps_completed=result.all_steps_completed,
            remaining_steps=result.remaining_steps,
        ),
    )


@router.get("/status", response_model=ApiResponse[ReferralStatusResponse])
def get_referral_status(
    current_user: User = Depends(get_current_user),
    engine: ReferralRewardEngine = Depends(get_referral_engine),
):
    report = engine.status(current_user.id)
    return ApiResponse(
        data=ReferralStatusResponse(
            referrals=[ReferralResponse.model_validate(r) for r in report.referrals],
            stats=ReferralStats(**report.stats),
        ),
    )
