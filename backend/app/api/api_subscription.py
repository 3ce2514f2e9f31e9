import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_subscription
from ..database import get_db
from ..models import User
from ..models.subscription import PlanType, SubscriptionStatus
from ..schemas.common import ApiResponse
from ..schemas.subscription import (
    SubscriptionCreate,
    SubscriptionFeatures,
    SubscriptionPlan,
    SubscriptionResponse,
    SubscriptionUpdate,
)
from ..services import subscription_plans
from ..utils import error_response
from .dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscriptions"])


def _response_for(user: User, db_sub) -> SubscriptionResponse:
    if db_sub is None:
        # Accounts without a row are on the free plan
        return SubscriptionResponse(
            user_id=user.id,
            plan_type=PlanType.FREE,
            status=SubscriptionStatus.ACTIVE,
        )
    return SubscriptionResponse.model_validate(db_sub)


@router.get("", response_model=ApiResponse[SubscriptionResponse])
def read_subscription(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_sub = crud_subscription.get_subscription(db, current_user.id)
    return ApiResponse(data=_response_for(current_user, db_sub))


@router.post("", response_model=ApiResponse[SubscriptionResponse], status_code=status.HTTP_201_CREATED)
def create_subscription(
    sub_in: SubscriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if crud_subscription.get_subscription(db, current_user.id):
        raise error_response(
            "User already has a subscription",
            {"planType": "exists"},
            status.HTTP_400_BAD_REQUEST,
        )
    db_sub = crud_subscription.create_subscription(db, current_user.id, sub_in)
    logger.info(
        "subscription.created",
        extra={"user_id": current_user.id, "plan_type": db_sub.plan_type.value},
    )
    return ApiResponse(
        message="Subscription created successfully",
        data=SubscriptionResponse.model_validate(db_sub),
    )


@router.put("", response_model=ApiResponse[SubscriptionResponse])
def update_subscription(
    sub_in: SubscriptionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_sub = crud_subscription.get_subscription(db, current_user.id)
    if db_sub is None:
        raise error_response("Subscription not found", {}, status.HTTP_404_NOT_FOUND)
    db_sub = crud_subscription.update_subscription(db, db_sub, sub_in)
    return ApiResponse(
        message="Subscription updated successfully",
        data=SubscriptionResponse.model_validate(db_sub),
    )


@router.put("/cancel", response_model=ApiResponse[SubscriptionResponse])
def cancel_subscription(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_sub = crud_subscription.get_subscription(db, current_user.id)
    if db_sub is None:
        raise error_response("Subscription not found", {}, status.HTTP_404_NOT_FOUND)
    db_sub = crud_subscription.cancel_subscription(db, db_sub)
    return ApiResponse(
        message="Subscription will be cancelled at the end of the current period",
        data=SubscriptionResponse.model_validate(db_sub),
    )


@router.get("/plans", response_model=ApiResponse[List[SubscriptionPlan]])
def list_plans():
    return ApiResponse(
        data=[
            SubscriptionPlan(currency=settings.DEFAULT_CURRENCY, **plan)
            for plan in subscription_plans.PLANS
        ]
    )


@router.get("/features", response_model=ApiResponse[SubscriptionFeatures])
def read_features(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_sub = crud_subscription.get_subscription(db, current_user.id)
    return ApiResponse(
        data=SubscriptionFeatures(
            has_basic=subscription_plans.has_basic(db_sub),
            has_premium=subscription_plans.has_premium(db_sub),
            plan_type=db_sub.plan_type if db_sub else PlanType.FREE,
        )
    )
