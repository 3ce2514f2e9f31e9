from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..models.subscription import PlanType, SubscriptionStatus
from .common import CamelModel


class SubscriptionCreate(CamelModel):
    plan_type: PlanType = PlanType.FREE


class SubscriptionUpdate(CamelModel):
    plan_type: Optional[PlanType] = None
    status: Optional[SubscriptionStatus] = None
    cancel_at_period_end: Optional[bool] = None


class SubscriptionResponse(CamelModel):
    id: Optional[int] = None
    user_id: int
    plan_type: PlanType
    status: SubscriptionStatus
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False


class SubscriptionPlan(CamelModel):
    id: PlanType
    name: str
    name_lv: str
    name_ru: str
    price: Decimal
    currency: str
    interval: str = "month"
    features: List[str]
    features_lv: List[str]
    features_ru: List[str]


class SubscriptionFeatures(CamelModel):
    has_basic: bool
    has_premium: bool
    plan_type: PlanType
