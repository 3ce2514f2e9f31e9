from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship

from .base import BaseModel, LenientEnum, enum_values


class PlanType(LenientEnum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(LenientEnum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    PAST_DUE = "past_due"


class Subscription(BaseModel):
    __tablename__ = "subscriptions"

    id        = Column(Integer, primary_key=True, index=True)
    user_id   = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    plan_type = Column(
        Enum(PlanType, values_callable=enum_values, native_enum=False, name="plantype"),
        nullable=False,
        default=PlanType.FREE,
    )
    status    = Column(
        Enum(SubscriptionStatus, values_callable=enum_values, native_enum=False, name="subscriptionstatus"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    current_period_start = Column(DateTime, nullable=True)
    current_period_end   = Column(DateTime, nullable=True)
    cancel_at_period_end = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="subscription")
