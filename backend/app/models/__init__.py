from .user import User, UserRole, Language
from .provider_profile import ProviderProfile
from .service_category import ServiceCategory
from .service import Service, PriceType
from .booking import Booking
from .booking_status import BookingStatus, BOOKING_TRANSITIONS, TERMINAL_BOOKING_STATUSES
from .review import Review
from .referral import (
    Referral,
    ReferralStatus,
    ReferralStep,
    ReferralStepCompletion,
    ReferralReward,
    RewardType,
)
from .subscription import Subscription, PlanType, SubscriptionStatus
from .notification import Notification, NotificationType
from .message import Message, MessageType

__all__ = [
    "User",
    "UserRole",
    "Language",
    "ProviderProfile",
    "ServiceCategory",
    "Service",
    "PriceType",
    "Booking",
    "BookingStatus",
    "BOOKING_TRANSITIONS",
    "TERMINAL_BOOKING_STATUSES",
    "Review",
    "Referral",
    "ReferralStatus",
    "ReferralStep",
    "ReferralStepCompletion",
    "ReferralReward",
    "RewardType",
    "Subscription",
    "PlanType",
    "SubscriptionStatus",
    "Notification",
    "NotificationType",
    "Message",
    "MessageType",
]
