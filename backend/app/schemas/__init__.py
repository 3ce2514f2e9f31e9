from .common import ApiResponse, CamelModel, Pagination, envelope
from .user import (
    UserCreate,
    UserLogin,
    UserUpdate,
    UserResponse,
    UserSummary,
    UserStats,
    ProviderProfileUpdate,
    ProviderProfileResponse,
    Token,
    TokenData,
)
from .service_category import ServiceCategoryResponse
from .service import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceSummary
from .booking import BookingCreate, BookingStatusUpdate, BookingCancel, BookingResponse
from .review import ReviewCreate, ReviewUpdate, ReviewRespond, ReviewResponse
from .notification import NotificationResponse, UnreadCount
from .subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionResponse,
    SubscriptionPlan,
    SubscriptionFeatures,
)
from .message import (
    ConversationSummary,
    MessageCreate,
    MessageResponse,
    MessagesMarkRead,
    MessagesMarkedRead,
)
from .referral import (
    ReferralApply,
    ReferralApplyResponse,
    ReferralCodeResponse,
    ReferralResponse,
    ReferralStats,
    ReferralStatusResponse,
    ReferralStepResult,
    ReferralVerifyStep,
)
