from .crud_user import user
from .crud_service import service
from .crud_booking import booking
from .crud_review import review
from .crud_referral import referral
from . import crud_notification
from . import crud_message
from . import crud_service_category
from . import crud_subscription

# Usage: ``crud.booking.get_booking(db, booking_id)`` or
# ``crud.crud_notification.create_notification(db, ...)``
