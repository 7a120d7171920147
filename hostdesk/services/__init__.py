"""External service integrations (payments, notifications)."""

from hostdesk.services.checkout import (
    CheckoutItem,
    CheckoutProvider,
    CheckoutRequest,
    StripeCheckoutProvider,
)
from hostdesk.services.notification_service import (
    NotificationService,
    reservation_confirmation_sms,
)

__all__ = [
    "CheckoutItem",
    "CheckoutProvider",
    "CheckoutRequest",
    "NotificationService",
    "StripeCheckoutProvider",
    "reservation_confirmation_sms",
]
