"""Data models for the hostdesk system."""

from hostdesk.models.chat import (
    ChatMessage,
    ChatResult,
    ChatSession,
    SessionResult,
    StoredChatMessage,
)
from hostdesk.models.menu import MenuCategory, MenuItem
from hostdesk.models.order import (
    CreateOrderInput,
    Order,
    OrderItem,
    OrderResult,
    OrderStatus,
    OrderTotals,
    OrderType,
    PaymentStatus,
    StoredOrderLine,
    ValidatedItem,
)
from hostdesk.models.reservation import (
    ACTIVE_STATUSES,
    MAX_PARTY_SIZE,
    MIN_PARTY_SIZE,
    AvailabilityVerdict,
    BookingResult,
    CapacityCheck,
    HoursCheck,
    HoursWindow,
    Reservation,
    ReservationInput,
    ReservationSource,
    ReservationStatus,
)
from hostdesk.models.restaurant import (
    DAYS_OF_WEEK,
    Address,
    AISettings,
    CapacitySettings,
    DayHours,
    OperatingHours,
    Personality,
    Restaurant,
    RestaurantSettings,
    Tier,
)

__all__ = [
    "ACTIVE_STATUSES",
    "AISettings",
    "Address",
    "AvailabilityVerdict",
    "BookingResult",
    "CapacityCheck",
    "CapacitySettings",
    "ChatMessage",
    "ChatResult",
    "ChatSession",
    "CreateOrderInput",
    "DAYS_OF_WEEK",
    "DayHours",
    "HoursCheck",
    "HoursWindow",
    "MAX_PARTY_SIZE",
    "MIN_PARTY_SIZE",
    "MenuCategory",
    "MenuItem",
    "OperatingHours",
    "Order",
    "OrderItem",
    "OrderResult",
    "OrderStatus",
    "OrderTotals",
    "OrderType",
    "PaymentStatus",
    "Personality",
    "Reservation",
    "ReservationInput",
    "ReservationSource",
    "ReservationStatus",
    "Restaurant",
    "RestaurantSettings",
    "SessionResult",
    "StoredChatMessage",
    "StoredOrderLine",
    "Tier",
    "ValidatedItem",
]
