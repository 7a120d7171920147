"""Data models for food orders."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hostdesk.models.menu import MenuItem
from hostdesk.models.reservation import ReservationSource


class OrderType(str, Enum):
    """How the order is fulfilled."""

    DINE_IN = "dine_in"
    TAKEOUT = "takeout"
    DELIVERY = "delivery"


class OrderStatus(str, Enum):
    """Kitchen-side status of an order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment state of an order."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class OrderItem(BaseModel):
    """A line of an incoming order. Any client-side price is discarded."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Menu item id")
    quantity: int
    notes: str | None = None


class CreateOrderInput(BaseModel):
    """An order as submitted by a client."""

    # Client-submitted prices and totals are dropped here
    model_config = ConfigDict(frozen=True, extra="ignore")

    restaurant_id: str
    items: list[OrderItem]
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    order_type: OrderType = OrderType.TAKEOUT
    special_instructions: str | None = None
    source: ReservationSource = ReservationSource.CHAT


class ValidatedItem(BaseModel):
    """An order line priced from the stored menu item."""

    model_config = ConfigDict(frozen=True)

    menu_item: MenuItem
    quantity: int
    notes: str | None = None
    line_total: Decimal


class OrderTotals(BaseModel):
    """Aggregate amounts of an order."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax: Decimal
    total: Decimal


class StoredOrderLine(BaseModel):
    """Snapshot of an order line as persisted."""

    menu_item_id: str
    name: str
    price: Decimal
    quantity: int
    notes: str | None = None
    line_total: Decimal


class Order(BaseModel):
    """A stored order."""

    id: str
    restaurant_id: str
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    type: OrderType
    status: OrderStatus = OrderStatus.PENDING
    source: ReservationSource = ReservationSource.CHAT
    items: list[StoredOrderLine]
    subtotal: Decimal
    tax: Decimal
    tip: Decimal = Decimal("0.00")
    total: Decimal
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    special_instructions: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime | None = None


class OrderResult(BaseModel):
    """Outcome of an order attempt."""

    success: bool
    order_id: str | None = None
    checkout_url: str | None = None
    order_summary: str | None = None
    error: str | None = None
