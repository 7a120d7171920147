"""Order creation with server-side pricing.

Prices always come from the stored menu. Whatever price or total a client
sends is discarded before it reaches this module.
"""

import logging
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from hostdesk.models import (
    CreateOrderInput,
    Order,
    OrderItem,
    OrderResult,
    OrderStatus,
    OrderTotals,
    PaymentStatus,
    StoredOrderLine,
    ValidatedItem,
)
from hostdesk.services.checkout import CheckoutItem, CheckoutProvider, CheckoutRequest
from hostdesk.storage import Store, StoreError

logger = logging.getLogger(__name__)

TAX_RATE = Decimal("0.0875")
MIN_QUANTITY = 1
MAX_QUANTITY = 99

CENTS = Decimal("0.01")


class OrderValidationError(Exception):
    """Raised when an order cannot be priced as submitted."""


def round_cents(amount: Decimal) -> Decimal:
    """Round half-up to whole cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_totals(validated_items: list[ValidatedItem]) -> OrderTotals:
    """Compute subtotal, tax and total from priced lines."""
    subtotal = sum((item.line_total for item in validated_items), Decimal("0"))
    tax = round_cents(subtotal * TAX_RATE)
    total = round_cents(subtotal + tax)
    return OrderTotals(subtotal=round_cents(subtotal), tax=tax, total=total)


def format_order_summary(validated_items: list[ValidatedItem], totals: OrderTotals) -> str:
    """Plain-text order summary for the guest."""
    lines = []
    for item in validated_items:
        line = f"{item.quantity}x {item.menu_item.name} - ${item.line_total:.2f}"
        if item.notes:
            line += f"\n   Note: {item.notes}"
        lines.append(line)

    return (
        "Order Summary:\n"
        + "\n".join(lines)
        + f"\n\nSubtotal: ${totals.subtotal:.2f}"
        + f"\nTax: ${totals.tax:.2f}"
        + f"\nTotal: ${totals.total:.2f}"
    )


class OrderService:
    """Validates, prices and records orders, then opens a checkout session."""

    def __init__(self, store: Store, checkout: CheckoutProvider | None = None) -> None:
        """Initialize the order service.

        Args:
            store: Store holding menus and orders
            checkout: Payment provider; orders are refused without one
        """
        self.store = store
        self.checkout = checkout

    async def validate_and_price_items(
        self, restaurant_id: str, items: list[OrderItem]
    ) -> list[ValidatedItem]:
        """Price each order line from the stored menu.

        Raises:
            OrderValidationError: With a guest-facing message when any line
                is unknown, unavailable or has a bad quantity
        """
        if not items:
            raise OrderValidationError("No valid menu items found")

        item_ids = list(dict.fromkeys(item.id for item in items))

        try:
            menu_items = await self.store.get_menu_items(restaurant_id, item_ids)
        except StoreError as e:
            logger.error(f"Error fetching menu items: {e}")
            raise OrderValidationError("Failed to validate menu items") from e

        if not menu_items:
            raise OrderValidationError("No valid menu items found")

        by_id = {item.id: item for item in menu_items}
        validated: list[ValidatedItem] = []
        unknown: list[str] = []

        for order_item in items:
            menu_item = by_id.get(order_item.id)

            if menu_item is None:
                unknown.append(order_item.id)
                continue

            if not menu_item.is_available:
                raise OrderValidationError(
                    f'"{menu_item.name}" is currently unavailable. Please choose another item.'
                )

            if not MIN_QUANTITY <= order_item.quantity <= MAX_QUANTITY:
                raise OrderValidationError(
                    f'Invalid quantity for "{menu_item.name}". '
                    f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}."
                )

            validated.append(
                ValidatedItem(
                    menu_item=menu_item,
                    quantity=order_item.quantity,
                    notes=order_item.notes,
                    line_total=menu_item.price * order_item.quantity,
                )
            )

        if unknown:
            logger.info(f"Order rejected, unknown items: {unknown}")
            raise OrderValidationError(
                "Some items are no longer on the menu. Please refresh and try again."
            )

        return validated

    async def create_order(self, request: CreateOrderInput) -> OrderResult:
        """Create an order and its payment link.

        If the payment link cannot be created, the order is deleted again.
        """
        try:
            validated = await self.validate_and_price_items(
                request.restaurant_id, request.items
            )
        except OrderValidationError as e:
            return OrderResult(success=False, error=str(e))

        totals = calculate_totals(validated)

        try:
            restaurant = await self.store.get_restaurant(request.restaurant_id)
        except StoreError as e:
            logger.warning(f"Restaurant lookup failed for {request.restaurant_id}: {e}")
            restaurant = None

        if restaurant is None:
            return OrderResult(success=False, error="Restaurant not found")

        if self.checkout is None:
            logger.warning("Order refused: no checkout provider configured")
            return OrderResult(
                success=False,
                error="Online payment is not available. Please call the restaurant to order.",
            )

        order = Order(
            id=str(uuid.uuid4()),
            restaurant_id=request.restaurant_id,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            customer_email=request.customer_email or None,
            type=request.order_type,
            source=request.source,
            items=[
                StoredOrderLine(
                    menu_item_id=item.menu_item.id,
                    name=item.menu_item.name,
                    price=item.menu_item.price,
                    quantity=item.quantity,
                    notes=item.notes or None,
                    line_total=item.line_total,
                )
                for item in validated
            ],
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            special_instructions=request.special_instructions or None,
        )

        try:
            order_id = await self.store.insert_order(order)
        except StoreError:
            logger.exception("Error creating order")
            return OrderResult(
                success=False, error="Failed to create order. Please try again."
            )

        try:
            checkout_url = await self.checkout.create_checkout_session(
                CheckoutRequest(
                    order_id=order_id,
                    restaurant_id=request.restaurant_id,
                    restaurant_name=restaurant.name,
                    items=[
                        CheckoutItem(
                            name=item.menu_item.name,
                            description=item.notes or None,
                            price=item.menu_item.price,
                            quantity=item.quantity,
                        )
                        for item in validated
                    ],
                    tax=totals.tax,
                    total=totals.total,
                    customer_email=request.customer_email,
                    currency=restaurant.currency or "usd",
                )
            )
        except Exception:
            logger.exception(f"Error creating checkout session for order {order_id}")
            await self._discard_order(order_id)
            return OrderResult(
                success=False, error="Failed to create payment link. Please try again."
            )

        logger.info(f"Order {order_id} created, total {totals.total}")
        return OrderResult(
            success=True,
            order_id=order_id,
            checkout_url=checkout_url,
            order_summary=format_order_summary(validated, totals),
        )

    async def update_order_payment_status(
        self,
        order_id: str,
        payment_status: PaymentStatus,
        payment_method: str | None = None,
    ) -> bool:
        """Record the payment outcome reported by the payment provider.

        Returns:
            True if the order was updated

        Raises:
            ValueError: If payment_status is pending
        """
        if payment_status == PaymentStatus.PENDING:
            msg = "Payment updates must be paid or refunded"
            raise ValueError(msg)

        status = (
            OrderStatus.CONFIRMED
            if payment_status == PaymentStatus.PAID
            else OrderStatus.CANCELLED
        )
        try:
            updated = await self.store.update_order(
                order_id,
                payment_status=payment_status,
                payment_method=payment_method,
                status=status,
                updated_at=datetime.now(),
            )
        except StoreError:
            logger.exception(f"Error updating payment status of order {order_id}")
            return False

        if not updated:
            logger.warning(f"Payment update for unknown order {order_id}")
        return updated

    async def _discard_order(self, order_id: str) -> None:
        try:
            await self.store.delete_order(order_id)
        except StoreError:
            logger.exception(f"Failed to delete order {order_id} after checkout error")
        else:
            logger.info(f"Deleted order {order_id} after checkout error")
