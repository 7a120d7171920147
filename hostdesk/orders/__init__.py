"""Order pricing and creation."""

from hostdesk.orders.service import (
    TAX_RATE,
    OrderService,
    OrderValidationError,
    calculate_totals,
    format_order_summary,
)

__all__ = [
    "TAX_RATE",
    "OrderService",
    "OrderValidationError",
    "calculate_totals",
    "format_order_summary",
]
