"""Payment checkout collaborators for orders."""

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal

import stripe
from pydantic import BaseModel, Field

from hostdesk.config import Config

logger = logging.getLogger(__name__)


class CheckoutItem(BaseModel):
    """A priced line shown on the payment page."""

    name: str
    description: str | None = None
    price: Decimal
    quantity: int


class CheckoutRequest(BaseModel):
    """Everything a payment provider needs to charge for an order."""

    order_id: str
    restaurant_id: str
    restaurant_name: str
    items: list[CheckoutItem]
    tax: Decimal
    total: Decimal
    customer_email: str | None = None
    currency: str = Field(default="usd")


class CheckoutProvider(ABC):
    """Creates hosted payment pages for orders."""

    @abstractmethod
    async def create_checkout_session(self, request: CheckoutRequest) -> str:
        """Create a checkout session and return its URL.

        Raises:
            Exception: If the session could not be created
        """


def _to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1")))


class StripeCheckoutProvider(CheckoutProvider):
    """Checkout through Stripe Checkout sessions."""

    def __init__(self, config: Config, client: stripe.StripeClient | None = None) -> None:
        """Initialize the Stripe provider.

        Args:
            config: Application configuration with the Stripe key and app URL
            client: Prebuilt Stripe client (built from config when omitted)

        Raises:
            ValueError: If no Stripe key is configured
        """
        if client is None:
            if not config.stripe_secret_key:
                msg = "Stripe is not configured"
                raise ValueError(msg)
            client = stripe.StripeClient(config.stripe_secret_key)
        self.client = client
        self.app_url = config.app_url.rstrip("/")

    async def create_checkout_session(self, request: CheckoutRequest) -> str:
        currency = request.currency.lower()
        line_items = [
            {
                "price_data": {
                    "currency": currency,
                    "product_data": {
                        "name": item.name,
                        **({"description": item.description} if item.description else {}),
                    },
                    "unit_amount": _to_cents(item.price),
                },
                "quantity": item.quantity,
            }
            for item in request.items
        ]

        if request.tax > 0:
            line_items.append(
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": {"name": "Tax"},
                        "unit_amount": _to_cents(request.tax),
                    },
                    "quantity": 1,
                }
            )

        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": line_items,
            "metadata": {
                "order_id": request.order_id,
                "restaurant_id": request.restaurant_id,
            },
            "success_url": f"{self.app_url}/order/success?order_id={request.order_id}",
            "cancel_url": f"{self.app_url}/order/cancelled?order_id={request.order_id}",
        }
        if request.customer_email:
            params["customer_email"] = request.customer_email

        session = await asyncio.to_thread(
            self.client.checkout.sessions.create, params=params
        )
        logger.info(f"Checkout session {session.id} created for order {request.order_id}")

        if not session.url:
            msg = "Stripe did not return a checkout URL"
            raise RuntimeError(msg)
        return session.url
