"""Monthly chat message quota per restaurant tier."""

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel

from hostdesk.models import Tier
from hostdesk.storage import Store, StoreError

logger = logging.getLogger(__name__)

# Monthly assistant messages per tier; None means unlimited
CHAT_MESSAGE_LIMITS: dict[Tier, int | None] = {
    Tier.FREE: 100,
    Tier.STARTER: 1000,
    Tier.PROFESSIONAL: None,
    Tier.ENTERPRISE: None,
}

USAGE_LIMIT_MESSAGE = (
    "Our online assistant is resting. Please call us directly! We'd love to hear from you."
)


class UsageCheck(BaseModel):
    """Outcome of a quota check."""

    allowed: bool
    message: str | None = None
    current: int | None = None
    limit: int | None = None


def start_of_month(now: datetime) -> datetime:
    """Midnight on the first day of `now`'s month."""
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class UsageLimiter:
    """Checks a restaurant's chat usage for the current calendar month."""

    def __init__(self, store: Store, now: Callable[[], datetime] = datetime.now) -> None:
        self.store = store
        self.now = now

    async def check_usage_limit(self, restaurant_id: str, tier: Tier) -> UsageCheck:
        """Check whether the restaurant may send another chat message.

        Args:
            restaurant_id: Restaurant whose quota is checked
            tier: Subscription tier of the restaurant

        Returns:
            UsageCheck; when not allowed, message is the text to show the guest
        """
        limit = CHAT_MESSAGE_LIMITS.get(tier)
        if limit is None:
            return UsageCheck(allowed=True)

        try:
            current = await self.store.count_chat_messages(
                restaurant_id, start_of_month(self.now())
            )
        except StoreError as e:
            # Same policy as capacity reads: a failed count does not block guests
            logger.warning(f"Usage count failed for {restaurant_id}, allowing: {e}")
            return UsageCheck(allowed=True, limit=limit)

        if current >= limit:
            logger.warning(
                f"Usage limit reached for {restaurant_id} ({current}/{limit}, tier {tier.value})"
            )
            return UsageCheck(
                allowed=False,
                message=USAGE_LIMIT_MESSAGE,
                current=current,
                limit=limit,
            )

        return UsageCheck(allowed=True, current=current, limit=limit)
