"""Availability checks combining date, party size, hours and capacity rules."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from hostdesk.models import MAX_PARTY_SIZE, MIN_PARTY_SIZE, AvailabilityVerdict
from hostdesk.reservations.capacity import check_capacity
from hostdesk.reservations.hours import check_operating_hours
from hostdesk.reservations.suggestions import find_suggested_times
from hostdesk.reservations.timeutils import parse_date, parse_time, restaurant_zone
from hostdesk.storage import Store, StoreError

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AvailabilityService:
    """Answers whether a party can be seated at a slot.

    The check is read-only and safe to repeat, which is what lets the booking
    flow re-run it right before writing. Validation and business-rule failures
    come back as an unavailable verdict, never as an exception.

    Attributes:
        store: Store holding restaurants and reservations
        now: Returns the current timezone-aware instant
    """

    def __init__(self, store: Store, now: Callable[[], datetime] = _utc_now) -> None:
        """Initialize the availability service.

        Args:
            store: Store holding restaurants and reservations
            now: Aware clock; past dates are judged in each restaurant's zone
        """
        self.store = store
        self.now = now

    async def check_availability(
        self,
        restaurant_id: str,
        reservation_date: str,
        reservation_time: str,
        party_size: int,
    ) -> AvailabilityVerdict:
        """Check a slot for a party.

        Rules are applied in order and the first failure wins: past date,
        party size, unknown restaurant, operating hours, capacity.

        Args:
            restaurant_id: Restaurant to book at
            reservation_date: Requested day (YYYY-MM-DD)
            reservation_time: Requested time (HH:mm)
            party_size: Number of guests

        Returns:
            AvailabilityVerdict, with suggested times when the slot is full
        """
        try:
            requested_day = parse_date(reservation_date)
        except (TypeError, ValueError):
            return AvailabilityVerdict(
                available=False,
                reason="Please provide the date in YYYY-MM-DD format.",
            )

        try:
            parse_time(reservation_time)
        except (TypeError, ValueError):
            return AvailabilityVerdict(
                available=False,
                reason="Please provide the time in 24-hour HH:mm format.",
            )

        try:
            restaurant = await self.store.get_restaurant(restaurant_id)
        except StoreError as e:
            logger.warning(f"Restaurant lookup failed for {restaurant_id}: {e}")
            restaurant = None

        # Unknown restaurants are judged against the UTC day
        zone = restaurant_zone(restaurant.timezone if restaurant else "UTC")
        if requested_day < self.now().astimezone(zone).date():
            return AvailabilityVerdict(
                available=False,
                reason="Cannot book reservations for past dates.",
            )

        if party_size < MIN_PARTY_SIZE or party_size > MAX_PARTY_SIZE:
            return AvailabilityVerdict(
                available=False,
                reason=f"Party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE} guests.",
            )

        if restaurant is None:
            return AvailabilityVerdict(available=False, reason="Restaurant not found.")

        settings = restaurant.settings

        hours_check = check_operating_hours(
            settings.capacity.operating_hours, requested_day, reservation_time
        )
        if not hours_check.is_open:
            return AvailabilityVerdict(available=False, reason=hours_check.reason)

        capacity_check = await check_capacity(
            self.store,
            restaurant_id,
            requested_day,
            reservation_time,
            party_size,
            settings.capacity,
        )
        if not capacity_check.has_capacity:
            suggestions = await find_suggested_times(
                self.store,
                restaurant_id,
                requested_day,
                reservation_time,
                party_size,
                settings,
            )
            logger.info(
                f"Slot {reservation_date} {reservation_time} full for party of "
                f"{party_size} at {restaurant_id}; {len(suggestions)} alternatives"
            )
            return AvailabilityVerdict(
                available=False,
                reason=capacity_check.reason,
                suggested_times=suggestions or None,
            )

        return AvailabilityVerdict(available=True)
