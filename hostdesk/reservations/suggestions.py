"""Alternative time search for slots that are fully booked."""

import logging
from datetime import date

from hostdesk.models import RestaurantSettings
from hostdesk.reservations.capacity import check_capacity
from hostdesk.reservations.hours import bookable_range
from hostdesk.reservations.timeutils import minutes_to_time, time_to_minutes
from hostdesk.storage import Store

logger = logging.getLogger(__name__)

PROBE_STEP_MINUTES = 30
MAX_PROBE_OFFSET_MINUTES = 120
MAX_SUGGESTIONS = 3


def candidate_minutes(requested: int, first: int, last: int) -> list[int]:
    """Slots around `requested`, nearest first and earlier before later.

    Candidates outside [first, last] are dropped.
    """
    candidates = []
    for delta in range(PROBE_STEP_MINUTES, MAX_PROBE_OFFSET_MINUTES + 1, PROBE_STEP_MINUTES):
        earlier = requested - delta
        later = requested + delta
        if earlier >= first:
            candidates.append(earlier)
        if later <= last:
            candidates.append(later)
    return candidates


async def find_suggested_times(
    store: Store,
    restaurant_id: str,
    reservation_date: date,
    requested_time: str,
    party_size: int,
    settings: RestaurantSettings,
) -> list[str]:
    """Find up to three nearby times with room for the party.

    Returns:
        Times (HH:mm) ordered by distance from the requested time, possibly empty
    """
    bounds = bookable_range(settings.capacity.operating_hours, reservation_date)
    if bounds is None:
        return []

    first, last = bounds
    suggestions: list[str] = []

    for minutes in candidate_minutes(time_to_minutes(requested_time), first, last):
        slot = minutes_to_time(minutes)
        check = await check_capacity(
            store, restaurant_id, reservation_date, slot, party_size, settings.capacity
        )
        if check.has_capacity:
            suggestions.append(slot)
            if len(suggestions) >= MAX_SUGGESTIONS:
                break

    logger.debug(f"Suggested times for {requested_time} on {reservation_date}: {suggestions}")
    return suggestions
