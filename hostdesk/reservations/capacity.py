"""Seat capacity checks for a reservation slot."""

import logging
from datetime import date

from hostdesk.models import ACTIVE_STATUSES, CapacityCheck, CapacitySettings
from hostdesk.reservations.timeutils import time_to_minutes
from hostdesk.storage import Store, StoreError

logger = logging.getLogger(__name__)


async def check_capacity(
    store: Store,
    restaurant_id: str,
    reservation_date: date,
    reservation_time: str,
    party_size: int,
    capacity: CapacitySettings,
) -> CapacityCheck:
    """Check whether a party fits next to the guests already seated around a slot.

    Guests of every active reservation that overlaps the window
    [time - duration, time + duration] are summed. A reservation overlaps when
    it starts before the window ends and is still running at the requested
    time.

    If the reservations cannot be read, the check fails open and reports
    capacity: a transient read failure must not block bookings.

    Args:
        store: Reservation store
        restaurant_id: Restaurant to check
        reservation_date: Requested day
        reservation_time: Requested time (HH:mm)
        party_size: Number of guests to seat
        capacity: Capacity settings of the restaurant

    Returns:
        CapacityCheck with current occupancy and the remaining headroom
    """
    max_capacity = capacity.max_capacity
    duration = capacity.default_reservation_duration

    requested = time_to_minutes(reservation_time)
    window_end = requested + duration

    try:
        reservations = await store.list_reservations(
            restaurant_id, reservation_date, ACTIVE_STATUSES
        )
    except StoreError as e:
        logger.warning(
            f"Capacity check failed for restaurant {restaurant_id} on "
            f"{reservation_date}, allowing booking: {e}"
        )
        return CapacityCheck(has_capacity=True)

    current_guests = 0
    for reservation in reservations:
        starts = time_to_minutes(reservation.reservation_time)
        ends = starts + (reservation.duration_minutes or duration)
        if starts < window_end and ends > requested:
            current_guests += reservation.party_size

    if current_guests + party_size > max_capacity:
        return CapacityCheck(
            has_capacity=False,
            reason=(
                f"We're fully booked at {reservation_time}. We can accommodate "
                f"{max_capacity - current_guests} more guests at this time."
            ),
            current_guests=current_guests,
            max_capacity=max_capacity,
        )

    return CapacityCheck(
        has_capacity=True,
        current_guests=current_guests,
        max_capacity=max_capacity,
    )
