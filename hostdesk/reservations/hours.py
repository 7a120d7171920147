"""Operating hours checks."""

from datetime import date

from hostdesk.models import HoursCheck, HoursWindow, OperatingHours
from hostdesk.reservations.timeutils import (
    day_of_week,
    minutes_to_time,
    time_to_minutes,
)

# Last seating is this many minutes before closing
LAST_SEATING_BUFFER_MINUTES = 60


def check_operating_hours(
    operating_hours: OperatingHours | None,
    reservation_date: date | str,
    reservation_time: str,
) -> HoursCheck:
    """Decide whether a slot falls within the restaurant's bookable hours.

    A missing schedule, or a missing entry for the day, means open.

    Args:
        operating_hours: Weekly schedule, if configured
        reservation_date: Requested calendar day
        reservation_time: Requested time (HH:mm)

    Returns:
        HoursCheck with a specific reason when the slot is not bookable
    """
    if operating_hours is None:
        return HoursCheck(is_open=True)

    day = day_of_week(reservation_date)
    day_hours = operating_hours.for_day(day)

    if day_hours is None:
        return HoursCheck(is_open=True)

    day_label = day.capitalize()

    if day_hours.closed:
        return HoursCheck(
            is_open=False,
            reason=f"The restaurant is closed on {day_label}s.",
        )

    requested = time_to_minutes(reservation_time)
    opens = time_to_minutes(day_hours.open)
    closes = time_to_minutes(day_hours.close)
    last_seating = closes - LAST_SEATING_BUFFER_MINUTES
    window = HoursWindow(open=day_hours.open, close=day_hours.close)

    if requested < opens:
        return HoursCheck(
            is_open=False,
            reason=f"The restaurant doesn't open until {day_hours.open} on {day_label}s.",
            hours=window,
        )

    if requested > last_seating:
        return HoursCheck(
            is_open=False,
            reason=(
                f"The last reservation is at {minutes_to_time(last_seating)} "
                f"(1 hour before closing at {day_hours.close})."
            ),
            hours=window,
        )

    return HoursCheck(is_open=True, hours=window)


def bookable_range(
    operating_hours: OperatingHours | None, reservation_date: date | str
) -> tuple[int, int] | None:
    """Return the first and last bookable minute of a day.

    None when the restaurant is closed that day or has no hours configured
    for it, so no alternative times are offered then.
    """
    day_hours = (
        operating_hours.for_day(day_of_week(reservation_date))
        if operating_hours
        else None
    )
    if day_hours is None or day_hours.closed:
        return None
    return (
        time_to_minutes(day_hours.open),
        time_to_minutes(day_hours.close) - LAST_SEATING_BUFFER_MINUTES,
    )
