"""Clock time and calendar helpers. All functions are pure."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hostdesk.models import DAYS_OF_WEEK


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a calendar date
    """
    return date.fromisoformat(value)


def parse_time(value: str) -> time:
    """Parse an HH:mm string.

    Raises:
        ValueError: If the string is not a 24-hour clock time
    """
    return datetime.strptime(value, "%H:%M").time()


def day_of_week(day: date | str) -> str:
    """Return the lowercase weekday name of a calendar date.

    Anchored at noon so no UTC offset can move the date to a neighbouring day.
    """
    if isinstance(day, str):
        day = parse_date(day)
    return DAYS_OF_WEEK[datetime.combine(day, time(12, 0)).weekday()]


def time_to_minutes(value: str) -> int:
    """Convert HH:mm to minutes since midnight."""
    parsed = parse_time(value)
    return parsed.hour * 60 + parsed.minute


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to HH:mm."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def format_time_12h(value: str) -> str:
    """Render HH:mm on the 12-hour clock, e.g. 19:00 -> 7:00 PM."""
    parsed = parse_time(value)
    period = "PM" if parsed.hour >= 12 else "AM"
    hour12 = parsed.hour % 12 or 12
    return f"{hour12}:{parsed.minute:02d} {period}"


def format_long_date(value: date | str) -> str:
    """Render a date like "Friday, March 15"."""
    if isinstance(value, str):
        value = parse_date(value)
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}"


def restaurant_zone(name: str) -> ZoneInfo:
    """Resolve an IANA timezone name, falling back to UTC for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")
