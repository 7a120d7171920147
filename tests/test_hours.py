"""Tests for operating hours checks and time helpers."""

from datetime import date

from hostdesk.models import DayHours, OperatingHours
from hostdesk.reservations.hours import bookable_range, check_operating_hours
from hostdesk.reservations.timeutils import (
    day_of_week,
    format_long_date,
    format_time_12h,
    minutes_to_time,
    restaurant_zone,
    time_to_minutes,
)

FRIDAY = date(2025, 3, 14)
SUNDAY = date(2025, 3, 16)

HOURS = OperatingHours(
    friday=DayHours(open="11:00", close="22:00"),
    sunday=DayHours(closed=True),
)


class TestCheckOperatingHours:
    """Tests for check_operating_hours."""

    def test_last_seating_is_inclusive(self):
        """21:00 is the last seating for a 22:00 close."""
        result = check_operating_hours(HOURS, FRIDAY, "21:00")

        assert result.is_open is True
        assert result.hours.open == "11:00"
        assert result.hours.close == "22:00"

    def test_after_last_seating_is_rejected(self):
        """21:01 is past the last seating."""
        result = check_operating_hours(HOURS, FRIDAY, "21:01")

        assert result.is_open is False
        assert result.reason == "The last reservation is at 21:00 (1 hour before closing at 22:00)."

    def test_before_opening_is_rejected(self):
        """Times before opening name the opening time."""
        result = check_operating_hours(HOURS, FRIDAY, "10:59")

        assert result.is_open is False
        assert result.reason == "The restaurant doesn't open until 11:00 on Fridays."

    def test_opening_time_is_accepted(self):
        """The opening minute itself is bookable."""
        assert check_operating_hours(HOURS, FRIDAY, "11:00").is_open is True

    def test_closed_day(self):
        """A closed day rejects every time."""
        result = check_operating_hours(HOURS, SUNDAY, "12:00")

        assert result.is_open is False
        assert result.reason == "The restaurant is closed on Sundays."
        assert result.hours is None

    def test_missing_day_means_open(self):
        """A day without an entry is open all day."""
        result = check_operating_hours(HOURS, date(2025, 3, 12), "03:00")

        assert result.is_open is True

    def test_no_schedule_means_open(self):
        """Without any schedule every slot is open."""
        assert check_operating_hours(None, FRIDAY, "23:59").is_open is True

    def test_accepts_date_strings(self):
        """Dates may be given as YYYY-MM-DD strings."""
        assert check_operating_hours(HOURS, "2025-03-16", "12:00").is_open is False


class TestBookableRange:
    """Tests for bookable_range."""

    def test_open_day(self):
        """Range runs from opening to the last seating."""
        assert bookable_range(HOURS, FRIDAY) == (11 * 60, 21 * 60)

    def test_closed_day(self):
        """Closed days have no range."""
        assert bookable_range(HOURS, SUNDAY) is None

    def test_unconfigured_day(self):
        """Days without configured hours have no range."""
        assert bookable_range(HOURS, date(2025, 3, 12)) is None
        assert bookable_range(None, FRIDAY) is None


class TestTimeHelpers:
    """Tests for clock and calendar helpers."""

    def test_day_of_week(self):
        """Weekday names are lowercase."""
        assert day_of_week(FRIDAY) == "friday"
        assert day_of_week("2025-03-16") == "sunday"

    def test_minutes_round_trip(self):
        """HH:mm converts to minutes since midnight."""
        assert time_to_minutes("19:30") == 1170
        assert minutes_to_time(1170) == "19:30"
        assert minutes_to_time(0) == "00:00"

    def test_format_time_12h(self):
        """24-hour times render on the 12-hour clock."""
        assert format_time_12h("19:00") == "7:00 PM"
        assert format_time_12h("00:30") == "12:30 AM"
        assert format_time_12h("12:05") == "12:05 PM"

    def test_format_long_date(self):
        """Long dates name the weekday and month."""
        assert format_long_date("2025-03-14") == "Friday, March 14"

    def test_restaurant_zone_falls_back_to_utc(self):
        """Unknown timezone names resolve to UTC."""
        assert restaurant_zone("Not/AZone").key == "UTC"
        assert restaurant_zone("Europe/Rome").key == "Europe/Rome"
