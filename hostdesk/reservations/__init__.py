"""Reservation availability and booking engine."""

from hostdesk.reservations.availability import AvailabilityService
from hostdesk.reservations.booking import BookingService, format_confirmation
from hostdesk.reservations.capacity import check_capacity
from hostdesk.reservations.hours import check_operating_hours
from hostdesk.reservations.suggestions import find_suggested_times

__all__ = [
    "AvailabilityService",
    "BookingService",
    "check_capacity",
    "check_operating_hours",
    "find_suggested_times",
    "format_confirmation",
]
