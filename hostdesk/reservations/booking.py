"""Reservation booking with a fresh availability check before every insert."""

import logging
import uuid
from typing import TYPE_CHECKING

from hostdesk.models import (
    BookingResult,
    Reservation,
    ReservationInput,
    ReservationStatus,
)
from hostdesk.reservations.availability import AvailabilityService
from hostdesk.reservations.timeutils import (
    format_long_date,
    format_time_12h,
    parse_date,
)
from hostdesk.storage import StoreError

if TYPE_CHECKING:
    from hostdesk.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class BookingService:
    """Creates reservations through the same validation path for every caller.

    Availability is re-checked immediately before the insert. This narrows,
    but does not close, the window in which two concurrent bookings can both
    pass the check and both be written.
    """

    def __init__(
        self,
        availability: AvailabilityService,
        notifier: "NotificationService | None" = None,
    ) -> None:
        """Initialize the booking service.

        Args:
            availability: Availability service sharing the reservation store
            notifier: Optional SMS notifier for confirmations
        """
        self.availability = availability
        self.store = availability.store
        self.notifier = notifier

    async def book_reservation(self, request: ReservationInput) -> BookingResult:
        """Book a table if the slot is still available.

        Args:
            request: Booking request

        Returns:
            BookingResult; a reservation exists only when success is True
        """
        verdict = await self.availability.check_availability(
            request.restaurant_id, request.date, request.time, request.party_size
        )
        if not verdict.available:
            logger.info(
                f"Booking rejected for {request.restaurant_id} at "
                f"{request.date} {request.time}: {verdict.reason}"
            )
            return BookingResult(
                success=False,
                error=verdict.reason or "Time slot no longer available.",
            )

        try:
            restaurant = await self.store.get_restaurant(request.restaurant_id)
        except StoreError as e:
            logger.warning(f"Could not reload settings for {request.restaurant_id}: {e}")
            restaurant = None

        if restaurant is None:
            return BookingResult(success=False, error="Restaurant not found.")

        reservation = Reservation(
            id=str(uuid.uuid4()),
            restaurant_id=request.restaurant_id,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            customer_email=request.customer_email or None,
            party_size=request.party_size,
            reservation_date=parse_date(request.date),
            reservation_time=request.time,
            duration_minutes=restaurant.settings.capacity.default_reservation_duration,
            status=ReservationStatus.CONFIRMED,
            source=request.source,
            special_requests=request.special_requests or None,
        )

        try:
            reservation_id = await self.store.insert_reservation(reservation)
        except StoreError:
            logger.exception("Error creating reservation")
            return BookingResult(
                success=False,
                error="Failed to create reservation. Please try again.",
            )

        logger.info(
            f"Reservation {reservation_id} confirmed: party of {request.party_size} "
            f"on {request.date} at {request.time} ({request.source.value})"
        )

        if self.notifier is not None:
            await self._notify(restaurant.name, reservation)

        return BookingResult(success=True, reservation_id=reservation_id)

    async def _notify(self, restaurant_name: str, reservation: Reservation) -> None:
        try:
            await self.notifier.send_reservation_confirmation(restaurant_name, reservation)
        except Exception:
            # The booking stands even if the guest never gets the SMS
            logger.exception(f"Failed to send confirmation for {reservation.id}")


def format_confirmation(
    customer_name: str, reservation_date: str, reservation_time: str, party_size: int
) -> str:
    """Customer-facing confirmation text for a booked table."""
    guests = "guest" if party_size == 1 else "guests"
    return (
        "Your reservation is confirmed:\n"
        f"- Name: {customer_name}\n"
        f"- Date: {format_long_date(reservation_date)}\n"
        f"- Time: {format_time_12h(reservation_time)}\n"
        f"- Party size: {party_size} {guests}\n"
        "\n"
        "We look forward to seeing you!"
    )
