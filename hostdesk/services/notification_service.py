"""Twilio SMS notifications for guests."""

import asyncio
import logging

from twilio.rest import Client

from hostdesk.config import Config
from hostdesk.models import Reservation
from hostdesk.reservations.timeutils import format_long_date, format_time_12h

logger = logging.getLogger(__name__)


def reservation_confirmation_sms(restaurant_name: str, reservation: Reservation) -> str:
    """Text of the reservation confirmation SMS."""
    guests = "guest" if reservation.party_size == 1 else "guests"
    return (
        f"{restaurant_name}: your table for {reservation.party_size} {guests} is confirmed "
        f"for {format_long_date(reservation.reservation_date)} at "
        f"{format_time_12h(reservation.reservation_time)}. "
        f"Reply to this number if your plans change."
    )


class NotificationService:
    """Sends SMS messages to guests through Twilio.

    When Twilio is not configured every send is skipped with a warning.
    """

    def __init__(self, config: Config, client: Client | None = None) -> None:
        """Initialize the notification service.

        Args:
            config: Application configuration with Twilio credentials
            client: Prebuilt Twilio client (built from config when omitted)
        """
        self.config = config
        if client is not None:
            self.client = client
        elif config.has_twilio_config():
            self.client = Client(config.twilio_account_sid, config.twilio_auth_token)
            logger.info("Twilio SMS notifications enabled")
        else:
            logger.warning("Twilio not configured - SMS notifications disabled")
            self.client = None

    def is_configured(self) -> bool:
        """Check if SMS can be sent.

        Returns:
            True if a Twilio client is available, False otherwise
        """
        return self.client is not None

    async def send_sms(self, to_number: str, body: str) -> str | None:
        """Send an SMS.

        Args:
            to_number: Recipient phone number
            body: Message text

        Returns:
            Message SID, or None when SMS is not configured

        Raises:
            Exception: If Twilio rejects the message
        """
        if not self.client:
            logger.warning(f"Skipping SMS to {to_number}: Twilio not configured")
            return None

        try:
            message = await asyncio.to_thread(
                self.client.messages.create,
                to=to_number,
                from_=self.config.twilio_phone_number,
                body=body,
            )
        except Exception:
            logger.exception(f"Failed to send SMS to {to_number}")
            raise
        else:
            logger.info(f"SMS sent with SID: {message.sid}")
            return message.sid

    async def send_reservation_confirmation(
        self, restaurant_name: str, reservation: Reservation
    ) -> str | None:
        """Send the booking confirmation to the guest's phone."""
        return await self.send_sms(
            reservation.customer_phone,
            reservation_confirmation_sms(restaurant_name, reservation),
        )
