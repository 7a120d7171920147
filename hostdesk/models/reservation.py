"""Data models for restaurant reservations."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 50


class ReservationStatus(str, Enum):
    """Lifecycle status of a reservation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that occupy seats
ACTIVE_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.SEATED,
)


class ReservationSource(str, Enum):
    """Channel a reservation came in through."""

    PHONE = "phone"
    CHAT = "chat"
    WEBSITE = "website"
    WALK_IN = "walk_in"
    MANUAL = "manual"
    AI = "ai"


class Reservation(BaseModel):
    """A stored reservation."""

    id: str = Field(..., description="Reservation identifier")
    restaurant_id: str = Field(..., description="Owning restaurant")
    customer_name: str = Field(..., description="Name for the reservation")
    customer_phone: str = Field(..., description="Contact phone number")
    customer_email: str | None = Field(None, description="Contact email")
    party_size: int = Field(..., ge=MIN_PARTY_SIZE, le=MAX_PARTY_SIZE)
    reservation_date: date = Field(..., description="Calendar day")
    reservation_time: str = Field(..., description="Local time (HH:mm)")
    duration_minutes: int | None = Field(
        None, description="Seating duration; restaurant default when unset"
    )
    status: ReservationStatus = ReservationStatus.PENDING
    source: ReservationSource = ReservationSource.MANUAL
    special_requests: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class ReservationInput(BaseModel):
    """A booking request from a guest, staff member or the assistant."""

    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    party_size: int
    date: str = Field(..., description="Reservation date (YYYY-MM-DD)")
    time: str = Field(..., description="Reservation time (HH:mm)")
    special_requests: str | None = None
    source: ReservationSource = ReservationSource.AI


class AvailabilityVerdict(BaseModel):
    """Answer to "can this party be seated at this slot?"."""

    available: bool
    reason: str | None = None
    suggested_times: list[str] | None = None


class BookingResult(BaseModel):
    """Outcome of a booking attempt."""

    success: bool
    reservation_id: str | None = None
    error: str | None = None


class HoursWindow(BaseModel):
    """Open and close times for a day."""

    open: str
    close: str


class HoursCheck(BaseModel):
    """Result of an operating hours check."""

    is_open: bool
    reason: str | None = None
    hours: HoursWindow | None = None


class CapacityCheck(BaseModel):
    """Result of a capacity check."""

    has_capacity: bool
    reason: str | None = None
    current_guests: int | None = None
    max_capacity: int | None = None
