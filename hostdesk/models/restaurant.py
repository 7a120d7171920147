"""Restaurant and restaurant settings models."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DAYS_OF_WEEK = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_MAX_TABLES = 20
DEFAULT_SEATS_PER_TABLE = 4
DEFAULT_RESERVATION_DURATION = 90

_CLOCK_TIME = re.compile(r"(\d{1,2}):(\d{2})")


class _SettingsModel(BaseModel):
    """Base for settings sections stored as camelCase JSON documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class Tier(str, Enum):
    """Subscription tier of a restaurant."""

    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Personality(str, Enum):
    """Tone of the AI assistant."""

    FRIENDLY = "friendly"
    FORMAL = "formal"
    EFFICIENT = "efficient"


class DayHours(_SettingsModel):
    """Opening hours for a single day. open/close are ignored when closed."""

    open: str = Field(default="00:00", description="Opening time (HH:mm)")
    close: str = Field(default="23:59", description="Closing time (HH:mm)")
    closed: bool = Field(default=False, description="Closed all day")

    @field_validator("open", "close", mode="before")
    @classmethod
    def _clock_time(cls, value: Any) -> Any:
        """Normalize to zero-padded HH:mm. 24:00 means end of day, stored as 23:59."""
        if not isinstance(value, str):
            return value
        match = _CLOCK_TIME.fullmatch(value.strip())
        if match is None:
            raise ValueError(f"expected HH:mm, got {value!r}")
        hour, minute = int(match.group(1)), int(match.group(2))
        if (hour, minute) == (24, 0):
            return "23:59"
        if hour > 23 or minute > 59:
            raise ValueError(f"expected HH:mm, got {value!r}")
        return f"{hour:02d}:{minute:02d}"


class OperatingHours(_SettingsModel):
    """Weekly schedule. A missing day means open all day."""

    monday: DayHours | None = None
    tuesday: DayHours | None = None
    wednesday: DayHours | None = None
    thursday: DayHours | None = None
    friday: DayHours | None = None
    saturday: DayHours | None = None
    sunday: DayHours | None = None

    def for_day(self, day: str) -> DayHours | None:
        """Return the hours for a lowercase day name."""
        if day not in DAYS_OF_WEEK:
            return None
        return getattr(self, day)


class CapacitySettings(_SettingsModel):
    """Seating capacity and scheduling configuration."""

    max_tables: int = Field(default=DEFAULT_MAX_TABLES, ge=1)
    seats_per_table: int = Field(default=DEFAULT_SEATS_PER_TABLE, ge=1)
    default_reservation_duration: int = Field(
        default=DEFAULT_RESERVATION_DURATION, ge=1
    )
    operating_hours: OperatingHours | None = None

    @field_validator(
        "max_tables", "seats_per_table", "default_reservation_duration", mode="before"
    )
    @classmethod
    def _unset_means_default(cls, value: Any, info) -> Any:
        # Stored documents use null or 0 for "not configured"
        if value in (None, 0, ""):
            return cls.model_fields[info.field_name].default
        return value

    @property
    def max_capacity(self) -> int:
        """Total seats across all tables."""
        return self.max_tables * self.seats_per_table


class AISettings(_SettingsModel):
    """Configuration of the customer-facing AI assistant."""

    personality: Personality = Personality.FRIENDLY
    allow_reservations: bool = False
    allow_orders: bool = False
    custom_instructions: str = ""
    greeting: str = ""

    @field_validator("personality", mode="before")
    @classmethod
    def _unknown_personality_is_friendly(cls, value: Any) -> Any:
        if isinstance(value, Personality):
            return value
        if value not in {p.value for p in Personality}:
            return Personality.FRIENDLY
        return value


class RestaurantSettings(_SettingsModel):
    """Typed view over a restaurant's settings document.

    All defaults are resolved here, once, when the document is loaded.
    """

    tier: Tier = Tier.FREE
    capacity: CapacitySettings = Field(default_factory=CapacitySettings)
    ai: AISettings = Field(default_factory=AISettings)

    @field_validator("capacity", "ai", mode="before")
    @classmethod
    def _null_section_is_default(cls, value: Any) -> Any:
        return {} if value is None else value


class Address(BaseModel):
    """Postal address of a restaurant."""

    model_config = ConfigDict(frozen=True)

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None

    def one_line(self) -> str:
        """Render the address on a single line."""
        return f"{self.street or ''}, {self.city or ''}, {self.state or ''} {self.zip or ''}".strip()


class Restaurant(BaseModel):
    """Restaurant information."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Restaurant identifier")
    name: str = Field(..., description="Restaurant name")
    timezone: str = Field(default="UTC", description="IANA timezone name")
    phone: str | None = Field(None, description="Restaurant phone number")
    email: str | None = Field(None, description="Restaurant contact email")
    website: str | None = Field(None, description="Restaurant website")
    address: Address | None = Field(None, description="Restaurant address")
    currency: str = Field(default="usd", description="Currency for orders")
    settings: RestaurantSettings = Field(default_factory=RestaurantSettings)

    @field_validator("settings", mode="before")
    @classmethod
    def _null_settings_is_default(cls, value: Any) -> Any:
        return {} if value is None else value
