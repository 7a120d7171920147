"""Shared fixtures for hostdesk tests."""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from hostdesk.config import Config
from hostdesk.models import (
    AISettings,
    Address,
    CapacitySettings,
    DayHours,
    MenuCategory,
    MenuItem,
    OperatingHours,
    Reservation,
    ReservationStatus,
    Restaurant,
    RestaurantSettings,
    Tier,
)
from hostdesk.reservations import AvailabilityService, BookingService
from hostdesk.storage import InMemoryStore

# Monday
NOW = datetime(2025, 3, 10, 15, 0, tzinfo=timezone.utc)

RESTAURANT_ID = "rest-1"
OPEN = DayHours(open="11:00", close="22:00")
WEEK_HOURS = OperatingHours(
    monday=OPEN,
    tuesday=OPEN,
    wednesday=OPEN,
    thursday=OPEN,
    friday=OPEN,
    saturday=OPEN,
    sunday=DayHours(closed=True),
)


def make_restaurant(
    restaurant_id: str = RESTAURANT_ID,
    tier: Tier = Tier.PROFESSIONAL,
    max_tables: int = 20,
    seats_per_table: int = 4,
    duration: int = 90,
    allow_reservations: bool = True,
    operating_hours: OperatingHours | None = WEEK_HOURS,
    zone: str = "UTC",
    **ai_overrides,
) -> Restaurant:
    """Restaurant open 11:00-22:00 every day except Sunday by default."""
    return Restaurant(
        id=restaurant_id,
        name="Trattoria Roma",
        phone="+15550100",
        email="ciao@roma.example",
        timezone=zone,
        address=Address(street="1 Main St", city="Springfield", state="IL", zip="62701"),
        settings=RestaurantSettings(
            tier=tier,
            capacity=CapacitySettings(
                max_tables=max_tables,
                seats_per_table=seats_per_table,
                default_reservation_duration=duration,
                operating_hours=operating_hours,
            ),
            ai=AISettings(allow_reservations=allow_reservations, **ai_overrides),
        ),
    )


def make_reservation(
    reservation_id: str,
    reservation_time: str,
    party_size: int,
    reservation_date: date = date(2025, 3, 14),
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    duration: int | None = 90,
    restaurant_id: str = RESTAURANT_ID,
) -> Reservation:
    return Reservation(
        id=reservation_id,
        restaurant_id=restaurant_id,
        customer_name="Existing Guest",
        customer_phone="+15550199",
        party_size=party_size,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        duration_minutes=duration,
        status=status,
    )


MENU_CATEGORIES = [
    MenuCategory(id="cat-starters", restaurant_id=RESTAURANT_ID, name="Starters", sort_order=1),
    MenuCategory(id="cat-mains", restaurant_id=RESTAURANT_ID, name="Mains", sort_order=2),
]

MENU_ITEMS = [
    MenuItem(
        id="item-bruschetta",
        restaurant_id=RESTAURANT_ID,
        category_id="cat-starters",
        name="Bruschetta",
        description="Grilled bread with tomato",
        price=Decimal("9.50"),
        allergens=["gluten"],
        dietary_tags=["vegan"],
        sort_order=1,
    ),
    MenuItem(
        id="item-carbonara",
        restaurant_id=RESTAURANT_ID,
        category_id="cat-mains",
        name="Spaghetti Carbonara",
        description="Egg, pecorino, guanciale",
        price=Decimal("18.00"),
        allergens=["gluten", "egg", "dairy"],
        is_featured=True,
        sort_order=2,
    ),
    MenuItem(
        id="item-risotto",
        restaurant_id=RESTAURANT_ID,
        category_id="cat-mains",
        name="Mushroom Risotto",
        description="Arborio rice, porcini",
        price=Decimal("16.25"),
        allergens=["dairy"],
        dietary_tags=["vegetarian", "gluten-free"],
        sort_order=3,
    ),
    MenuItem(
        id="item-ossobuco",
        restaurant_id=RESTAURANT_ID,
        category_id="cat-mains",
        name="Ossobuco",
        price=Decimal("29.00"),
        is_available=False,
        sort_order=4,
    ),
]


@pytest.fixture
def config():
    """Configuration isolated from the environment and .env files."""
    return Config(_env_file=None, openai_api_key="test-key", chat_max_tool_rounds=3)


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
async def restaurant(store):
    """A restaurant with a menu, stored in the in-memory store."""
    restaurant = make_restaurant()
    await store.insert_restaurant(restaurant)
    for category in MENU_CATEGORIES:
        await store.insert_menu_category(category)
    for item in MENU_ITEMS:
        await store.insert_menu_item(item)
    return restaurant


@pytest.fixture
def availability(store):
    """Availability service with the clock fixed to NOW."""
    return AvailabilityService(store, now=lambda: NOW)


@pytest.fixture
def booking(availability):
    """Booking service without notifications."""
    return BookingService(availability)


# Scripted stand-in for openai.AsyncOpenAI


def text_reply(content: str):
    """A completion that answers in plain text."""
    message = SimpleNamespace(content=content, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")])


def tool_reply(*calls: tuple[str, dict | str], content: str | None = None):
    """A completion requesting tools; each call is (name, arguments)."""
    tool_calls = [
        SimpleNamespace(
            id=f"call_{index}",
            type="function",
            function=SimpleNamespace(
                name=name,
                arguments=arguments if isinstance(arguments, str) else json.dumps(arguments),
            ),
        )
        for index, (name, arguments) in enumerate(calls)
    ]
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message, finish_reason="tool_calls")]
    )


class FakeCompletions:
    """Returns scripted completions in order and records every request."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append({**kwargs, "messages": list(kwargs["messages"])})
        if not self.responses:
            raise AssertionError("Unexpected model call")
        return self.responses.pop(0)


class FakeLLM:
    """Mimics the chat.completions surface of openai.AsyncOpenAI."""

    def __init__(self, *responses):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)
