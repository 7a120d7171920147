#!/usr/bin/env python3
"""Seed a demo restaurant with a small menu into the SQLite database.

The database path comes from DATABASE_PATH (default hostdesk.db).

Usage:
    python scripts/seed_demo.py
"""

import asyncio
import sys
from decimal import Decimal

from hostdesk.config import get_config, setup_logging
from hostdesk.models import (
    AISettings,
    Address,
    CapacitySettings,
    DayHours,
    MenuCategory,
    MenuItem,
    OperatingHours,
    Restaurant,
    RestaurantSettings,
    Tier,
)
from hostdesk.storage import SQLiteStore, StoreError

DEMO_RESTAURANT_ID = "demo-trattoria"

WEEKDAY = DayHours(open="11:00", close="22:00")
WEEKEND = DayHours(open="10:00", close="23:00")

DEMO_RESTAURANT = Restaurant(
    id=DEMO_RESTAURANT_ID,
    name="Trattoria Demo",
    timezone="America/New_York",
    phone="+1 555 010 2030",
    email="hello@trattoria.example",
    website="https://trattoria.example",
    address=Address(street="12 Mulberry St", city="New York", state="NY", zip="10013"),
    settings=RestaurantSettings(
        tier=Tier.STARTER,
        capacity=CapacitySettings(
            max_tables=12,
            seats_per_table=4,
            default_reservation_duration=90,
            operating_hours=OperatingHours(
                monday=DayHours(closed=True),
                tuesday=WEEKDAY,
                wednesday=WEEKDAY,
                thursday=WEEKDAY,
                friday=WEEKEND,
                saturday=WEEKEND,
                sunday=WEEKDAY,
            ),
        ),
        ai=AISettings(
            allow_reservations=True,
            allow_orders=True,
            greeting="Ciao! Welcome to Trattoria Demo. Hungry, or looking for a table?",
        ),
    ),
)

DEMO_CATEGORIES = [
    MenuCategory(
        id="cat-antipasti", restaurant_id=DEMO_RESTAURANT_ID, name="Antipasti", sort_order=1
    ),
    MenuCategory(
        id="cat-pasta", restaurant_id=DEMO_RESTAURANT_ID, name="Pasta", sort_order=2
    ),
    MenuCategory(
        id="cat-dolci", restaurant_id=DEMO_RESTAURANT_ID, name="Dolci", sort_order=3
    ),
]

DEMO_ITEMS = [
    MenuItem(
        id="item-bruschetta",
        restaurant_id=DEMO_RESTAURANT_ID,
        category_id="cat-antipasti",
        name="Bruschetta",
        description="Grilled bread, tomato, basil, garlic",
        price=Decimal("9.50"),
        allergens=["gluten"],
        dietary_tags=["vegan"],
    ),
    MenuItem(
        id="item-carbonara",
        restaurant_id=DEMO_RESTAURANT_ID,
        category_id="cat-pasta",
        name="Spaghetti Carbonara",
        description="Guanciale, egg yolk, pecorino, black pepper",
        price=Decimal("18.00"),
        allergens=["gluten", "egg", "dairy"],
        is_featured=True,
    ),
    MenuItem(
        id="item-arrabbiata",
        restaurant_id=DEMO_RESTAURANT_ID,
        category_id="cat-pasta",
        name="Penne Arrabbiata",
        description="Tomato, chili, garlic",
        price=Decimal("15.50"),
        allergens=["gluten"],
        dietary_tags=["vegan", "spicy"],
    ),
    MenuItem(
        id="item-tiramisu",
        restaurant_id=DEMO_RESTAURANT_ID,
        category_id="cat-dolci",
        name="Tiramisu",
        description="Mascarpone, espresso, cocoa",
        price=Decimal("8.00"),
        allergens=["egg", "dairy", "gluten"],
        dietary_tags=["vegetarian"],
    ),
]


async def seed(store: SQLiteStore) -> None:
    """Insert the demo restaurant, categories and menu items."""
    await store.insert_restaurant(DEMO_RESTAURANT)
    for category in DEMO_CATEGORIES:
        await store.insert_menu_category(category)
    for item in DEMO_ITEMS:
        await store.insert_menu_item(item)


def main():
    """Create the schema and seed the demo data."""
    config = get_config()
    setup_logging(config)

    store = SQLiteStore(config.database_path)
    store.init_db()

    try:
        asyncio.run(seed(store))
    except StoreError as e:
        print(f"Error: could not seed demo data ({e}). Is it already seeded?")
        sys.exit(1)

    print(f"Seeded '{DEMO_RESTAURANT.name}' into {config.database_path}")
    print(f"Chat with it:  hostdesk-cli {DEMO_RESTAURANT_ID}")


if __name__ == "__main__":
    main()
