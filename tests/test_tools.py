"""Tests for the chat assistant's tools."""

from decimal import Decimal

import pytest
from conftest import (
    MENU_CATEGORIES,
    MENU_ITEMS,
    NOW,
    RESTAURANT_ID,
    make_reservation,
    make_restaurant,
)

from hostdesk.agents.tools import TOOLS, ChatContext, ToolExecutor
from hostdesk.agents.tools.definitions import RESERVATIONS_DISABLED
from hostdesk.models import MenuItem, ReservationSource


@pytest.fixture
def context(restaurant):
    return ChatContext(
        restaurant=restaurant, menu_items=MENU_ITEMS, categories=MENU_CATEGORIES
    )


@pytest.fixture
def executor(context, availability, booking):
    return ToolExecutor(context, availability, booking, now=lambda: NOW)


class TestToolSchemas:
    """Tests for the function-calling schemas sent to the model."""

    def test_all_tools_are_declared(self):
        """Every tool has an OpenAI function definition."""
        names = [tool["function"]["name"] for tool in TOOLS]

        assert names == [
            "get_menu_items",
            "get_menu_item_details",
            "check_opening_hours",
            "get_restaurant_info",
            "check_availability",
            "book_table",
        ]
        for tool in TOOLS:
            assert tool["type"] == "function"
            assert tool["function"]["description"]
            assert tool["function"]["parameters"]["type"] == "object"

    def test_book_table_required_fields(self):
        """book_table requires the guest's contact details and the slot."""
        book_table = next(t for t in TOOLS if t["function"]["name"] == "book_table")
        parameters = book_table["function"]["parameters"]

        assert set(parameters["required"]) == {
            "customer_name",
            "customer_phone",
            "date",
            "time",
            "party_size",
        }
        assert "special_requests" in parameters["properties"]

    def test_opening_hours_day_enum(self):
        """check_opening_hours accepts weekdays and "today"."""
        hours_tool = next(t for t in TOOLS if t["function"]["name"] == "check_opening_hours")
        day = hours_tool["function"]["parameters"]["properties"]["day"]

        assert "today" in day["enum"]
        assert "sunday" in day["enum"]


class TestMenuTools:
    """Tests for menu lookups."""

    async def test_lists_available_items(self, executor):
        """Unavailable items are hidden by default."""
        result = await executor.execute("get_menu_items", {})

        assert result.startswith("Found 3 item(s):\n")
        assert "- Bruschetta ($9.50) [Starters] - vegan: Grilled bread with tomato" in result
        assert "Ossobuco" not in result

    async def test_includes_unavailable_items_on_request(self, executor):
        """available_only=false lists the whole menu."""
        result = await executor.execute("get_menu_items", {"available_only": False})

        assert result.startswith("Found 4 item(s):")
        assert "Ossobuco ($29.00)" in result

    async def test_filters_by_dietary_tag(self, executor):
        """Dietary tags match case-insensitively."""
        result = await executor.execute("get_menu_items", {"dietary_tags": ["VEGAN"]})

        assert result.startswith("Found 1 item(s):")
        assert "Bruschetta" in result

    async def test_filters_by_category(self, executor):
        """Category names match by substring."""
        result = await executor.execute("get_menu_items", {"category_name": "main"})

        assert result.startswith("Found 2 item(s):")
        assert "Spaghetti Carbonara" in result
        assert "Mushroom Risotto" in result

    async def test_search_term_matches_description(self, executor):
        """Search terms match names and descriptions."""
        result = await executor.execute("get_menu_items", {"search_term": "porcini"})

        assert result.startswith("Found 1 item(s):")
        assert "Mushroom Risotto" in result

    async def test_no_matches(self, executor):
        """An empty result is reported in words."""
        result = await executor.execute("get_menu_items", {"search_term": "sushi"})

        assert result == "No menu items found matching your criteria."

    async def test_long_results_are_truncated(self, restaurant, availability, booking):
        """At most ten items are listed."""
        items = [
            MenuItem(
                id=f"item-{index}",
                restaurant_id=RESTAURANT_ID,
                name=f"Pizza {index}",
                price=Decimal("12"),
            )
            for index in range(12)
        ]
        executor = ToolExecutor(
            ChatContext(restaurant=restaurant, menu_items=items), availability, booking
        )

        result = await executor.execute("get_menu_items", {})

        assert result.startswith("Found 12 item(s):")
        assert result.count("\n- Pizza") == 10
        assert result.endswith("... and 2 more items")

    async def test_item_details(self, executor):
        """Details include price, category, availability and allergens."""
        result = await executor.execute("get_menu_item_details", {"item_name": "carbonara"})

        assert result == (
            "**Spaghetti Carbonara** - $18.00\n"
            "Category: Mains\n"
            "Description: Egg, pecorino, guanciale\n"
            "Availability: Available\n"
            "Contains allergens: gluten, egg, dairy\n"
            "Featured item"
        )

    async def test_item_details_unavailable(self, executor):
        """Unavailable items say so."""
        result = await executor.execute("get_menu_item_details", {"item_name": "Ossobuco"})

        assert "Availability: Currently unavailable" in result
        assert "No allergen information" in result

    async def test_item_details_not_found(self, executor):
        """Unknown items are named in the reply."""
        result = await executor.execute("get_menu_item_details", {"item_name": "Sushi"})

        assert result == 'No menu item found with name "Sushi"'


class TestInfoTools:
    """Tests for hours and restaurant information."""

    async def test_hours_for_day(self, executor):
        """A weekday returns its opening hours."""
        result = await executor.execute("check_opening_hours", {"day": "friday"})

        assert result == "Friday: 11:00 - 22:00"

    async def test_closed_day(self, executor):
        """Closed days are reported."""
        result = await executor.execute("check_opening_hours", {"day": "sunday"})

        assert result == "The restaurant is closed on Sunday."

    async def test_today_reports_open_now(self, executor):
        """"today" resolves the day and whether the restaurant is open now."""
        result = await executor.execute("check_opening_hours", {})

        assert result == (
            "Today (Monday): 11:00 - 22:00. The restaurant is currently OPEN."
        )

    async def test_no_hours_configured(self, availability, booking):
        """Restaurants without a schedule say so."""
        context = ChatContext(restaurant=make_restaurant(operating_hours=None))
        executor = ToolExecutor(context, availability, booking)

        result = await executor.execute("check_opening_hours", {"day": "friday"})

        assert result == "Operating hours information is not available."

    async def test_restaurant_info(self, executor):
        """Contact details are listed, with placeholders for missing ones."""
        result = await executor.execute("get_restaurant_info", {})

        assert result.startswith("**Trattoria Roma**\n")
        assert "Phone: +15550100" in result
        assert "Address: 1 Main St, Springfield, IL 62701" in result
        assert "Website: Not available" in result


class TestReservationTools:
    """Tests for availability and booking tools."""

    async def test_available_slot(self, executor):
        """An open slot is confirmed and the guest's details are requested."""
        result = await executor.execute(
            "check_availability", {"date": "2025-03-14", "time": "19:00", "party_size": 4}
        )

        assert result == (
            "Great news! A table for 4 is available on Friday, March 14 at 7:00 PM. "
            "To complete the reservation, I'll need the name and phone number for the booking."
        )

    async def test_full_slot_lists_alternatives(self, store, executor):
        """Suggested times are rendered on the 12-hour clock."""
        await store.insert_reservation(make_reservation("r1", "19:00", 40))
        await store.insert_reservation(make_reservation("r2", "19:00", 40))

        result = await executor.execute(
            "check_availability", {"date": "2025-03-14", "time": "19:00", "party_size": 4}
        )

        assert result == (
            "We're fully booked at 19:00. We can accommodate 0 more guests at this time. "
            "However, these times are available: 5:30 PM, 8:30 PM, 5:00 PM."
        )

    async def test_book_table(self, store, executor):
        """Bookings from the assistant are stored with source "ai"."""
        result = await executor.execute(
            "book_table",
            {
                "customer_name": "Ada Lovelace",
                "customer_phone": "+15550123",
                "date": "2025-03-14",
                "time": "19:00",
                "party_size": 2,
            },
        )

        assert result.startswith("Your reservation is confirmed:\n- Name: Ada Lovelace")
        [reservation] = store.reservations.values()
        assert reservation.source == ReservationSource.AI
        assert reservation.party_size == 2

    async def test_book_table_rejection(self, store, executor):
        """Rejected bookings return the reason and write nothing."""
        result = await executor.execute(
            "book_table",
            {
                "customer_name": "Ada Lovelace",
                "customer_phone": "+15550123",
                "date": "2025-03-16",
                "time": "19:00",
                "party_size": 2,
            },
        )

        assert result == "The restaurant is closed on Sundays."
        assert store.reservations == {}

    @pytest.mark.parametrize("tool", ["check_availability", "book_table"])
    async def test_reservations_disabled(self, store, availability, booking, tool):
        """Restaurants can keep reservations off the assistant."""
        restaurant = make_restaurant(allow_reservations=False)
        await store.insert_restaurant(restaurant)
        executor = ToolExecutor(ChatContext(restaurant=restaurant), availability, booking)

        result = await executor.execute(
            tool,
            {
                "customer_name": "Ada",
                "customer_phone": "+15550123",
                "date": "2025-03-14",
                "time": "19:00",
                "party_size": 2,
            },
        )

        assert result == RESERVATIONS_DISABLED
        assert store.reservations == {}


class TestToolExecution:
    """Tests for argument validation and error handling."""

    async def test_unknown_tool(self, executor):
        """Unknown tool names are answered, not raised."""
        assert await executor.execute("order_pizza", {}) == "Unknown tool"

    async def test_invalid_arguments(self, executor):
        """Arguments failing validation are reported back to the model."""
        result = await executor.execute("check_availability", {"date": "2025-03-14"})

        assert result.startswith("Invalid input for check_availability")

    async def test_tool_errors_become_text(self, context, availability):
        """Exceptions inside a tool are returned as an error result."""

        class BrokenBooking:
            async def book_reservation(self, request):
                raise RuntimeError("boom")

        executor = ToolExecutor(context, availability, BrokenBooking())

        result = await executor.execute(
            "book_table",
            {
                "customer_name": "Ada",
                "customer_phone": "+15550123",
                "date": "2025-03-14",
                "time": "19:00",
                "party_size": 2,
            },
        )

        assert result == "Error executing book_table: boom"
