"""Tools the chat assistant can call, and their executor.

Each tool has a pydantic input model. The model's JSON schema is what the LLM
sees, and the same model validates the arguments it sends back. Every tool
answers in plain text.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hostdesk.models import (
    DAYS_OF_WEEK,
    MenuCategory,
    MenuItem,
    ReservationInput,
    ReservationSource,
    Restaurant,
    RestaurantSettings,
)
from hostdesk.reservations.availability import AvailabilityService
from hostdesk.reservations.booking import BookingService, format_confirmation
from hostdesk.reservations.timeutils import (
    format_long_date,
    format_time_12h,
    restaurant_zone,
)

logger = logging.getLogger(__name__)

MAX_LISTED_ITEMS = 10

RESERVATIONS_DISABLED = (
    "Online reservations are not available. Please call the restaurant directly "
    "to make a reservation."
)


class ChatContext(BaseModel):
    """Restaurant data the assistant works from during one exchange."""

    model_config = ConfigDict(frozen=True)

    restaurant: Restaurant
    menu_items: list[MenuItem] = Field(default_factory=list)
    categories: list[MenuCategory] = Field(default_factory=list)

    @property
    def settings(self) -> RestaurantSettings:
        return self.restaurant.settings

    def category_of(self, item: MenuItem) -> MenuCategory | None:
        return next((c for c in self.categories if c.id == item.category_id), None)


class GetMenuItemsInput(BaseModel):
    """Search and retrieve menu items. Can filter by dietary tags, category, or
    search term. Use this when customers ask about the menu, specific dishes,
    or dietary requirements."""

    search_term: str | None = Field(
        None, description="Optional search term to find items by name or description"
    )
    dietary_tags: list[str] = Field(
        default_factory=list,
        description="Optional dietary tags to filter by (e.g., vegan, gluten-free, spicy)",
    )
    category_name: str | None = Field(
        None, description="Optional category name to filter items"
    )
    available_only: bool = Field(
        True, description="If true, only return available items"
    )


class GetMenuItemDetailsInput(BaseModel):
    """Get detailed information about a specific menu item including
    allergens, dietary info, and price."""

    item_name: str = Field(..., description="The name of the menu item to look up")


class CheckOpeningHoursInput(BaseModel):
    """Check if the restaurant is currently open or get opening hours for a
    specific day."""

    day: Literal[
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
        "sunday",
        "today",
    ] = Field("today", description='The day to check. Use "today" for current day.')


class GetRestaurantInfoInput(BaseModel):
    """Get general restaurant information like address, phone number, and
    contact details."""


class CheckAvailabilityInput(BaseModel):
    """Check if a table is available for a reservation at a specific date,
    time, and party size. Use this when a customer wants to make a reservation
    to verify availability before booking."""

    date: str = Field(
        ...,
        description="The date for the reservation in YYYY-MM-DD format (e.g., 2024-03-15)",
    )
    time: str = Field(
        ...,
        description="The time for the reservation in HH:mm format (24-hour, e.g., 19:00 for 7 PM)",
    )
    party_size: int = Field(..., description="The number of guests (1-50)")


class BookTableInput(BaseModel):
    """Book a table reservation. Only use this after confirming availability
    with check_availability and collecting all required customer information
    (name, phone)."""

    customer_name: str = Field(..., description="The name for the reservation")
    customer_phone: str = Field(
        ..., description="Contact phone number for the reservation"
    )
    customer_email: str | None = Field(
        None, description="Optional email address for confirmation"
    )
    date: str = Field(..., description="The date for the reservation in YYYY-MM-DD format")
    time: str = Field(
        ..., description="The time for the reservation in HH:mm format (24-hour)"
    )
    party_size: int = Field(..., description="The number of guests")
    special_requests: str | None = Field(
        None,
        description="Any special requests or notes (dietary restrictions, celebrations, etc.)",
    )


TOOL_INPUTS: dict[str, type[BaseModel]] = {
    "get_menu_items": GetMenuItemsInput,
    "get_menu_item_details": GetMenuItemDetailsInput,
    "check_opening_hours": CheckOpeningHoursInput,
    "get_restaurant_info": GetRestaurantInfoInput,
    "check_availability": CheckAvailabilityInput,
    "book_table": BookTableInput,
}


def _tool_schema(name: str, input_model: type[BaseModel]) -> dict:
    parameters = input_model.model_json_schema()
    description = " ".join((parameters.pop("description", "") or "").split())
    parameters.pop("title", None)
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


# OpenAI function-calling schema for every tool
TOOLS: list[dict] = [_tool_schema(name, model) for name, model in TOOL_INPUTS.items()]


def _format_price(item: MenuItem) -> str:
    return f"${item.price:.2f}"


def _day_label(day: str) -> str:
    return day.capitalize()


class ToolExecutor:
    """Runs tool calls against one restaurant's live data.

    Only book_table writes, and it goes through BookingService exactly like
    a booking from the website.
    """

    def __init__(
        self,
        context: ChatContext,
        availability: AvailabilityService,
        booking: BookingService,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            context: Restaurant, menu and settings for this exchange
            availability: Availability service
            booking: Booking service
            now: Clock returning an aware datetime (defaults to UTC now)
        """
        self.context = context
        self.availability = availability
        self.booking = booking
        self.now = now or (lambda: datetime.now(timezone.utc))
        self._handlers = {
            "get_menu_items": self.get_menu_items,
            "get_menu_item_details": self.get_menu_item_details,
            "check_opening_hours": self.check_opening_hours,
            "get_restaurant_info": self.get_restaurant_info,
            "check_availability": self.check_availability,
            "book_table": self.book_table,
        }

    async def execute(self, name: str, arguments: dict) -> str:
        """Validate arguments and run the named tool.

        Args:
            name: Tool name requested by the model
            arguments: Decoded JSON arguments

        Returns:
            Plain-text result for the model
        """
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return "Unknown tool"

        try:
            params = TOOL_INPUTS[name].model_validate(arguments)
        except ValidationError as e:
            logger.info(f"Invalid arguments for {name}: {e.errors()}")
            return f"Invalid input for {name}: {e}"

        logger.info(f"Executing tool {name}")
        try:
            return await handler(params)
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            return f"Error executing {name}: {e}"

    async def get_menu_items(self, params: GetMenuItemsInput) -> str:
        results = self.context.menu_items

        if params.available_only:
            results = [item for item in results if item.is_available]

        if params.category_name:
            wanted = params.category_name.lower()
            category = next(
                (c for c in self.context.categories if wanted in c.name.lower()), None
            )
            if category:
                results = [item for item in results if item.category_id == category.id]

        if params.dietary_tags:
            tags = [tag.lower() for tag in params.dietary_tags]
            results = [
                item
                for item in results
                if any(tag in t.lower() for tag in tags for t in item.dietary_tags)
            ]

        if params.search_term:
            term = params.search_term.lower()
            results = [
                item
                for item in results
                if term in item.name.lower()
                or (item.description and term in item.description.lower())
            ]

        if not results:
            return "No menu items found matching your criteria."

        lines = []
        for item in results[:MAX_LISTED_ITEMS]:
            line = f"- {item.name} ({_format_price(item)})"
            category = self.context.category_of(item)
            if category:
                line += f" [{category.name}]"
            if item.dietary_tags:
                line += f" - {', '.join(item.dietary_tags)}"
            if item.description:
                line += f": {item.description}"
            lines.append(line)

        text = f"Found {len(results)} item(s):\n" + "\n".join(lines)
        if len(results) > MAX_LISTED_ITEMS:
            text += f"\n... and {len(results) - MAX_LISTED_ITEMS} more items"
        return text

    async def get_menu_item_details(self, params: GetMenuItemDetailsInput) -> str:
        wanted = params.item_name.lower()
        item = next(
            (i for i in self.context.menu_items if wanted in i.name.lower()), None
        )
        if item is None:
            return f'No menu item found with name "{params.item_name}"'

        category = self.context.category_of(item)
        lines = [
            f"**{item.name}** - {_format_price(item)}",
            f"Category: {category.name if category else 'Uncategorized'}",
        ]
        if item.description:
            lines.append(f"Description: {item.description}")
        lines.append(
            f"Availability: {'Available' if item.is_available else 'Currently unavailable'}"
        )
        if item.dietary_tags:
            lines.append(f"Dietary: {', '.join(item.dietary_tags)}")
        if item.allergens:
            lines.append(f"Contains allergens: {', '.join(item.allergens)}")
        else:
            lines.append("No allergen information")
        if item.is_featured:
            lines.append("Featured item")
        return "\n".join(lines)

    async def check_opening_hours(self, params: CheckOpeningHoursInput) -> str:
        operating_hours = self.context.settings.capacity.operating_hours
        if operating_hours is None:
            return "Operating hours information is not available."

        zone = restaurant_zone(self.context.restaurant.timezone)
        local_now = self.now().astimezone(zone)
        day = DAYS_OF_WEEK[local_now.weekday()] if params.day == "today" else params.day

        hours = operating_hours.for_day(day)
        if hours is None:
            return f"No hours information available for {day}."

        if hours.closed:
            return f"The restaurant is closed on {_day_label(day)}."

        if params.day == "today":
            current = local_now.strftime("%H:%M")
            is_open = hours.open <= current <= hours.close
            return (
                f"Today ({_day_label(day)}): {hours.open} - {hours.close}. "
                f"The restaurant is currently {'OPEN' if is_open else 'CLOSED'}."
            )

        return f"{_day_label(day)}: {hours.open} - {hours.close}"

    async def get_restaurant_info(self, params: GetRestaurantInfoInput) -> str:
        restaurant = self.context.restaurant
        address = restaurant.address.one_line() if restaurant.address else "Not available"
        return (
            f"**{restaurant.name}**\n"
            f"Phone: {restaurant.phone or 'Not available'}\n"
            f"Email: {restaurant.email or 'Not available'}\n"
            f"Address: {address}\n"
            f"Website: {restaurant.website or 'Not available'}"
        )

    async def check_availability(self, params: CheckAvailabilityInput) -> str:
        if not self.context.settings.ai.allow_reservations:
            return RESERVATIONS_DISABLED

        verdict = await self.availability.check_availability(
            self.context.restaurant.id, params.date, params.time, params.party_size
        )

        if verdict.available:
            return (
                f"Great news! A table for {params.party_size} is available on "
                f"{format_long_date(params.date)} at {format_time_12h(params.time)}. "
                "To complete the reservation, I'll need the name and phone number "
                "for the booking."
            )

        response = verdict.reason or "Sorry, that time slot is not available."
        if verdict.suggested_times:
            times = ", ".join(format_time_12h(t) for t in verdict.suggested_times)
            response += f" However, these times are available: {times}."
        return response

    async def book_table(self, params: BookTableInput) -> str:
        if not self.context.settings.ai.allow_reservations:
            return RESERVATIONS_DISABLED

        result = await self.booking.book_reservation(
            ReservationInput(
                restaurant_id=self.context.restaurant.id,
                customer_name=params.customer_name,
                customer_phone=params.customer_phone,
                customer_email=params.customer_email,
                party_size=params.party_size,
                date=params.date,
                time=params.time,
                special_requests=params.special_requests,
                source=ReservationSource.AI,
            )
        )

        if result.success:
            return format_confirmation(
                params.customer_name, params.date, params.time, params.party_size
            )
        return result.error or (
            "Sorry, there was an issue booking your reservation. "
            "Please try again or call us directly."
        )
