"""Persistence interface used by the reservation, order and chat services."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from hostdesk.models import (
    ChatSession,
    MenuCategory,
    MenuItem,
    Order,
    Reservation,
    ReservationStatus,
    Restaurant,
    StoredChatMessage,
)


class StoreError(Exception):
    """Raised when the backing store cannot complete an operation."""


class Store(ABC):
    """Row store holding restaurants, menus, reservations, orders and chats.

    Implementations only need point lookups by id, filtered list queries and
    single-row writes. Every failure of the backing store is raised as
    StoreError.
    """

    # Restaurants

    @abstractmethod
    async def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        """Look up a restaurant by id."""

    @abstractmethod
    async def insert_restaurant(self, restaurant: Restaurant) -> str:
        """Insert a restaurant and return its id."""

    # Reservations

    @abstractmethod
    async def list_reservations(
        self,
        restaurant_id: str,
        reservation_date: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        """List a restaurant's reservations for a day with one of the statuses."""

    @abstractmethod
    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        """Look up a reservation by id."""

    @abstractmethod
    async def insert_reservation(self, reservation: Reservation) -> str:
        """Insert a reservation and return its id."""

    # Menu

    @abstractmethod
    async def list_menu_categories(
        self, restaurant_id: str, active_only: bool = True
    ) -> list[MenuCategory]:
        """List menu categories ordered by sort_order."""

    @abstractmethod
    async def list_menu_items(self, restaurant_id: str) -> list[MenuItem]:
        """List all menu items of a restaurant ordered by sort_order."""

    @abstractmethod
    async def get_menu_items(
        self, restaurant_id: str, item_ids: Iterable[str]
    ) -> list[MenuItem]:
        """Fetch the restaurant's menu items with the given ids."""

    @abstractmethod
    async def insert_menu_category(self, category: MenuCategory) -> str:
        """Insert a menu category and return its id."""

    @abstractmethod
    async def insert_menu_item(self, item: MenuItem) -> str:
        """Insert a menu item and return its id."""

    # Orders

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Look up an order by id."""

    @abstractmethod
    async def insert_order(self, order: Order) -> str:
        """Insert an order and return its id."""

    @abstractmethod
    async def update_order(self, order_id: str, **fields: Any) -> bool:
        """Update fields of an order. Returns False if it does not exist."""

    @abstractmethod
    async def delete_order(self, order_id: str) -> None:
        """Delete an order if it exists."""

    # Chat

    @abstractmethod
    async def insert_chat_session(self, session: ChatSession) -> str:
        """Insert a chat session and return its id."""

    @abstractmethod
    async def insert_chat_message(self, message: StoredChatMessage) -> str:
        """Insert a chat message and return its id."""

    @abstractmethod
    async def count_chat_messages(self, restaurant_id: str, since: datetime) -> int:
        """Count a restaurant's chat messages created at or after `since`."""
