"""In-process store for tests, demos and local development."""

import logging
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
from hostdesk.storage.base import Store, StoreError

logger = logging.getLogger(__name__)


class InMemoryStore(Store):
    """Store backed by plain dictionaries.

    Models are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        self.restaurants: dict[str, Restaurant] = {}
        self.reservations: dict[str, Reservation] = {}
        self.categories: dict[str, MenuCategory] = {}
        self.menu_items: dict[str, MenuItem] = {}
        self.orders: dict[str, Order] = {}
        self.chat_sessions: dict[str, ChatSession] = {}
        self.chat_messages: dict[str, StoredChatMessage] = {}

    async def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        return self.restaurants.get(restaurant_id)

    async def insert_restaurant(self, restaurant: Restaurant) -> str:
        self._ensure_new(self.restaurants, restaurant.id)
        self.restaurants[restaurant.id] = restaurant
        return restaurant.id

    async def list_reservations(
        self,
        restaurant_id: str,
        reservation_date: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        wanted = set(statuses)
        return [
            res.model_copy()
            for res in self.reservations.values()
            if res.restaurant_id == restaurant_id
            and res.reservation_date == reservation_date
            and res.status in wanted
        ]

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        reservation = self.reservations.get(reservation_id)
        return reservation.model_copy() if reservation else None

    async def insert_reservation(self, reservation: Reservation) -> str:
        self._ensure_new(self.reservations, reservation.id)
        self.reservations[reservation.id] = reservation.model_copy()
        logger.debug(f"Stored reservation {reservation.id}")
        return reservation.id

    async def list_menu_categories(
        self, restaurant_id: str, active_only: bool = True
    ) -> list[MenuCategory]:
        categories = [
            cat
            for cat in self.categories.values()
            if cat.restaurant_id == restaurant_id and (cat.is_active or not active_only)
        ]
        return sorted(categories, key=lambda cat: cat.sort_order)

    async def list_menu_items(self, restaurant_id: str) -> list[MenuItem]:
        items = [
            item for item in self.menu_items.values() if item.restaurant_id == restaurant_id
        ]
        return sorted(items, key=lambda item: item.sort_order)

    async def get_menu_items(
        self, restaurant_id: str, item_ids: Iterable[str]
    ) -> list[MenuItem]:
        wanted = set(item_ids)
        return [
            item
            for item in self.menu_items.values()
            if item.restaurant_id == restaurant_id and item.id in wanted
        ]

    async def insert_menu_category(self, category: MenuCategory) -> str:
        self._ensure_new(self.categories, category.id)
        self.categories[category.id] = category
        return category.id

    async def insert_menu_item(self, item: MenuItem) -> str:
        self._ensure_new(self.menu_items, item.id)
        self.menu_items[item.id] = item
        return item.id

    async def get_order(self, order_id: str) -> Order | None:
        order = self.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    async def insert_order(self, order: Order) -> str:
        self._ensure_new(self.orders, order.id)
        self.orders[order.id] = order.model_copy(deep=True)
        return order.id

    async def update_order(self, order_id: str, **fields: Any) -> bool:
        order = self.orders.get(order_id)
        if order is None:
            return False
        self.orders[order_id] = order.model_copy(update=fields)
        return True

    async def delete_order(self, order_id: str) -> None:
        self.orders.pop(order_id, None)

    async def insert_chat_session(self, session: ChatSession) -> str:
        self._ensure_new(self.chat_sessions, session.id)
        self.chat_sessions[session.id] = session
        return session.id

    async def insert_chat_message(self, message: StoredChatMessage) -> str:
        self._ensure_new(self.chat_messages, message.id)
        self.chat_messages[message.id] = message
        return message.id

    async def count_chat_messages(self, restaurant_id: str, since: datetime) -> int:
        return sum(
            1
            for msg in self.chat_messages.values()
            if msg.restaurant_id == restaurant_id and msg.created_at >= since
        )

    @staticmethod
    def _ensure_new(table: dict, key: str) -> None:
        if key in table:
            msg = f"Duplicate key: {key}"
            raise StoreError(msg)
