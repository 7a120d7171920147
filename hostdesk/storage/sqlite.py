"""SQLite-backed store.

Each operation opens its own connection and runs in a worker thread, so the
event loop is never blocked by disk I/O.
"""

import asyncio
import json
import logging
import sqlite3
from collections.abc import Callable, Iterable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

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

T = TypeVar("T")

SCHEMA = """
CREATE TABLE IF NOT EXISTS restaurants (
    id TEXT PRIMARY KEY,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS reservations (
    id TEXT PRIMARY KEY,
    restaurant_id TEXT NOT NULL,
    customer_name TEXT NOT NULL,
    customer_phone TEXT NOT NULL,
    customer_email TEXT,
    party_size INTEGER NOT NULL CHECK (party_size BETWEEN 1 AND 50),
    reservation_date TEXT NOT NULL,
    reservation_time TEXT NOT NULL,
    duration_minutes INTEGER,
    status TEXT NOT NULL,
    source TEXT NOT NULL,
    special_requests TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_reservations_slot
    ON reservations (restaurant_id, reservation_date, status);

CREATE TABLE IF NOT EXISTS menu_categories (
    id TEXT PRIMARY KEY,
    restaurant_id TEXT NOT NULL,
    name TEXT NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS menu_items (
    id TEXT PRIMARY KEY,
    restaurant_id TEXT NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id TEXT PRIMARY KEY,
    restaurant_id TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS chat_sessions (
    id TEXT PRIMARY KEY,
    restaurant_id TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS chat_messages (
    id TEXT PRIMARY KEY,
    session_id TEXT NOT NULL,
    restaurant_id TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_chat_messages_usage
    ON chat_messages (restaurant_id, created_at);
"""


class SQLiteStore(Store):
    """Store persisted in a single SQLite database file."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    def init_db(self) -> None:
        """Create tables and indexes if they do not exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Database initialized at {self.db_path}")

    async def _run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        def work() -> T:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            try:
                result = operation(conn)
                conn.commit()
                return result
            finally:
                conn.close()

        try:
            return await asyncio.to_thread(work)
        except sqlite3.Error as e:
            logger.error(f"SQLite error: {e}")
            raise StoreError(str(e)) from e
        except (ValidationError, json.JSONDecodeError) as e:
            logger.error(f"Unreadable row in {self.db_path}: {e}")
            raise StoreError(f"Stored data could not be decoded: {e}") from e

    # Restaurants

    async def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        def fetch(conn: sqlite3.Connection) -> Restaurant | None:
            row = conn.execute(
                "SELECT data FROM restaurants WHERE id = ?", (restaurant_id,)
            ).fetchone()
            return Restaurant.model_validate_json(row["data"]) if row else None

        return await self._run(fetch)

    async def insert_restaurant(self, restaurant: Restaurant) -> str:
        await self._run(
            lambda conn: conn.execute(
                "INSERT INTO restaurants (id, data) VALUES (?, ?)",
                (restaurant.id, restaurant.model_dump_json(by_alias=True)),
            )
        )
        return restaurant.id

    # Reservations

    async def list_reservations(
        self,
        restaurant_id: str,
        reservation_date: date,
        statuses: Iterable[ReservationStatus],
    ) -> list[Reservation]:
        status_values = [ReservationStatus(s).value for s in statuses]
        if not status_values:
            return []
        placeholders = ", ".join("?" for _ in status_values)
        query = f"""
            SELECT * FROM reservations
            WHERE restaurant_id = ? AND reservation_date = ?
            AND status IN ({placeholders})
        """
        def fetch(conn: sqlite3.Connection) -> list[Reservation]:
            rows = conn.execute(
                query, (restaurant_id, reservation_date.isoformat(), *status_values)
            ).fetchall()
            return [Reservation.model_validate(dict(row)) for row in rows]

        return await self._run(fetch)

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        def fetch(conn: sqlite3.Connection) -> Reservation | None:
            row = conn.execute(
                "SELECT * FROM reservations WHERE id = ?", (reservation_id,)
            ).fetchone()
            return Reservation.model_validate(dict(row)) if row else None

        return await self._run(fetch)

    async def insert_reservation(self, reservation: Reservation) -> str:
        data = reservation.model_dump(mode="json")
        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)
        await self._run(
            lambda conn: conn.execute(
                f"INSERT INTO reservations ({columns}) VALUES ({placeholders})",
                tuple(data.values()),
            )
        )
        return reservation.id

    # Menu

    async def list_menu_categories(
        self, restaurant_id: str, active_only: bool = True
    ) -> list[MenuCategory]:
        query = "SELECT * FROM menu_categories WHERE restaurant_id = ?"
        if active_only:
            query += " AND is_active = 1"
        query += " ORDER BY sort_order"
        return await self._run(
            lambda conn: [
                MenuCategory.model_validate(dict(row))
                for row in conn.execute(query, (restaurant_id,)).fetchall()
            ]
        )

    async def list_menu_items(self, restaurant_id: str) -> list[MenuItem]:
        def fetch(conn: sqlite3.Connection) -> list[MenuItem]:
            rows = conn.execute(
                "SELECT data FROM menu_items WHERE restaurant_id = ? ORDER BY sort_order",
                (restaurant_id,),
            ).fetchall()
            return [MenuItem.model_validate_json(row["data"]) for row in rows]

        return await self._run(fetch)

    async def get_menu_items(
        self, restaurant_id: str, item_ids: Iterable[str]
    ) -> list[MenuItem]:
        ids = list(dict.fromkeys(item_ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        def fetch(conn: sqlite3.Connection) -> list[MenuItem]:
            rows = conn.execute(
                f"SELECT data FROM menu_items WHERE restaurant_id = ? AND id IN ({placeholders})",
                (restaurant_id, *ids),
            ).fetchall()
            return [MenuItem.model_validate_json(row["data"]) for row in rows]

        return await self._run(fetch)

    async def insert_menu_category(self, category: MenuCategory) -> str:
        await self._run(
            lambda conn: conn.execute(
                """
                INSERT INTO menu_categories (id, restaurant_id, name, sort_order, is_active)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    category.id,
                    category.restaurant_id,
                    category.name,
                    category.sort_order,
                    int(category.is_active),
                ),
            )
        )
        return category.id

    async def insert_menu_item(self, item: MenuItem) -> str:
        await self._run(
            lambda conn: conn.execute(
                "INSERT INTO menu_items (id, restaurant_id, sort_order, data) VALUES (?, ?, ?, ?)",
                (item.id, item.restaurant_id, item.sort_order, item.model_dump_json()),
            )
        )
        return item.id

    # Orders

    async def get_order(self, order_id: str) -> Order | None:
        def fetch(conn: sqlite3.Connection) -> Order | None:
            row = conn.execute(
                "SELECT data FROM orders WHERE id = ?", (order_id,)
            ).fetchone()
            return Order.model_validate_json(row["data"]) if row else None

        return await self._run(fetch)

    async def insert_order(self, order: Order) -> str:
        await self._run(
            lambda conn: conn.execute(
                "INSERT INTO orders (id, restaurant_id, data) VALUES (?, ?, ?)",
                (order.id, order.restaurant_id, order.model_dump_json()),
            )
        )
        return order.id

    async def update_order(self, order_id: str, **fields: Any) -> bool:
        def update(conn: sqlite3.Connection) -> bool:
            row = conn.execute(
                "SELECT data FROM orders WHERE id = ?", (order_id,)
            ).fetchone()
            if row is None:
                return False
            data = json.loads(row["data"])
            data.update(_jsonable(fields))
            order = Order.model_validate(data)
            conn.execute(
                "UPDATE orders SET data = ? WHERE id = ?",
                (order.model_dump_json(), order_id),
            )
            return True

        return await self._run(update)

    async def delete_order(self, order_id: str) -> None:
        await self._run(
            lambda conn: conn.execute("DELETE FROM orders WHERE id = ?", (order_id,))
        )

    # Chat

    async def insert_chat_session(self, session: ChatSession) -> str:
        await self._run(
            lambda conn: conn.execute(
                "INSERT INTO chat_sessions (id, restaurant_id, data) VALUES (?, ?, ?)",
                (session.id, session.restaurant_id, session.model_dump_json()),
            )
        )
        return session.id

    async def insert_chat_message(self, message: StoredChatMessage) -> str:
        await self._run(
            lambda conn: conn.execute(
                """
                INSERT INTO chat_messages (id, session_id, restaurant_id, role, content, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    message.id,
                    message.session_id,
                    message.restaurant_id,
                    message.role,
                    message.content,
                    message.created_at.isoformat(),
                ),
            )
        )
        return message.id

    async def count_chat_messages(self, restaurant_id: str, since: datetime) -> int:
        row = await self._run(
            lambda conn: conn.execute(
                "SELECT COUNT(*) FROM chat_messages WHERE restaurant_id = ? AND created_at >= ?",
                (restaurant_id, since.isoformat()),
            ).fetchone()
        )
        return row[0]


def _jsonable(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert update values into JSON-compatible primitives."""
    converted = {}
    for key, value in fields.items():
        if isinstance(value, Decimal):
            converted[key] = str(value)
        elif isinstance(value, (datetime, date)):
            converted[key] = value.isoformat()
        elif hasattr(value, "value"):
            converted[key] = value.value
        else:
            converted[key] = value
    return converted
