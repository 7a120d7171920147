"""Persistence layer for hostdesk."""

from hostdesk.storage.base import Store, StoreError
from hostdesk.storage.memory import InMemoryStore
from hostdesk.storage.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "SQLiteStore", "Store", "StoreError"]
