"""hostdesk - reservations, ordering and an AI chat assistant for restaurants."""

__version__ = "0.1.0"
