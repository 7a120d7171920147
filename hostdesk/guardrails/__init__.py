"""Guardrails applied before the chat assistant runs."""

from hostdesk.guardrails.input_validator import InputValidator
from hostdesk.guardrails.usage_limiter import (
    CHAT_MESSAGE_LIMITS,
    USAGE_LIMIT_MESSAGE,
    UsageCheck,
    UsageLimiter,
)

__all__ = [
    "CHAT_MESSAGE_LIMITS",
    "InputValidator",
    "USAGE_LIMIT_MESSAGE",
    "UsageCheck",
    "UsageLimiter",
]
