"""Validation of guest chat messages before they reach the model."""

import logging
import re

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 1000

# Patterns that indicate potential abuse or inappropriate content
BLOCKED_PATTERNS = [
    r"<script",
    r"javascript:",
    r"onclick",
    r"onerror",
    r"eval\(",
    r"exec\(",
]


class InputValidator:
    """Checks guest input for emptiness, length and script injection."""

    @staticmethod
    def validate_user_input(text: str | None) -> tuple[bool, str | None]:
        """Validate a guest chat message.

        Args:
            text: Message as typed by the guest

        Returns:
            (is_valid, error message shown to the guest)
        """
        if not text or not text.strip():
            logger.warning("Guardrail triggered: Empty input detected")
            return False, "Message cannot be empty."

        if len(text) > MAX_INPUT_LENGTH:
            logger.warning(
                f"Guardrail triggered: Input too long ({len(text)} > {MAX_INPUT_LENGTH} chars)"
            )
            return (
                False,
                f"Message too long (max {MAX_INPUT_LENGTH} characters). Please shorten it.",
            )

        lowered = text.lower()
        for pattern in BLOCKED_PATTERNS:
            if re.search(pattern, lowered):
                logger.warning(f"Guardrail triggered: Suspicious pattern detected ({pattern})")
                return False, "Message contains suspicious content. Please rephrase it."

        return True, None
