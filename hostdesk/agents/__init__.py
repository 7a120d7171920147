"""Chat assistant for restaurant guests, built on OpenAI function calling."""

from hostdesk.agents.chat_engine import (
    FALLBACK_RESPONSE,
    PROCESSING_ERROR,
    ChatEngine,
    LoopState,
    build_system_prompt,
)
from hostdesk.agents.prompts import load_prompt
from hostdesk.agents.tools import TOOLS, ChatContext, ToolExecutor

__all__ = [
    # Classes
    "ChatContext",
    "ChatEngine",
    "LoopState",
    "ToolExecutor",
    # Tools
    "TOOLS",
    # Utilities
    "FALLBACK_RESPONSE",
    "PROCESSING_ERROR",
    "build_system_prompt",
    "load_prompt",
]
