"""Tools for the hostdesk chat assistant."""

from .definitions import (
    TOOL_INPUTS,
    TOOLS,
    ChatContext,
    ToolExecutor,
)

__all__ = [
    "TOOLS",
    "TOOL_INPUTS",
    "ChatContext",
    "ToolExecutor",
]
