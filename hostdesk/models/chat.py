"""Chat conversation models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One turn of the visible conversation."""

    role: Literal["user", "assistant"]
    content: str


class StoredChatMessage(BaseModel):
    """A chat message as persisted for history and usage accounting."""

    id: str
    session_id: str
    restaurant_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=datetime.now)


class ChatSession(BaseModel):
    """A widget conversation with a restaurant's assistant."""

    id: str
    restaurant_id: str
    session_token: str
    status: str = "active"
    source: str = "widget"
    created_at: datetime = Field(default_factory=datetime.now)


class ChatResult(BaseModel):
    """Reply produced for a chat message."""

    response: str
    error: str | None = None


class SessionResult(BaseModel):
    """Outcome of opening a chat session."""

    session_id: str = ""
    greeting: str = ""
    error: str | None = None
