from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NO_RESPONSE_TEXT = "No response received"


class ChatMessage(BaseModel):
    # Extra per-message fields such as "name" are forwarded upstream untouched.
    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
    model: str | None = None


class ChatResponse(BaseModel):
    message: str = NO_RESPONSE_TEXT
    usage: Any = None
    model: str | None = None
    provider: str | None = None


class ChatResult(BaseModel):
    """Uniform outcome returned by the client wrapper; never an exception."""

    success: bool
    message: str | None = None
    usage: Any = None
    error: str | None = None


class UserProfile(BaseModel):
    name: str | None = None
    title: str | None = None
    location: str | None = None
    interests: list[str] | None = None
    bio: str | None = None


class ChatHistoryCreate(BaseModel):
    user_id: str = Field(min_length=1)
    message: str
    sender: Literal["user", "assistant"]


class ChatHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    message: str
    sender: str
    timestamp: datetime
