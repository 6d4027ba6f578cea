"""Pydantic schemas for chat operations."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.actions import ActionOutcome
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, ensure_utc


# Request schemas
class ChatRequest(BaseSchema):
    """Request to send a chat message."""

    message: str = Field(..., min_length=1, max_length=10000)
    user_id: UUID
    conversation_id: UUID | None = None


class ConversationCreateRequest(BaseSchema):
    """Request to create a new conversation."""

    title: str | None = None


class MessageCreateRequest(BaseSchema):
    """Request to store a message in an existing conversation."""

    conversation_id: UUID
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=10000)


# Response schemas
class MessageResponse(BaseSchema, IDMixin):
    """Chat message response."""

    conversation_id: UUID
    role: str
    content: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ConversationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Conversation response."""

    user_id: UUID
    title: str | None


class ChatResponse(BaseSchema):
    """Result of one chat turn."""

    user_message: MessageResponse
    message: MessageResponse
    conversation_id: UUID
    suggestions: list[str] = Field(default_factory=list)
    actions: list[dict[str, Any]] = Field(default_factory=list)
    action_results: list[ActionOutcome] = Field(default_factory=list)
