"""Reminder schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, ensure_utc

Recurrence = Literal["daily", "weekly", "monthly"]


class ReminderCreate(BaseSchema):
    """Schema for creating a reminder. A missing due date means now."""

    title: str = Field(..., min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    completed: bool = False
    recurring: Recurrence | None = None
    category: str | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        # Naive input times are taken as UTC
        return ensure_utc(value)


class ReminderUpdate(BaseSchema):
    """Schema for updating a reminder. All fields optional."""

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    completed: bool | None = None
    recurring: Recurrence | None = None
    category: str | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class ReminderRead(BaseSchema, IDMixin, TimestampMixin):
    """Schema for reading reminder data."""

    user_id: UUID
    title: str
    description: str | None
    due_date: datetime
    completed: bool
    recurring: str | None
    category: str | None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
