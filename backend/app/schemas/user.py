"""User schemas."""

from typing import Literal
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, TimestampMixin

NotificationMethod = Literal["browser", "toast", "calendar", "none"]


class SleepSchedule(BaseSchema):
    """Bedtime and wake-up time, as HH:MM strings."""

    bedtime: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    wakeup: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")


class UserPreferences(BaseSchema):
    """
    Typed preference profile used to personalize the assistant.

    Unknown keys are rejected so nothing unvalidated reaches prompt construction.
    """

    model_config = ConfigDict(extra="forbid")

    dietary: list[str] = Field(default_factory=list)
    religious: str | None = None
    sleep_schedule: SleepSchedule | None = None
    communication_style: str | None = None
    interests: list[str] = Field(default_factory=list)
    family_details: str | None = None
    notification_method: NotificationMethod = "browser"
    notification_sound: bool = True
    notification_advance: int = Field(15, ge=0, le=24 * 60)  # minutes before due date


class UserCreate(BaseSchema):
    """Schema for creating a user (internal use - users are created at login)."""

    email: EmailStr | None = None
    name: str = Field(..., min_length=1, max_length=255)


class UserRead(BaseSchema, TimestampMixin):
    """Schema for reading user data."""

    id: UUID
    email: str | None
    name: str
    age: int | None = None
    location: str | None = None
    profession: str | None = None
    timezone: str
    preferences: UserPreferences
    onboarding_completed: bool

    @field_validator("preferences", mode="before")
    @classmethod
    def _stored_preferences(cls, value):
        # Rows written before a preference field existed still validate
        return value or {}


class UserSummary(BaseSchema):
    """Public subset of a user returned by search."""

    id: UUID
    email: str | None
    name: str


class UserUpdate(BaseSchema):
    """Schema for updating a user profile. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    age: int | None = Field(None, ge=0, le=150)
    location: str | None = None
    profession: str | None = None
    timezone: str | None = None
    preferences: UserPreferences | None = None
    onboarding_completed: bool | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value
