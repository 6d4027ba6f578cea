"""Base schema configuration."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    The API speaks camelCase JSON; Python code uses snake_case field names.
    Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize to aware UTC. Naive datetimes (as returned by SQLite) are taken as UTC."""
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimestampMixin(BaseModel):
    """Mixin for created_at/updated_at timestamps."""

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class IDMixin(BaseModel):
    """Mixin for UUID primary key."""

    id: UUID
