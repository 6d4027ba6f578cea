"""Timezone helpers for user-facing dates."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Due date used when the assistant gives none or an unparseable one
DEFAULT_DUE_DELAY = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def user_zoneinfo(tz_name: str | None) -> ZoneInfo:
    """ZoneInfo for a user's timezone, falling back to the configured default."""
    try:
        return ZoneInfo(tz_name or settings.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using %s", tz_name, settings.default_timezone)
        return ZoneInfo(settings.default_timezone)


def resolve_due_date(value: Any, tz: ZoneInfo, now: datetime | None = None) -> datetime:
    """
    Turn the date of an assistant action into an aware UTC datetime.

    Strings are ISO-8601; naive ones are local times in `tz`. Numbers are
    epoch milliseconds. Anything missing, unparseable or out of range means
    "same time tomorrow" (now + 24h); this never raises.
    """
    now = now or utcnow()
    fallback = (now + DEFAULT_DUE_DELAY).astimezone(timezone.utc)
    if value is None or isinstance(value, bool):
        return fallback
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if not isinstance(value, str) or not value.strip():
            return fallback
        parsed = datetime.fromisoformat(value.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=tz)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.info("Unusable action date %r, defaulting to now + 24h", value)
        return fallback


def to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Convert a stored datetime (naive values are UTC) to the user's wall clock."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)
