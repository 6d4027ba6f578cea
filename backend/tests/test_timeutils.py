"""Tests for due date parsing."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.services.timeutils import resolve_due_date, to_local, user_zoneinfo

EASTERN = ZoneInfo("America/New_York")
NOW = datetime(2026, 3, 10, 14, 0, tzinfo=timezone.utc)


def test_naive_date_is_local_to_user():
    due = resolve_due_date("2026-03-11T15:00:00", EASTERN, NOW)
    # 15:00 EDT is 19:00 UTC
    assert due == datetime(2026, 3, 11, 19, 0, tzinfo=timezone.utc)


def test_offset_date_is_respected():
    due = resolve_due_date("2026-03-11T15:00:00.000Z", EASTERN, NOW)
    assert due == datetime(2026, 3, 11, 15, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "   ",
        "tomorrow at 3",
        "2026-13-45T99:00",
        # Converting to UTC runs past year 9999
        "9999-12-31T23:30:00",
        [2026, 3, 11],
        {},
        True,
        float("inf"),
    ],
)
def test_missing_or_unusable_is_now_plus_24h(value):
    assert resolve_due_date(value, EASTERN, NOW) == NOW + timedelta(hours=24)


@pytest.mark.parametrize("value", [1773241200000, 1773241200000.0])
def test_numeric_date_is_epoch_millis(value):
    assert resolve_due_date(value, EASTERN, NOW) == datetime(2026, 3, 11, 15, 0, tzinfo=timezone.utc)


def test_to_local_treats_naive_as_utc():
    local = to_local(datetime(2026, 1, 5, 20, 30), EASTERN)
    assert (local.hour, local.minute) == (15, 30)


def test_unknown_timezone_falls_back_to_default():
    assert user_zoneinfo("Mars/Olympus_Mons").key == "America/New_York"
    assert user_zoneinfo(None).key == "America/New_York"
    assert user_zoneinfo("Europe/Paris").key == "Europe/Paris"
