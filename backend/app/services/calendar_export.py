"""Render reminders as iCalendar (.ics) documents."""

import re
from datetime import timedelta

from icalendar import Calendar as iCalendar
from icalendar import Event as iEvent

from app.db.models import Reminder, ReminderCategory, User
from app.schemas.base import ensure_utc
from app.services.timeutils import to_local, user_zoneinfo

EVENT_DURATION = timedelta(hours=1)
PRODID = "-//GabAi//Voice Assistant//EN"

_RRULE_FREQ = {"daily": "DAILY", "weekly": "WEEKLY", "monthly": "MONTHLY"}


def _new_calendar(name: str, description: str, tz_name: str) -> iCalendar:
    cal = iCalendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("x-wr-calname", name)
    cal.add("x-wr-caldesc", description)
    cal.add("x-wr-timezone", tz_name)
    return cal


def _build_vevent(reminder: Reminder, user: User) -> iEvent:
    """
    One-hour VEVENT for a reminder.

    Start and end are floating local times in the user's timezone, so
    calendar clients show the wall-clock time the user asked for without
    converting it again on import.
    """
    tz = user_zoneinfo(user.timezone)
    start = to_local(reminder.due_date, tz).replace(tzinfo=None)
    category = reminder.category or "reminder"

    event = iEvent()
    event.add("uid", f"{reminder.id}@gabai")
    event.add("summary", reminder.title)
    event.add("description", reminder.description or "")
    event.add("dtstart", start)
    event.add("dtend", start + EVENT_DURATION)
    event.add("categories", [category])
    if category.lower() == ReminderCategory.APPOINTMENT.value.lower() and user.location:
        event.add("location", user.location)
    if reminder.recurring in _RRULE_FREQ:
        event.add("rrule", {"freq": _RRULE_FREQ[reminder.recurring]})
    if reminder.created_at is not None:
        event.add("created", ensure_utc(reminder.created_at))
    if reminder.updated_at is not None:
        event.add("last-modified", ensure_utc(reminder.updated_at))
    return event


def export_calendar(user: User, reminders: list[Reminder]) -> bytes:
    """All of a user's reminders as one calendar."""
    cal = _new_calendar(
        f"{user.name or user.email}'s GabAi Calendar",
        "Appointments and reminders from GabAi",
        user_zoneinfo(user.timezone).key,
    )
    for reminder in reminders:
        cal.add_component(_build_vevent(reminder, user))
    return cal.to_ical()


def export_event(user: User, reminder: Reminder) -> bytes:
    """A single reminder as a one-event calendar."""
    cal = _new_calendar(
        f"GabAi Event: {reminder.title}",
        "Single event from GabAi",
        user_zoneinfo(user.timezone).key,
    )
    cal.add_component(_build_vevent(reminder, user))
    return cal.to_ical()


def ics_filename(label: str) -> str:
    """Safe download filename for an .ics attachment."""
    return f"gabai-{re.sub(r'[^a-zA-Z0-9]', '-', label) or 'calendar'}.ics"
