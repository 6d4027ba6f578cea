"""Tests for iCalendar export."""

from datetime import datetime, timezone
from uuid import uuid4

from icalendar import Calendar

from app.db.models import Reminder, User
from app.services.calendar_export import export_calendar, export_event, ics_filename


def _reminder(**fields) -> Reminder:
    values = {
        "id": uuid4(),
        "title": "Dentist",
        "description": "Cleaning",
        "due_date": datetime(2026, 3, 11, 19, 0, tzinfo=timezone.utc),
        "category": "Appointment",
    }
    values.update(fields)
    return Reminder(**values)


def _events(body: bytes) -> list:
    return Calendar.from_ical(body).walk("VEVENT")


def test_event_uses_floating_local_time():
    user = User(name="Alex", timezone="America/New_York", location="Austin, TX")
    reminder = _reminder()

    body = export_event(user, reminder)

    # 19:00 UTC is 15:00 in New York; no TZID or Z suffix
    assert b"DTSTART:20260311T150000\r\n" in body
    assert b"DTEND:20260311T160000\r\n" in body
    (event,) = _events(body)
    assert str(event["uid"]) == f"{reminder.id}@gabai"
    assert str(event["summary"]) == "Dentist"
    assert str(event["location"]) == "Austin, TX"


def test_only_appointments_get_a_location():
    user = User(name="Alex", timezone="America/New_York", location="Austin, TX")
    (event,) = _events(export_event(user, _reminder(category="Alarm")))
    assert "location" not in event


def test_recurring_reminder_has_rrule():
    user = User(name="Alex", timezone="UTC")
    (event,) = _events(export_event(user, _reminder(recurring="weekly")))
    assert event["rrule"]["FREQ"] == ["WEEKLY"]


def test_calendar_holds_every_reminder():
    user = User(name="Alex", timezone="Europe/Paris")
    body = export_calendar(user, [_reminder(title="One"), _reminder(title="Two")])

    cal = Calendar.from_ical(body)
    assert str(cal["x-wr-calname"]) == "Alex's GabAi Calendar"
    assert str(cal["x-wr-timezone"]) == "Europe/Paris"
    assert [str(e["summary"]) for e in cal.walk("VEVENT")] == ["One", "Two"]


def test_ics_filename():
    assert ics_filename("Dentist: 3pm!") == "gabai-Dentist--3pm-.ics"


async def test_export_routes(client, auth_headers, other_auth_headers, user, other_user):
    created = await client.post(
        "/api/reminders",
        json={"title": "Dentist", "dueDate": "2026-03-11T19:00:00Z", "category": "Appointment"},
        headers=auth_headers,
    )
    reminder_id = created.json()["id"]

    full = await client.get(f"/api/calendar/export/{user.id}", headers=auth_headers)
    single = await client.get(f"/api/calendar/event/{reminder_id}", headers=auth_headers)

    assert full.status_code == 200
    assert full.headers["content-type"].startswith("text/calendar")
    assert 'filename="gabai-calendar-Alex.ics"' in full.headers["content-disposition"]
    assert b"DTSTART:20260311T150000" in full.content

    assert single.status_code == 200
    assert 'filename="gabai-Dentist.ics"' in single.headers["content-disposition"]
    assert len(_events(single.content)) == 1

    assert (await client.get(f"/api/calendar/export/{other_user.id}", headers=auth_headers)).status_code == 403
    assert (await client.get(f"/api/calendar/event/{reminder_id}", headers=other_auth_headers)).status_code == 404
