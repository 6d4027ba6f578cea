"""Tests for reminder routes."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4


async def _create(client, headers, **fields) -> dict:
    response = await client.post("/api/reminders", json=fields, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_create_reminder(client, auth_headers, user):
    body = await _create(
        client,
        auth_headers,
        title="Pay rent",
        dueDate="2026-04-01T09:00:00Z",
        recurring="monthly",
        category="Bills",
    )

    assert body["userId"] == str(user.id)
    assert body["title"] == "Pay rent"
    assert body["recurring"] == "monthly"
    assert body["completed"] is False
    assert datetime.fromisoformat(body["dueDate"]) == datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc)


async def test_missing_due_date_means_now(client, auth_headers):
    before = datetime.now(timezone.utc)
    body = await _create(client, auth_headers, title="Call back")

    due = datetime.fromisoformat(body["dueDate"])
    assert before - timedelta(seconds=1) <= due <= datetime.now(timezone.utc) + timedelta(seconds=1)


async def test_invalid_reminders_are_400(client, auth_headers):
    for payload in ({"title": ""}, {"title": "x", "recurring": "yearly"}, {"dueDate": "2026-04-01T09:00:00Z"}):
        response = await client.post("/api/reminders", json=payload, headers=auth_headers)
        assert response.status_code == 400, payload


async def test_list_reminders_sorted_and_filtered(client, auth_headers, user):
    late = await _create(client, auth_headers, title="Late", dueDate="2026-05-01T12:00:00Z")
    early = await _create(client, auth_headers, title="Early", dueDate="2026-04-01T12:00:00Z")
    await client.patch(f"/api/reminders/{late['id']}", json={"completed": True}, headers=auth_headers)

    everything = (await client.get(f"/api/reminders/{user.id}", headers=auth_headers)).json()
    pending = (await client.get(f"/api/reminders/{user.id}?completed=false", headers=auth_headers)).json()
    done = (await client.get(f"/api/reminders/{user.id}?completed=true", headers=auth_headers)).json()

    assert [r["title"] for r in everything] == ["Early", "Late"]
    assert [r["id"] for r in pending] == [early["id"]]
    assert [r["id"] for r in done] == [late["id"]]


async def test_update_reminder(client, auth_headers):
    reminder = await _create(client, auth_headers, title="Dentist", dueDate="2026-04-01T12:00:00Z")

    response = await client.patch(
        f"/api/reminders/{reminder['id']}",
        json={"title": None, "dueDate": "2026-04-02T08:30:00+02:00", "description": "bring forms"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Dentist"
    assert body["description"] == "bring forms"
    assert datetime.fromisoformat(body["dueDate"]) == datetime(2026, 4, 2, 6, 30, tzinfo=timezone.utc)


async def test_delete_reminder(client, auth_headers, user):
    reminder = await _create(client, auth_headers, title="Gone soon")

    response = await client.delete(f"/api/reminders/{reminder['id']}", headers=auth_headers)

    assert response.status_code == 204
    assert (await client.get(f"/api/reminders/{user.id}", headers=auth_headers)).json() == []


async def test_reminders_are_private(client, auth_headers, other_auth_headers, other_user):
    reminder = await _create(client, auth_headers, title="Mine")

    assert (await client.get(f"/api/reminders/{other_user.id}", headers=auth_headers)).status_code == 403
    patched = await client.patch(
        f"/api/reminders/{reminder['id']}", json={"completed": True}, headers=other_auth_headers
    )
    assert patched.status_code == 404
    assert (await client.delete(f"/api/reminders/{reminder['id']}", headers=other_auth_headers)).status_code == 404
    assert (await client.delete(f"/api/reminders/{uuid4()}", headers=auth_headers)).status_code == 404
