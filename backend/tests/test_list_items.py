"""Tests for list item routes."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest


@pytest.fixture
async def todo_list(client, auth_headers) -> dict:
    response = await client.post("/api/smart-lists", json={"name": "Chores", "type": "todo"}, headers=auth_headers)
    return response.json()


async def test_create_item_infers_category(client, auth_headers, todo_list, mock_llm):
    response = await client.post(
        "/api/list-items",
        json={"listId": todo_list["id"], "name": "email the client"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "Work"
    assert body["addedBy"] == "Alex"
    assert body["priority"] == 1
    assert body["completed"] is False
    assert body["position"] == 0
    mock_llm.assert_not_called()


async def test_items_append_unless_position_given(client, auth_headers, todo_list):
    payload = {"listId": todo_list["id"], "category": "Home"}
    first = await client.post("/api/list-items", json={**payload, "name": "a"}, headers=auth_headers)
    second = await client.post("/api/list-items", json={**payload, "name": "b"}, headers=auth_headers)
    pinned = await client.post("/api/list-items", json={**payload, "name": "c", "position": 0}, headers=auth_headers)

    assert [r.json()["position"] for r in (first, second, pinned)] == [0, 1, 0]


async def test_due_date_is_normalized_to_utc(client, auth_headers, todo_list):
    response = await client.post(
        "/api/list-items",
        json={
            "listId": todo_list["id"],
            "name": "renew passport",
            "category": "Personal",
            "dueDate": "2026-04-01T09:00:00-04:00",
        },
        headers=auth_headers,
    )

    due = datetime.fromisoformat(response.json()["dueDate"])
    assert due == datetime(2026, 4, 1, 13, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "fields",
    [
        {"name": ""},
        {"name": "x", "priority": 6},
        {"name": "x", "currency": "DOLLARS"},
        {"name": "x", "quantity": -1},
    ],
)
async def test_invalid_item_is_400(client, auth_headers, todo_list, fields):
    response = await client.post(
        "/api/list-items", json={"listId": todo_list["id"], **fields}, headers=auth_headers
    )
    assert response.status_code == 400


async def test_create_item_on_unknown_list_is_404(client, auth_headers):
    response = await client.post(
        "/api/list-items", json={"listId": str(uuid4()), "name": "x", "category": "Home"}, headers=auth_headers
    )
    assert response.status_code == 404


async def test_update_item(client, auth_headers, todo_list):
    created = await client.post(
        "/api/list-items",
        json={"listId": todo_list["id"], "name": "paint fence", "category": "Home"},
        headers=auth_headers,
    )
    item_id = created.json()["id"]

    response = await client.patch(
        f"/api/list-items/{item_id}",
        json={"priority": 4, "notes": "white", "quantity": "2.5", "unit": "gal", "name": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "paint fence"
    assert body["priority"] == 4
    assert body["notes"] == "white"
    assert float(body["quantity"]) == 2.5
    assert body["unit"] == "gal"


async def test_toggle_and_delete_item(client, auth_headers, todo_list):
    created = await client.post(
        "/api/list-items",
        json={"listId": todo_list["id"], "name": "mow lawn", "category": "Home"},
        headers=auth_headers,
    )
    item_id = created.json()["id"]

    on = await client.patch(f"/api/list-items/{item_id}/toggle", headers=auth_headers)
    off = await client.patch(f"/api/list-items/{item_id}/toggle", headers=auth_headers)
    assert (on.json()["completed"], off.json()["completed"]) == (True, False)

    deleted = await client.delete(f"/api/list-items/{item_id}", headers=auth_headers)
    assert deleted.status_code == 204
    assert (await client.delete(f"/api/list-items/{item_id}", headers=auth_headers)).status_code == 404


async def test_items_of_other_users_lists_are_404(client, auth_headers, other_auth_headers, todo_list):
    created = await client.post(
        "/api/list-items",
        json={"listId": todo_list["id"], "name": "mow lawn", "category": "Home"},
        headers=auth_headers,
    )
    item_id = created.json()["id"]

    assert (await client.patch(f"/api/list-items/{item_id}", json={"notes": "x"}, headers=other_auth_headers)).status_code == 404
    assert (await client.patch(f"/api/list-items/{item_id}/toggle", headers=other_auth_headers)).status_code == 404
    assert (await client.delete(f"/api/list-items/{item_id}", headers=other_auth_headers)).status_code == 404
    response = await client.post(
        "/api/list-items",
        json={"listId": todo_list["id"], "name": "sneaky", "category": "Home"},
        headers=other_auth_headers,
    )
    assert response.status_code == 404


async def test_categorize_endpoint(client, auth_headers, mock_llm):
    mock_llm.return_value = "Produce"

    shopping = await client.post(
        "/api/categorize-item", json={"itemName": "bananas", "listType": "shopping"}, headers=auth_headers
    )
    punch = await client.post(
        "/api/categorize-item", json={"itemName": "leaky pipe", "listType": "punch_list"}, headers=auth_headers
    )

    assert shopping.json() == {"category": "Produce"}
    assert punch.json() == {"category": "Plumbing"}
    mock_llm.assert_awaited_once()
