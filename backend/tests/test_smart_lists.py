"""Tests for smart lists, sharing and collaborators."""

from uuid import uuid4

import pytest

from app.services.list_types import LIST_TEMPLATES


@pytest.fixture
async def grocery_list(client, auth_headers) -> dict:
    response = await client.post(
        "/api/smart-lists", json={"name": "Groceries", "type": "shopping"}, headers=auth_headers
    )
    assert response.status_code == 201
    return response.json()


async def _add_item(client, headers, list_id, name, **fields) -> dict:
    response = await client.post(
        "/api/list-items", json={"listId": list_id, "name": name, **fields}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


# =============================================================================
# CRUD
# =============================================================================


async def test_create_list_uses_template_categories(client, auth_headers, user):
    response = await client.post(
        "/api/smart-lists", json={"name": "Reno", "type": "punch_list"}, headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == str(user.id)
    assert body["categories"] == list(LIST_TEMPLATES["punch_list"].categories)
    assert body["isShared"] is False
    assert body["shareCode"] is None
    assert body["collaborators"] == []


async def test_create_list_keeps_custom_categories(client, auth_headers):
    response = await client.post(
        "/api/smart-lists",
        json={"name": "Party", "type": "todo", "categories": ["Food", "Music"]},
        headers=auth_headers,
    )
    assert response.json()["categories"] == ["Food", "Music"]


async def test_list_lists_with_items(client, auth_headers, user, grocery_list):
    await _add_item(client, auth_headers, grocery_list["id"], "milk", category="Dairy")

    response = await client.get(f"/api/smart-lists/{user.id}", headers=auth_headers)

    assert response.status_code == 200
    lists = response.json()
    assert [sl["name"] for sl in lists] == ["Groceries"]
    assert [i["name"] for i in lists[0]["items"]] == ["milk"]


async def test_cannot_list_another_users_lists(client, auth_headers, other_user):
    response = await client.get(f"/api/smart-lists/{other_user.id}", headers=auth_headers)
    assert response.status_code == 403


async def test_update_list(client, auth_headers, grocery_list):
    response = await client.patch(
        f"/api/smart-lists/{grocery_list['id']}",
        json={"name": "Weekly shop", "sortBy": "priority", "description": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Weekly shop"
    assert response.json()["sortBy"] == "priority"


async def test_update_rejects_unknown_sort(client, auth_headers, grocery_list):
    response = await client.patch(
        f"/api/smart-lists/{grocery_list['id']}", json={"sortBy": "alphabet"}, headers=auth_headers
    )
    assert response.status_code == 400


async def test_delete_list_removes_items(client, auth_headers, user, grocery_list):
    item = await _add_item(client, auth_headers, grocery_list["id"], "milk", category="Dairy")

    response = await client.delete(f"/api/smart-lists/{grocery_list['id']}", headers=auth_headers)

    assert response.status_code == 204
    assert (await client.get(f"/api/smart-lists/{user.id}", headers=auth_headers)).json() == []
    toggle = await client.patch(f"/api/list-items/{item['id']}/toggle", headers=auth_headers)
    assert toggle.status_code == 404


async def test_other_users_list_is_404(client, other_auth_headers, grocery_list):
    response = await client.patch(
        f"/api/smart-lists/{grocery_list['id']}", json={"name": "Mine now"}, headers=other_auth_headers
    )
    assert response.status_code == 404

    response = await client.delete(f"/api/smart-lists/{grocery_list['id']}", headers=other_auth_headers)
    assert response.status_code == 404


async def test_unknown_list_is_404(client, auth_headers):
    response = await client.patch(f"/api/smart-lists/{uuid4()}", json={"name": "x"}, headers=auth_headers)
    assert response.status_code == 404


# =============================================================================
# SHARING
# =============================================================================


async def test_share_is_idempotent(client, auth_headers, grocery_list):
    first = await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)
    second = await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)

    assert first.status_code == 200
    code = first.json()["shareCode"]
    assert len(code) == 12
    assert second.json()["shareCode"] == code


async def test_shared_link_read_add_and_toggle(client, auth_headers, grocery_list, mock_llm):
    code = (await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)).json()[
        "shareCode"
    ]
    await _add_item(client, auth_headers, grocery_list["id"], "milk", category="Dairy")

    # No credentials on the share-link routes
    shared = await client.get(f"/api/shared/{code}")
    assert shared.status_code == 200
    assert shared.json()["isShared"] is True
    assert [i["name"] for i in shared.json()["items"]] == ["milk"]

    mock_llm.return_value = "Bakery"
    added = await client.post(f"/api/shared/{code}/items", json={"name": "bagels"})
    assert added.status_code == 201
    assert added.json()["category"] == "Bakery"
    assert added.json()["addedBy"] == "share link"
    assert added.json()["position"] == 1

    toggled = await client.patch(f"/api/shared/{code}/items/{added.json()['id']}/toggle")
    assert toggled.status_code == 200
    assert toggled.json()["completed"] is True


async def test_shared_toggle_rejects_items_of_other_lists(client, auth_headers, grocery_list):
    other = await client.post("/api/smart-lists", json={"name": "Todo", "type": "todo"}, headers=auth_headers)
    foreign = await _add_item(client, auth_headers, other.json()["id"], "taxes", category="Finance")
    code = (await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)).json()[
        "shareCode"
    ]

    response = await client.patch(f"/api/shared/{code}/items/{foreign['id']}/toggle")
    assert response.status_code == 404


async def test_revoking_share_invalidates_code(client, auth_headers, grocery_list):
    code = (await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)).json()[
        "shareCode"
    ]

    response = await client.patch(
        f"/api/smart-lists/{grocery_list['id']}", json={"isShared": False}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["isShared"] is False
    assert response.json()["shareCode"] is None
    assert (await client.get(f"/api/shared/{code}")).status_code == 404

    # Sharing again issues a new code
    again = await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)
    assert again.json()["shareCode"] != code


async def test_unknown_share_code_is_404(client):
    assert (await client.get("/api/shared/nope")).status_code == 404
    assert (await client.post("/api/shared/nope/items", json={"name": "x"})).status_code == 404


async def test_only_owner_can_share(client, auth_headers, other_auth_headers, other_user, grocery_list):
    await client.post(
        f"/api/smart-lists/{grocery_list['id']}/collaborators",
        json={"email": "sam@example.com"},
        headers=auth_headers,
    )

    response = await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=other_auth_headers)
    assert response.status_code == 404


# =============================================================================
# COLLABORATORS
# =============================================================================


async def test_join_by_share_code(client, auth_headers, other_auth_headers, other_user, grocery_list):
    code = (await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)).json()[
        "shareCode"
    ]

    joined = await client.post("/api/smart-lists/join", json={"shareCode": code}, headers=other_auth_headers)
    again = await client.post("/api/smart-lists/join", json={"shareCode": code}, headers=other_auth_headers)

    assert joined.status_code == 200
    assert again.json()["collaborators"] == [str(other_user.id)]

    visible = (await client.get(f"/api/smart-lists/{other_user.id}", headers=other_auth_headers)).json()
    assert [sl["id"] for sl in visible] == [grocery_list["id"]]


async def test_owner_joining_own_list_is_noop(client, auth_headers, grocery_list):
    code = (await client.post(f"/api/smart-lists/{grocery_list['id']}/share", headers=auth_headers)).json()[
        "shareCode"
    ]

    response = await client.post("/api/smart-lists/join", json={"shareCode": code}, headers=auth_headers)
    assert response.json()["collaborators"] == []


async def test_join_with_bad_code_is_404(client, auth_headers):
    response = await client.post("/api/smart-lists/join", json={"shareCode": "missing"}, headers=auth_headers)
    assert response.status_code == 404


async def test_add_collaborator_by_email(client, auth_headers, other_auth_headers, other_user, grocery_list):
    response = await client.post(
        f"/api/smart-lists/{grocery_list['id']}/collaborators",
        json={"email": "Sam@Example.com"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["collaborators"] == [str(other_user.id)]

    # Collaborators can edit the list and its items
    renamed = await client.patch(
        f"/api/smart-lists/{grocery_list['id']}", json={"name": "Shared groceries"}, headers=other_auth_headers
    )
    assert renamed.status_code == 200
    item = await _add_item(client, other_auth_headers, grocery_list["id"], "eggs", category="Dairy")
    assert item["addedBy"] == "Sam"

    # ...but cannot delete it
    deleted = await client.delete(f"/api/smart-lists/{grocery_list['id']}", headers=other_auth_headers)
    assert deleted.status_code == 404


async def test_add_collaborator_errors(client, auth_headers, grocery_list):
    unknown = await client.post(
        f"/api/smart-lists/{grocery_list['id']}/collaborators",
        json={"email": "nobody@example.com"},
        headers=auth_headers,
    )
    assert unknown.status_code == 404

    myself = await client.post(
        f"/api/smart-lists/{grocery_list['id']}/collaborators",
        json={"email": "alex@example.com"},
        headers=auth_headers,
    )
    assert myself.status_code == 400

    invalid = await client.post(
        f"/api/smart-lists/{grocery_list['id']}/collaborators",
        json={"email": "not-an-email"},
        headers=auth_headers,
    )
    assert invalid.status_code == 400
