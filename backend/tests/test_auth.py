"""Tests for authentication, user profile routes and health check."""

from uuid import uuid4

from app.api.deps import create_access_token, decode_access_token


def test_access_token_round_trip():
    user_id = uuid4()
    assert decode_access_token(create_access_token(user_id)) == user_id


def test_garbage_token_is_rejected():
    assert decode_access_token("not-a-jwt") is None


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_protected_route_requires_token(client):
    assert (await client.get("/api/auth/me")).status_code == 401
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


async def test_token_for_deleted_user_is_rejected(client):
    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {create_access_token(uuid4())}"}
    )
    assert response.status_code == 401


async def test_me(client, user, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(user.id)
    assert body["email"] == "alex@example.com"
    assert body["timezone"] == "America/New_York"
    assert body["preferences"]["notificationMethod"] == "browser"


async def test_simple_login_creates_then_reuses_user(client):
    first = await client.post("/api/auth/simple-login", json={"name": "Kim", "email": "Kim@Example.com"})
    assert first.status_code == 200
    body = first.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["email"] == "kim@example.com"
    assert "access_token" in first.cookies

    # The session cookie alone authenticates
    me = await client.get("/api/auth/me")
    assert me.json()["id"] == body["user"]["id"]

    again = await client.post("/api/auth/simple-login", json={"name": "Kim", "email": "kim@example.com"})
    assert again.json()["user"]["id"] == body["user"]["id"]


async def test_simple_login_validates_input(client):
    response = await client.post("/api/auth/simple-login", json={"name": "Kim", "email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("email:")


async def test_logout_clears_cookie(client):
    await client.post("/api/auth/simple-login", json={"name": "Kim", "email": "kim@example.com"})

    response = await client.post("/api/auth/logout")

    assert response.status_code == 204
    assert "access_token" not in client.cookies
    assert (await client.get("/api/auth/me")).status_code == 401


# =============================================================================
# USERS
# =============================================================================


async def test_update_profile_and_preferences(client, user, auth_headers):
    response = await client.patch(
        f"/api/users/{user.id}",
        json={
            "profession": "Realtor",
            "timezone": "America/Chicago",
            "name": None,
            "preferences": {"dietary": ["kosher"], "sleepSchedule": {"bedtime": "22:30", "wakeup": "06:00"}},
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Alex"
    assert body["profession"] == "Realtor"
    assert body["timezone"] == "America/Chicago"
    assert body["preferences"]["dietary"] == ["kosher"]
    assert body["preferences"]["sleepSchedule"]["bedtime"] == "22:30"

    fetched = await client.get(f"/api/users/{user.id}", headers=auth_headers)
    assert fetched.json()["preferences"]["dietary"] == ["kosher"]


async def test_update_rejects_bad_values(client, user, auth_headers):
    for payload in (
        {"timezone": "Mars/Base"},
        {"age": 200},
        {"preferences": {"favouriteColor": "blue"}},
    ):
        response = await client.patch(f"/api/users/{user.id}", json=payload, headers=auth_headers)
        assert response.status_code == 400, payload


async def test_other_profiles_are_forbidden(client, other_user, auth_headers):
    assert (await client.get(f"/api/users/{other_user.id}", headers=auth_headers)).status_code == 403
    response = await client.patch(f"/api/users/{other_user.id}", json={"name": "Hacked"}, headers=auth_headers)
    assert response.status_code == 403


async def test_search_user_by_email(client, other_user, auth_headers):
    found = await client.get("/api/users/search", params={"email": "sam@example.com"}, headers=auth_headers)
    missing = await client.get("/api/users/search", params={"email": "nobody@example.com"}, headers=auth_headers)

    assert found.status_code == 200
    assert found.json() == {"id": str(other_user.id), "email": "sam@example.com", "name": "Sam"}
    assert missing.status_code == 404
