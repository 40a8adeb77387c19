import pytest


async def _register(client, email="new@example.com", password="securepass123", **extra):
    payload = {"email": email, "password": password, "full_name": "New User"}
    payload.update(extra)
    return await client.post("/api/v1/auth/register", json=payload)


@pytest.mark.asyncio
async def test_register(client):
    res = await _register(client)
    assert res.status_code == 201
    data = res.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    res1 = await _register(client, "dup@example.com")
    assert res1.status_code == 201

    res2 = await _register(client, "dup@example.com")
    assert res2.status_code == 400
    assert res2.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_short_password(client):
    res = await _register(client, password="short")
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_register_unknown_timezone(client):
    res = await _register(client, timezone="Mars/Olympus_Mons")
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_login(client):
    await _register(client, "login@example.com", "mypassword")

    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "login@example.com", "password": "mypassword"},
    )
    assert res.status_code == 200
    assert "access_token" in res.json()


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await _register(client, "wrong@example.com", "rightpassword")

    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "wrong@example.com", "password": "wrongpassword"},
    )
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_refresh(client):
    tokens = (await _register(client, "refresh@example.com")).json()

    res = await client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert res.status_code == 200
    assert "access_token" in res.json()

    # An access token is not a refresh token.
    res = await client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_me(client, auth_headers):
    res = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()
    assert data["email"] == "me@test.com"
    assert data["timezone"] == "UTC"
    assert data["streak_current"] == 0


@pytest.mark.asyncio
async def test_me_unauthorized(client, _setup_db):
    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401

    res = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(client, auth_headers):
    res = await client.put(
        "/api/v1/auth/me",
        json={
            "full_name": "Renamed",
            "timezone": "Europe/Paris",
            "onboarding_completed": True,
            "notification_preferences": {"daily_checkin": False, "gentle_reminders": True},
        },
        headers=auth_headers,
    )
    assert res.status_code == 200
    data = res.json()
    assert data["full_name"] == "Renamed"
    assert data["timezone"] == "Europe/Paris"
    assert data["onboarding_completed"] is True
    assert data["notification_preferences"]["daily_checkin"] is False


@pytest.mark.asyncio
async def test_update_profile_bad_timezone(client, auth_headers):
    res = await client.put("/api/v1/auth/me", json={"timezone": "Nowhere/Special"}, headers=auth_headers)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_change_password(client):
    tokens = (await _register(client, "pw@example.com", "oldpassword")).json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    res = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "badguess", "new_password": "newpassword"},
        headers=headers,
    )
    assert res.status_code == 400

    res = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "oldpassword", "new_password": "newpassword"},
        headers=headers,
    )
    assert res.status_code == 200

    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "pw@example.com", "password": "newpassword"},
    )
    assert res.status_code == 200
