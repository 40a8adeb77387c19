from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest


async def _create_habit(client, headers, **fields):
    payload = {"title": "Morning walk"}
    payload.update(fields)
    res = await client.post("/api/v1/habits", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_create_habit(client, auth_headers):
    habit = await _create_habit(client, auth_headers, scaled_version="10 minutes")
    assert habit["full_version"] == "Morning walk"
    assert habit["scaled_version"] == "10 minutes"
    assert habit["target_frequency"] == "daily"
    assert habit["stats"]["total_completions"] == 0

    second = await _create_habit(client, auth_headers, title="Stretch")
    assert second["display_order"] == 1


@pytest.mark.asyncio
async def test_create_habit_blank_title(client, auth_headers):
    res = await client.post("/api/v1/habits", json={"title": "   "}, headers=auth_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_update_habit_title(client, auth_headers):
    habit = await _create_habit(client, auth_headers)
    url = f"/api/v1/habits/{habit['id']}"

    res = await client.put(url, json={"title": "   "}, headers=auth_headers)
    assert res.status_code == 400

    res = await client.put(url, json={"title": None}, headers=auth_headers)
    assert res.status_code == 422

    res = await client.put(url, json={"target_frequency": None}, headers=auth_headers)
    assert res.status_code == 422

    res = await client.put(url, json={"title": "  Evening walk "}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["title"] == "Evening walk"


@pytest.mark.asyncio
async def test_complete_habit_once_per_day(client, auth_headers):
    habit = await _create_habit(client, auth_headers)

    res = await client.post(
        f"/api/v1/habits/{habit['id']}/complete",
        json={"version_completed": "minimal"},
        headers=auth_headers,
    )
    assert res.status_code == 201
    data = res.json()
    assert data["version_completed"] == "minimal"
    assert data["stats"]["completed_today"] is True
    assert data["stats"]["current_streak"] == 1

    res = await client.post(f"/api/v1/habits/{habit['id']}/complete", json={}, headers=auth_headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_habit_stats_streak(client, user_data, db_session):
    from current_state.models.habit import HabitCompletion

    headers, user = user_data
    habit = await _create_habit(client, headers)
    now = datetime.now(timezone.utc)
    for days_back in (1, 2, 3, 6):
        db_session.add(
            HabitCompletion(
                habit_id=UUID(habit["id"]),
                user_id=user.id,
                completed_at=now - timedelta(days=days_back),
            )
        )
    await db_session.commit()

    res = await client.get(f"/api/v1/habits/{habit['id']}/stats", headers=headers)
    stats = res.json()
    assert stats["total_completions"] == 4
    assert stats["current_streak"] == 3
    assert stats["best_streak"] == 3
    assert stats["completed_today"] is False

    res = await client.get("/api/v1/habits", headers=headers)
    assert res.json()[0]["stats"]["current_streak"] == 3


@pytest.mark.asyncio
async def test_update_and_delete_habit(client, auth_headers):
    habit = await _create_habit(client, auth_headers)

    res = await client.put(
        f"/api/v1/habits/{habit['id']}",
        json={"best_time_of_day": "morning", "minimal_version": "Put shoes on"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["best_time_of_day"] == "morning"

    res = await client.delete(f"/api/v1/habits/{habit['id']}", headers=auth_headers)
    assert res.status_code == 204

    res = await client.get("/api/v1/habits", headers=auth_headers)
    assert res.json() == []

    res = await client.post(f"/api/v1/habits/{habit['id']}/complete", json={}, headers=auth_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_habit_isolation(client, auth_headers, other_headers):
    habit = await _create_habit(client, auth_headers)
    res = await client.get(f"/api/v1/habits/{habit['id']}/stats", headers=other_headers)
    assert res.status_code == 404
