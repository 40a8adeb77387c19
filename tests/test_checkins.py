import pytest

HIGH_STATE = {
    "energy_level": 5,
    "mental_clarity": 5,
    "emotional_state": 5,
    "available_time": 5,
    "environment_quality": 5,
}
LOW_STATE = {
    "energy_level": 1,
    "mental_clarity": 1,
    "emotional_state": 1,
    "available_time": 1,
    "environment_quality": 1,
}


@pytest.mark.asyncio
async def test_checkin_without_tasks(client, auth_headers):
    res = await client.post("/api/v1/checkins", json=HIGH_STATE, headers=auth_headers)
    assert res.status_code == 201
    data = res.json()
    assert data["composite_score"] == 5
    assert data["energy_band"] == "high"
    assert data["matches"] == []


@pytest.mark.asyncio
async def test_checkin_validates_range(client, auth_headers):
    res = await client.post(
        "/api/v1/checkins", json={**HIGH_STATE, "energy_level": 6}, headers=auth_headers
    )
    assert res.status_code == 422

    res = await client.post(
        "/api/v1/checkins", json={**HIGH_STATE, "available_time": 0}, headers=auth_headers
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_checkin_ranks_tasks(client, auth_headers, create_task):
    await create_task(auth_headers, title="Inbox zero", energy_required="low", time_estimate="tiny")
    big = await create_task(
        auth_headers,
        title="Write the pitch deck",
        energy_required="high",
        work_type="deep_work",
        time_estimate="extended",
        priority="must_do",
        estimated_value=500,
    )
    await create_task(auth_headers, title="Plan sprint", energy_required="medium")
    await create_task(auth_headers, title="Tidy desk", energy_required="low", priority="someday")

    res = await client.post("/api/v1/checkins", json=HIGH_STATE, headers=auth_headers)
    assert res.status_code == 201
    matches = res.json()["matches"]

    assert len(matches) == 3
    assert [m["rank"] for m in matches] == [1, 2, 3]
    assert matches[0]["task_id"] == big["id"]
    assert matches[0]["score"] == 90
    assert matches[0]["reasons"] == [
        "Great time for challenging work",
        "Good use of your time block",
        "Perfect environment for focus work",
        "High priority task",
        "Worth $500",
    ]
    assert matches[1]["title"] == "Plan sprint"
    scores = [m["score"] for m in matches]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_checkin_updates_history_and_streak(client, auth_headers, create_task):
    task = await create_task(
        auth_headers, energy_required="low", time_estimate="tiny", priority="someday"
    )

    res = await client.post("/api/v1/checkins", json=LOW_STATE, headers=auth_headers)
    checkin = res.json()
    assert checkin["energy_band"] == "low"
    assert checkin["matches"][0]["score"] == 80

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["times_suggested"] == 1

    # A second check-in on the same day does not extend the streak.
    await client.post("/api/v1/checkins", json=LOW_STATE, headers=auth_headers)
    me = (await client.get("/api/v1/auth/me", headers=auth_headers)).json()
    assert me["streak_current"] == 1
    assert me["streak_longest"] == 1
    assert me["last_active_at"] is not None

    res = await client.get("/api/v1/checkins/latest", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["suggested_task_ids"] == [task["id"]]


@pytest.mark.asyncio
async def test_checkin_ignores_inactive_tasks(client, auth_headers, create_task):
    done = await create_task(auth_headers, title="Done")
    await client.post(f"/api/v1/tasks/{done['id']}/complete", headers=auth_headers)
    later = await create_task(auth_headers, title="Later")
    await client.post(f"/api/v1/tasks/{later['id']}/defer", headers=auth_headers)
    active = await create_task(auth_headers, title="Active")

    res = await client.post("/api/v1/checkins", json=HIGH_STATE, headers=auth_headers)
    assert [m["task_id"] for m in res.json()["matches"]] == [active["id"]]


@pytest.mark.asyncio
async def test_checkins_are_private(client, auth_headers, other_headers, create_task):
    await create_task(auth_headers)
    res = await client.post("/api/v1/checkins", json=HIGH_STATE, headers=other_headers)
    assert res.json()["matches"] == []

    res = await client.get("/api/v1/checkins/latest", headers=other_headers)
    assert res.status_code == 200

    res = await client.get("/api/v1/checkins", headers=auth_headers)
    assert res.json() == []


@pytest.mark.asyncio
async def test_latest_without_checkin(client, auth_headers):
    res = await client.get("/api/v1/checkins/latest", headers=auth_headers)
    assert res.status_code == 404


async def _suggest_one(client, headers, create_task):
    task = await create_task(headers)
    res = await client.post("/api/v1/checkins", json=HIGH_STATE, headers=headers)
    return task, res.json()["matches"][0]["suggestion_id"]


@pytest.mark.asyncio
async def test_accept_suggestion(client, auth_headers, create_task):
    task, suggestion_id = await _suggest_one(client, auth_headers, create_task)

    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "accepted"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["user_action"] == "accepted"
    assert res.json()["task_status"] == "in_progress"

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["times_accepted"] == 1

    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "declined"},
        headers=auth_headers,
    )
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_decline_suggestion(client, auth_headers, create_task):
    task, suggestion_id = await _suggest_one(client, auth_headers, create_task)

    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "declined", "decline_reason": "Not today"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["task_status"] == "active"

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["times_declined"] == 1


@pytest.mark.asyncio
async def test_defer_suggestion(client, auth_headers, create_task):
    task, suggestion_id = await _suggest_one(client, auth_headers, create_task)

    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "deferred"},
        headers=auth_headers,
    )
    assert res.json()["task_status"] == "deferred"

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["deferred_until"] is not None


@pytest.mark.asyncio
async def test_complete_suggestion(client, auth_headers, create_task):
    task, suggestion_id = await _suggest_one(client, auth_headers, create_task)

    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "completed"},
        headers=auth_headers,
    )
    assert res.json()["task_status"] == "completed"

    me = (await client.get("/api/v1/auth/me", headers=auth_headers)).json()
    assert me["first_task_completed_at"] is not None


@pytest.mark.asyncio
async def test_respond_unknown_action(client, auth_headers, create_task):
    _, suggestion_id = await _suggest_one(client, auth_headers, create_task)
    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "ignored"},
        headers=auth_headers,
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_respond_to_foreign_suggestion(client, auth_headers, other_headers, create_task):
    _, suggestion_id = await _suggest_one(client, auth_headers, create_task)
    res = await client.post(
        f"/api/v1/checkins/suggestions/{suggestion_id}/respond",
        json={"action": "accepted"},
        headers=other_headers,
    )
    assert res.status_code == 404
