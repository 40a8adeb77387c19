from datetime import timedelta

import pytest

from current_state.services.streaks import today_in


def _monday():
    today = today_in("UTC")
    return today - timedelta(days=today.weekday())


@pytest.mark.asyncio
async def test_current_week_empty(client, auth_headers):
    res = await client.get("/api/v1/planning/weeks/current", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()
    assert data["id"] is None
    assert data["week_start_date"] == _monday().isoformat()
    assert data["focus_goal_ids"] == []


@pytest.mark.asyncio
async def test_upsert_current_week(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers)

    res = await client.put(
        "/api/v1/planning/weeks/current",
        json={"focus_goal_ids": [goal["id"]], "intentions": "Ship the landing page"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    first = res.json()
    assert first["focus_goal_ids"] == [goal["id"]]

    res = await client.put(
        "/api/v1/planning/weeks/current",
        json={"focus_goal_ids": [], "intentions": "Rest"},
        headers=auth_headers,
    )
    assert res.json()["id"] == first["id"]

    res = await client.get("/api/v1/planning/weeks/current", headers=auth_headers)
    assert res.json()["intentions"] == "Rest"


@pytest.mark.asyncio
async def test_week_focus_must_be_own_goal(client, auth_headers, other_headers, create_goal):
    goal = await create_goal(other_headers)
    res = await client.put(
        "/api/v1/planning/weeks/current",
        json={"focus_goal_ids": [goal["id"]]},
        headers=auth_headers,
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_replace_commitments(client, auth_headers, create_task):
    a = await create_task(auth_headers, title="A")
    b = await create_task(auth_headers, title="B")
    c = await create_task(auth_headers, title="C")
    day = today_in("UTC").isoformat()

    res = await client.put(
        f"/api/v1/planning/commitments/{day}",
        json={"task_ids": [a["id"], b["id"]]},
        headers=auth_headers,
    )
    assert res.status_code == 200
    first = {c["task_id"]: c for c in res.json()}
    assert set(first) == {a["id"], b["id"]}

    res = await client.put(
        f"/api/v1/planning/commitments/{day}",
        json={"task_ids": [b["id"], c["id"]]},
        headers=auth_headers,
    )
    second = {c["task_id"]: c for c in res.json()}
    assert set(second) == {b["id"], c["id"]}
    assert second[b["id"]]["id"] == first[b["id"]]["id"]
    assert second[c["id"]]["task_title"] == "C"

    res = await client.get(f"/api/v1/planning/commitments/{day}", headers=auth_headers)
    assert len(res.json()) == 2


@pytest.mark.asyncio
async def test_commitments_reject_foreign_or_closed_tasks(client, auth_headers, other_headers, create_task):
    foreign = await create_task(other_headers)
    done = await create_task(auth_headers)
    await client.post(f"/api/v1/tasks/{done['id']}/complete", headers=auth_headers)
    day = today_in("UTC").isoformat()

    for task_id in (foreign["id"], done["id"]):
        res = await client.put(
            f"/api/v1/planning/commitments/{day}",
            json={"task_ids": [task_id]},
            headers=auth_headers,
        )
        assert res.status_code == 400


@pytest.mark.asyncio
async def test_complete_commitment_completes_task(client, auth_headers, create_task):
    task = await create_task(auth_headers)
    day = today_in("UTC").isoformat()
    res = await client.put(
        f"/api/v1/planning/commitments/{day}", json={"task_ids": [task["id"]]}, headers=auth_headers
    )
    commitment_id = res.json()[0]["id"]

    res = await client.post(f"/api/v1/planning/commitments/{commitment_id}/complete", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["completed"] is True

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["status"] == "completed"

    res = await client.post(f"/api/v1/planning/commitments/{commitment_id}/complete", headers=auth_headers)
    assert res.status_code == 409
    res = await client.post(f"/api/v1/planning/commitments/{commitment_id}/abandon", headers=auth_headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_abandon_commitment(client, auth_headers, other_headers, create_task):
    task = await create_task(auth_headers)
    day = today_in("UTC").isoformat()
    res = await client.put(
        f"/api/v1/planning/commitments/{day}", json={"task_ids": [task["id"]]}, headers=auth_headers
    )
    commitment_id = res.json()[0]["id"]

    res = await client.post(f"/api/v1/planning/commitments/{commitment_id}/abandon", headers=other_headers)
    assert res.status_code == 404

    res = await client.post(f"/api/v1/planning/commitments/{commitment_id}/abandon", headers=auth_headers)
    assert res.json()["abandoned"] is True

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["status"] == "active"


@pytest.mark.asyncio
async def test_weekly_review(client, auth_headers, create_goal, create_task):
    focus = await create_goal(auth_headers, title="Focus goal")
    other = await create_goal(auth_headers, title="Other goal", category="health")
    await client.put(
        "/api/v1/planning/weeks/current", json={"focus_goal_ids": [focus["id"]]}, headers=auth_headers
    )

    t1 = await create_task(auth_headers, title="Focus 1", goal_id=focus["id"], estimated_value=100)
    t2 = await create_task(auth_headers, title="Other 1", goal_id=other["id"])
    t3 = await create_task(auth_headers, title="Loose end")
    await create_task(auth_headers, title="Still open", goal_id=focus["id"])

    day = today_in("UTC").isoformat()
    res = await client.put(
        f"/api/v1/planning/commitments/{day}",
        json={"task_ids": [t1["id"], t2["id"]]},
        headers=auth_headers,
    )
    commitments = {c["task_id"]: c["id"] for c in res.json()}
    await client.post(f"/api/v1/planning/commitments/{commitments[t1['id']]}/complete", headers=auth_headers)
    await client.post(f"/api/v1/tasks/{t2['id']}/complete", headers=auth_headers)
    await client.post(f"/api/v1/tasks/{t3['id']}/complete", headers=auth_headers)
    await client.post(
        "/api/v1/checkins",
        json={
            "energy_level": 4,
            "mental_clarity": 3,
            "emotional_state": 3,
            "available_time": 3,
            "environment_quality": 3,
        },
        headers=auth_headers,
    )

    res = await client.get("/api/v1/planning/weeks/current/review", headers=auth_headers)
    assert res.status_code == 200
    review = res.json()
    assert review["week_start_date"] == _monday().isoformat()
    assert review["week_end_date"] == (_monday() + timedelta(days=6)).isoformat()
    assert review["tasks_completed"] == 3
    assert review["value_generated"] == 100
    assert review["commitments_made"] == 2
    assert review["commitments_fulfilled"] == 1
    assert review["checkins_count"] == 1
    assert review["avg_energy_level"] == 4

    goals = review["goals"]
    assert goals[0]["goal_title"] == "Focus goal"
    assert goals[0]["is_focus"] is True
    assert goals[0]["completed_tasks"] == ["Focus 1"]
    assert {g["goal_title"] for g in goals[1:]} == {"Other goal", "No goal"}
