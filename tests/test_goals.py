import pytest



@pytest.mark.asyncio
async def test_create_goal(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers, title="  Get fit  ", category="health")
    assert goal["title"] == "Get fit"
    assert goal["category"] == "health"
    assert goal["display_order"] == 0
    assert goal["task_count"] == 0


@pytest.mark.asyncio
async def test_create_goal_unknown_category(client, auth_headers):
    res = await client.post(
        "/api/v1/goals", json={"title": "Whatever", "category": "hobbies"}, headers=auth_headers
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_list_goals_with_task_counts(client, auth_headers, create_goal, create_task):
    goal = await create_goal(auth_headers)
    await create_goal(auth_headers, title="Second", category="finance")
    await create_task(auth_headers, goal_id=goal["id"])
    await create_task(auth_headers, goal_id=goal["id"], title="Another")

    res = await client.get("/api/v1/goals", headers=auth_headers)
    assert res.status_code == 200
    goals = res.json()
    assert [g["title"] for g in goals] == ["Launch side business", "Second"]
    assert goals[0]["task_count"] == 2
    assert goals[1]["task_count"] == 0


@pytest.mark.asyncio
async def test_goal_isolation(client, auth_headers, other_headers, create_goal):
    goal = await create_goal(auth_headers)

    res = await client.get(f"/api/v1/goals/{goal['id']}", headers=other_headers)
    assert res.status_code == 404

    res = await client.get("/api/v1/goals", headers=other_headers)
    assert res.json() == []


@pytest.mark.asyncio
async def test_update_goal(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers)
    res = await client.put(
        f"/api/v1/goals/{goal['id']}",
        json={"title": "Launch it", "estimated_value": 2500},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["title"] == "Launch it"
    assert res.json()["estimated_value"] == 2500


@pytest.mark.asyncio
async def test_delete_goal_is_soft(client, auth_headers, create_goal, create_task):
    goal = await create_goal(auth_headers)
    task = await create_task(auth_headers, goal_id=goal["id"])

    res = await client.delete(f"/api/v1/goals/{goal['id']}", headers=auth_headers)
    assert res.status_code == 204

    res = await client.get("/api/v1/goals", headers=auth_headers)
    assert res.json() == []

    res = await client.get("/api/v1/goals", params={"include_archived": True}, headers=auth_headers)
    assert res.json()[0]["is_archived"] is True

    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
    assert res.json()["goal_id"] == goal["id"]


@pytest.mark.asyncio
async def test_complete_goal_twice(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers)

    res = await client.post(f"/api/v1/goals/{goal['id']}/complete", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["completed_at"] is not None

    res = await client.post(f"/api/v1/goals/{goal['id']}/complete", headers=auth_headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_category_suggestions(client, auth_headers):
    res = await client.get("/api/v1/goals/suggestions/finance", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()[0]["title"] == "Track all expenses for one month"

    res = await client.get("/api/v1/goals/suggestions/hobbies", headers=auth_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_tasks_from_suggestions(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers, title="Launch my startup")

    res = await client.get(f"/api/v1/goals/{goal['id']}/suggestions", headers=auth_headers)
    titles = [s["title"] for s in res.json()]
    assert titles[0] == "Validate idea - talk to 10 potential customers"

    res = await client.post(
        f"/api/v1/goals/{goal['id']}/tasks/from-suggestions",
        json={"titles": titles[:2]},
        headers=auth_headers,
    )
    assert res.status_code == 201
    created = res.json()
    assert [t["title"] for t in created] == titles[:2]
    assert all(t["goal_title"] == "Launch my startup" for t in created)
    assert created[0]["energy_required"] == "high"


@pytest.mark.asyncio
async def test_tasks_from_unknown_suggestion(client, auth_headers, create_goal):
    goal = await create_goal(auth_headers)
    res = await client.post(
        f"/api/v1/goals/{goal['id']}/tasks/from-suggestions",
        json={"titles": ["Invent a time machine"]},
        headers=auth_headers,
    )
    assert res.status_code == 400
