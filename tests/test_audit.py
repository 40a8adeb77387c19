import pytest


@pytest.mark.asyncio
async def test_audit_logs_empty(client, auth_headers):
    res = await client.get("/api/v1/auth/audit-logs", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == []


@pytest.mark.asyncio
async def test_audit_logs_after_login(client):
    """Register + login should produce audit entries."""
    await client.post(
        "/api/v1/auth/register",
        json={"email": "audit@test.com", "password": "Test1234!", "full_name": "Audit User"},
    )
    login_res = await client.post(
        "/api/v1/auth/login",
        json={"email": "audit@test.com", "password": "Test1234!"},
    )
    headers = {"Authorization": f"Bearer {login_res.json()['access_token']}"}

    res = await client.get("/api/v1/auth/audit-logs", headers=headers)
    assert res.status_code == 200
    actions = [e["action"] for e in res.json()]
    assert "register" in actions
    assert "login" in actions


@pytest.mark.asyncio
async def test_audit_logs_record_task_changes(client, auth_headers):
    res = await client.post("/api/v1/tasks", json={"title": "Audited"}, headers=auth_headers)
    task_id = res.json()["id"]
    await client.delete(f"/api/v1/tasks/{task_id}", headers=auth_headers)

    res = await client.get("/api/v1/auth/audit-logs", headers=auth_headers)
    entries = res.json()
    assert [e["action"] for e in entries][:2] == ["delete_task", "create_task"]
    assert entries[0]["entity_id"] == task_id


@pytest.mark.asyncio
async def test_audit_logs_pagination(client, auth_headers):
    res = await client.get(
        "/api/v1/auth/audit-logs", headers=auth_headers, params={"limit": 5, "offset": 0}
    )
    assert res.status_code == 200
    assert len(res.json()) <= 5
