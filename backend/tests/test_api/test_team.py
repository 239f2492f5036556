"""Tests for team member, role, and task endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create_member(client: AsyncClient, **overrides) -> dict:
    payload = {
        "name": "Chidi Okafor",
        "email": f"chidi-{uuid.uuid4().hex[:8]}@test.com",
        "phone": "+2348051234567",
        "role": "Cleaner",
    }
    payload.update(overrides)
    response = await client.post("/api/v1/team/members", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def _create_task(client: AsyncClient, **overrides) -> dict:
    payload = {"title": "Deep clean after checkout", "priority": "high"}
    payload.update(overrides)
    response = await client.post("/api/v1/team/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestRoles:
    async def test_list(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/team/roles")
        assert response.status_code == 200
        roles = {r["name"]: r["permissions"] for r in response.json()}
        assert len(roles) == 7
        assert "manage_team" in roles["Property Manager"]
        assert roles["Staff"] == ["view_properties"]


class TestMembers:
    async def test_create_with_assigned_properties(self, client: AsyncClient, test_property: dict) -> None:
        member = await _create_member(client, assigned_properties=[test_property["id"]], hire_date="2024-01-15")

        assert member["status"] == "active"
        assert member["assigned_properties"] == [test_property["id"]]
        assert member["hire_date"] == "2024-01-15"

    async def test_create_defaults_role(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/team/members",
            json={"name": "Ngozi Eze", "email": "ngozi@test.com"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "Staff"

    async def test_create_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/team/members", json={"name": "No Mail", "email": "not-an-email"})
        assert response.status_code == 422

    async def test_list_filters(self, client: AsyncClient) -> None:
        await _create_member(client)
        await _create_member(client, role="Security", status="on_leave")

        response = await client.get("/api/v1/team/members")
        assert response.json()["total"] == 2

        response = await client.get("/api/v1/team/members", params={"status": "on_leave"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["role"] == "Security"

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/team/members/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Team member not found"

    async def test_update(self, client: AsyncClient) -> None:
        member = await _create_member(client)

        response = await client.put(
            f"/api/v1/team/members/{member['id']}",
            json={"status": "inactive", "notes": "Relocated to Abuja"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "inactive"
        assert data["notes"] == "Relocated to Abuja"
        assert data["name"] == member["name"]

    async def test_update_rejects_null_name(self, client: AsyncClient) -> None:
        member = await _create_member(client)

        response = await client.put(f"/api/v1/team/members/{member['id']}", json={"name": None})
        assert response.status_code == 422

    async def test_delete_unassigns_work(self, client: AsyncClient, test_property: dict) -> None:
        member = await _create_member(client)
        task = await _create_task(client, assigned_to=member["id"])
        log = await client.post(
            "/api/v1/maintenance/logs",
            json={"property_id": test_property["id"], "title": "Check smoke alarms", "assigned_to": member["id"]},
        )

        response = await client.delete(f"/api/v1/team/members/{member['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Team member deleted"

        tasks = (await client.get("/api/v1/team/tasks")).json()
        assert tasks["items"][0]["id"] == task["id"]
        assert tasks["items"][0]["assigned_to"] is None
        detail = await client.get(f"/api/v1/maintenance/logs/{log.json()['id']}")
        assert detail.json()["assigned_to"] is None


class TestTasks:
    async def test_create_links(self, client: AsyncClient, test_property: dict) -> None:
        member = await _create_member(client)
        task = await _create_task(client, assigned_to=member["id"], property_id=test_property["id"])

        assert task["assigned_to"] == member["id"]
        assert task["property_id"] == test_property["id"]
        assert task["status"] == "pending"
        assert task["completed_at"] is None

    async def test_create_unknown_member(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/team/tasks", json={"title": "Orphan", "assigned_to": str(uuid.uuid4())})
        assert response.status_code == 404

    async def test_create_unknown_property(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/team/tasks", json={"title": "Orphan", "property_id": str(uuid.uuid4())})
        assert response.status_code == 404

    async def test_list_filters(self, client: AsyncClient) -> None:
        await _create_task(client)
        await _create_task(client, title="Restock towels", priority="low")

        response = await client.get("/api/v1/team/tasks", params={"priority": "low"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["title"] == "Restock towels"

    async def test_completion_stamps_time_once(self, client: AsyncClient) -> None:
        task = await _create_task(client)

        response = await client.put(f"/api/v1/team/tasks/{task['id']}", json={"status": "completed"})
        assert response.status_code == 200
        completed_at = response.json()["completed_at"]
        assert completed_at is not None

        response = await client.put(
            f"/api/v1/team/tasks/{task['id']}",
            json={"status": "completed", "description": "Done twice"},
        )
        assert response.json()["completed_at"] == completed_at

    async def test_update_invalid_status(self, client: AsyncClient) -> None:
        task = await _create_task(client)

        response = await client.put(f"/api/v1/team/tasks/{task['id']}", json={"status": "finished"})
        assert response.status_code == 422

    async def test_delete(self, client: AsyncClient) -> None:
        task = await _create_task(client)

        response = await client.delete(f"/api/v1/team/tasks/{task['id']}")
        assert response.status_code == 200

        response = await client.delete(f"/api/v1/team/tasks/{task['id']}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Task not found"
