"""Integration tests for role and ownership rules within one organization."""

import pytest
from fastapi import status


class TestProjectRoles:
    @pytest.mark.asyncio
    async def test_designer_can_create_but_not_update_project(
        self, client, designer_a, auth_headers
    ):
        headers = auth_headers(designer_a)
        created = await client.post(
            "/api/v1/projects",
            json={"name": "Kitchen", "project_type": "renovation", "client_name": "Acme"},
            headers=headers,
        )
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["created_by"] == str(designer_a.id)

        response = await client.put(
            f"/api/v1/projects/{created.json()['id']}", json={"name": "Bigger Kitchen"}, headers=headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Insufficient permissions"

    @pytest.mark.asyncio
    async def test_pm_can_update_but_not_delete_project(self, client, pm_a, project_a, auth_headers):
        headers = auth_headers(pm_a)
        response = await client.put(
            f"/api/v1/projects/{project_a.id}", json={"status": "design_phase"}, headers=headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "design_phase"

        response = await client.delete(f"/api/v1/projects/{project_a.id}", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_can_delete_project(self, client, admin_a, project_a, auth_headers):
        headers = auth_headers(admin_a)
        response = await client.delete(f"/api/v1/projects/{project_a.id}", headers=headers)
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = await client.get(f"/api/v1/projects/{project_a.id}", headers=headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_active_filter(self, client, admin_a, project_factory, auth_headers):
        await project_factory(admin_a, name="Open", status="construction")
        await project_factory(admin_a, name="Done", status="completed")
        await project_factory(admin_a, name="Dropped", status="cancelled")
        headers = auth_headers(admin_a)

        active = await client.get("/api/v1/projects", params={"active": "true"}, headers=headers)
        assert [p["name"] for p in active.json()] == ["Open"]

        closed = await client.get("/api/v1/projects", params={"active": "false"}, headers=headers)
        assert {p["name"] for p in closed.json()} == {"Done", "Dropped"}

        completed = await client.get("/api/v1/projects", params={"status": "completed"}, headers=headers)
        assert [p["name"] for p in completed.json()] == ["Done"]


class TestTaskOwnership:
    @pytest.mark.asyncio
    async def test_task_creator_can_update_own_task(
        self, client, designer_a, project_a, auth_headers
    ):
        headers = auth_headers(designer_a)
        task = await client.post(
            f"/api/v1/projects/{project_a.id}/tasks", json={"name": "Sketches"}, headers=headers
        )
        assert task.status_code == status.HTTP_201_CREATED

        response = await client.put(
            f"/api/v1/tasks/{task.json()['id']}", json={"status": "in_progress"}, headers=headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "in_progress"

    @pytest.mark.asyncio
    async def test_designer_cannot_update_someone_elses_task(
        self, client, admin_a, designer_a, project_a, auth_headers
    ):
        task = await client.post(
            f"/api/v1/projects/{project_a.id}/tasks", json={"name": "Budget"}, headers=auth_headers(admin_a)
        )
        response = await client.put(
            f"/api/v1/tasks/{task.json()['id']}", json={"name": "Mine now"}, headers=auth_headers(designer_a)
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_cannot_log_time_for_another_user(
        self, client, admin_a, designer_a, project_a, auth_headers
    ):
        headers = auth_headers(admin_a)
        task = await client.post(
            f"/api/v1/projects/{project_a.id}/tasks", json={"name": "Drafting"}, headers=headers
        )
        response = await client.post(
            f"/api/v1/tasks/{task.json()['id']}/assignments",
            json={"user_id": str(designer_a.id), "hours_spent": "2"},
            headers=headers,
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestProfileRoles:
    @pytest.mark.asyncio
    async def test_admin_adds_member(self, client, admin_a, auth_headers):
        response = await client.post(
            "/api/v1/profiles",
            json={"email": "New.Hire@org-a.com", "role": "accountant"},
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["role"] == "accountant"
        assert response.json()["organization_id"] == str(admin_a.organization_id)

    @pytest.mark.asyncio
    async def test_non_admin_cannot_add_member(self, client, pm_a, auth_headers):
        response = await client.post(
            "/api/v1/profiles", json={"email": "someone@org-a.com"}, headers=auth_headers(pm_a)
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_member_of_another_organization_cannot_be_added(
        self, client, admin_a, admin_b, auth_headers
    ):
        response = await client.post(
            "/api/v1/profiles", json={"email": "admin@org-b.com"}, headers=auth_headers(admin_a)
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_user_edits_own_name_but_not_role(self, client, designer_a, auth_headers):
        headers = auth_headers(designer_a)
        url = f"/api/v1/profiles/{designer_a.id}"

        response = await client.put(url, json={"last_name": "Lovelace"}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["last_name"] == "Lovelace"

        response = await client.put(url, json={"role": "admin"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_changes_role(self, client, admin_a, designer_a, auth_headers):
        response = await client.put(
            f"/api/v1/profiles/{designer_a.id}", json={"role": "pm"}, headers=auth_headers(admin_a)
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["role"] == "pm"

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(self, client, admin_a, auth_headers):
        response = await client.delete(f"/api/v1/profiles/{admin_a.id}", headers=auth_headers(admin_a))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_only_admin_renames_organization(self, client, admin_a, pm_a, auth_headers):
        response = await client.put(
            "/api/v1/organization", json={"name": "Renamed"}, headers=auth_headers(pm_a)
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = await client.put(
            "/api/v1/organization", json={"name": "Renamed"}, headers=auth_headers(admin_a)
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Renamed"
