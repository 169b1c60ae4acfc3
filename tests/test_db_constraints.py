"""Integration tests for database constraints and how the API reports them."""

from decimal import Decimal

import pytest
from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.task import Task
from models.vendor import Vendor


@pytest.mark.asyncio
async def test_vendor_name_unique_per_organization(client, admin_a, admin_b, auth_headers):
    headers_a = auth_headers(admin_a)
    headers_b = auth_headers(admin_b)

    first = await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers_a)
    assert first.status_code == status.HTTP_201_CREATED

    other_org = await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers_b)
    assert other_org.status_code == status.HTTP_201_CREATED

    duplicate = await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers_a)
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert "Lumber Co" in duplicate.json()["detail"]


@pytest.mark.asyncio
async def test_second_time_entry_on_same_day_conflicts(
    client, designer_a, project_a, auth_headers
):
    """Test: (task, user, date_worked) is unique; the first entry survives."""
    headers = auth_headers(designer_a)
    task = await client.post(
        f"/api/v1/projects/{project_a.id}/tasks", json={"name": "Drafting"}, headers=headers
    )
    task_url = f"/api/v1/tasks/{task.json()['id']}"
    entry = {"hours_spent": "3.5", "cost_incurred": "175.00", "date_worked": "2024-05-01"}

    first = await client.post(f"{task_url}/assignments", json=entry, headers=headers)
    assert first.status_code == status.HTTP_201_CREATED

    second = await client.post(f"{task_url}/assignments", json=entry, headers=headers)
    assert second.status_code == status.HTTP_409_CONFLICT

    next_day = await client.post(
        f"{task_url}/assignments", json={**entry, "date_worked": "2024-05-02"}, headers=headers
    )
    assert next_day.status_code == status.HTTP_201_CREATED

    task = (await client.get(task_url, headers=headers)).json()
    assert Decimal(task["actual_hours"]) == Decimal("7.00")
    assert Decimal(task["actual_cost"]) == Decimal("350.00")


@pytest.mark.asyncio
async def test_task_actuals_follow_time_entries(client, designer_a, project_a, auth_headers):
    headers = auth_headers(designer_a)
    task = await client.post(
        f"/api/v1/projects/{project_a.id}/tasks", json={"name": "Modeling"}, headers=headers
    )
    task_url = f"/api/v1/tasks/{task.json()['id']}"

    entry = await client.post(
        f"{task_url}/assignments", json={"hours_spent": "4", "cost_incurred": "200"}, headers=headers
    )
    assignment_url = f"/api/v1/task-assignments/{entry.json()['id']}"

    response = await client.put(assignment_url, json={"hours_spent": "6"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert Decimal((await client.get(task_url, headers=headers)).json()["actual_hours"]) == Decimal("6")

    response = await client.delete(assignment_url, headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    task = (await client.get(task_url, headers=headers)).json()
    assert Decimal(task["actual_hours"]) == Decimal("0")
    assert Decimal(task["actual_cost"]) == Decimal("0")


@pytest.mark.asyncio
async def test_invalid_task_status_rejected(client, admin_a, project_a, auth_headers):
    response = await client.post(
        f"/api/v1/projects/{project_a.id}/tasks",
        json={"name": "Bad", "status": "blocked"},
        headers=auth_headers(admin_a),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_task_status_check_constraint(db_session: AsyncSession, admin_a, project_a):
    """Test: The database itself rejects an unknown task status."""
    db_session.add(
        Task(
            project_id=project_a.id,
            organization_id=admin_a.organization_id,
            name="Bypass",
            status="blocked",
            created_by=admin_a.id,
        )
    )
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_vendor_unique_constraint_at_database_level(db_session: AsyncSession, org_a):
    organization_id = org_a.id
    db_session.add(Vendor(organization_id=organization_id, name="Concrete Inc"))
    await db_session.commit()

    db_session.add(Vendor(organization_id=organization_id, name="Concrete Inc"))
    with pytest.raises(IntegrityError) as exc_info:
        await db_session.commit()
    assert "unique" in str(exc_info.value).lower()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_profile_with_created_projects_cannot_be_deleted(
    client, admin_a, designer_a, project_factory, auth_headers
):
    await project_factory(designer_a, name="Designer's project")

    response = await client.delete(
        f"/api/v1/profiles/{designer_a.id}", headers=auth_headers(admin_a)
    )
    assert response.status_code == status.HTTP_409_CONFLICT
