"""Integration tests for deleting an organization and everything it owns."""

import pytest
from fastapi import status
from sqlalchemy import func, select

from models.document import Document
from models.drawing import Drawing
from models.expense import Expense
from models.expense_category import ExpenseCategory
from models.invoice import Invoice
from models.invoice_item import InvoiceItem
from models.organization import Organization
from models.payment import Payment
from models.profile import Profile
from models.project import Project
from models.project_proposal import ProjectProposal
from models.service import Service
from models.task import Task
from models.task_assignment import TaskAssignment
from models.vendor import Vendor

OWNED_TABLES = (
    Project,
    Task,
    TaskAssignment,
    Service,
    Invoice,
    InvoiceItem,
    Payment,
    Expense,
    ExpenseCategory,
    Vendor,
    Drawing,
    Document,
    ProjectProposal,
    Profile,
)


async def _count(db_session, model) -> int:
    return await db_session.scalar(select(func.count()).select_from(model))


async def _populate(client, headers, project_id):
    """Create a record in every organization-owned table through the API."""
    task = await client.post(f"/api/v1/projects/{project_id}/tasks", json={"name": "Framing"}, headers=headers)
    await client.post(
        f"/api/v1/tasks/{task.json()['id']}/assignments", json={"hours_spent": "2"}, headers=headers
    )
    service = await client.post(
        f"/api/v1/projects/{project_id}/services", json={"name": "Survey", "unit_price": "300"}, headers=headers
    )
    invoice = await client.post(
        f"/api/v1/projects/{project_id}/invoices",
        json={"items": [{"service_id": service.json()["id"], "description": "Survey", "unit_price": "300", "total_price": "300"}]},
        headers=headers,
    )
    await client.post(f"/api/v1/invoices/{invoice.json()['id']}/payments", json={"amount": "100"}, headers=headers)
    await client.post("/api/v1/expense-categories/seed-defaults", headers=headers)
    await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers)
    await client.post(
        f"/api/v1/projects/{project_id}/expenses",
        json={"category": "Travel", "description": "Mileage", "amount": "12.00"},
        headers=headers,
    )
    await client.post(f"/api/v1/projects/{project_id}/proposals", json={}, headers=headers)
    await client.post(
        f"/api/v1/projects/{project_id}/drawings",
        files={"file": ("plan.pdf", b"%PDF-1.4 plan", "application/pdf")},
        data={"title": "Ground floor", "category": "architectural"},
        headers=headers,
    )
    await client.post(
        f"/api/v1/projects/{project_id}/documents",
        files={"file": ("contract.pdf", b"%PDF-1.4 contract", "application/pdf")},
        data={"title": "Contract", "category": "contract"},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_delete_organization_leaves_no_orphans(
    client, db_session, admin_a, designer_a, project_a, auth_headers
):
    headers = auth_headers(admin_a)
    await _populate(client, headers, project_a.id)
    for model in OWNED_TABLES:
        assert await _count(db_session, model) > 0, model.__tablename__

    response = await client.delete("/api/v1/organization", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    for model in OWNED_TABLES:
        assert await _count(db_session, model) == 0, model.__tablename__
    assert await _count(db_session, Organization) == 0


@pytest.mark.asyncio
async def test_delete_organization_keeps_other_organizations(
    client, db_session, admin_a, admin_b, project_a, project_b, auth_headers
):
    await _populate(client, auth_headers(admin_b), project_b.id)
    counts_before = {model: await _count(db_session, model) for model in OWNED_TABLES}

    response = await client.delete("/api/v1/organization", headers=auth_headers(admin_a))
    assert response.status_code == status.HTTP_204_NO_CONTENT

    # Organization A only held its admin profile and one project
    assert await _count(db_session, Project) == counts_before[Project] - 1
    assert await _count(db_session, Profile) == counts_before[Profile] - 1
    for model in OWNED_TABLES:
        if model not in (Project, Profile):
            assert await _count(db_session, model) == counts_before[model], model.__tablename__


@pytest.mark.asyncio
async def test_only_admin_deletes_organization(client, pm_a, auth_headers):
    response = await client.delete("/api/v1/organization", headers=auth_headers(pm_a))
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_deleting_project_cascades_to_children(
    client, db_session, admin_a, project_a, auth_headers
):
    headers = auth_headers(admin_a)
    await _populate(client, headers, project_a.id)

    response = await client.delete(f"/api/v1/projects/{project_a.id}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    for model in (Task, TaskAssignment, Service, Invoice, InvoiceItem, Payment, Expense, Drawing, Document, ProjectProposal):
        assert await _count(db_session, model) == 0, model.__tablename__
    # Organization-level records stay
    assert await _count(db_session, Vendor) == 1
