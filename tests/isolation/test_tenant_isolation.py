"""Tenant isolation tests across the organization-scoped endpoints.

A caller whose organization differs from a row's organization sees the row
as absent on read and is rejected on write, whatever their role.
"""

import pytest
from fastapi import status


async def _seed_org_b(client, headers_b, project_b_id) -> dict:
    """Create one of each kind of record in organization B; return their URLs."""
    urls = {"project": f"/api/v1/projects/{project_b_id}"}

    task = await client.post(
        f"/api/v1/projects/{project_b_id}/tasks", json={"name": "Framing"}, headers=headers_b
    )
    assert task.status_code == status.HTTP_201_CREATED
    urls["task"] = f"/api/v1/tasks/{task.json()['id']}"

    service = await client.post(
        f"/api/v1/projects/{project_b_id}/services",
        json={"name": "Survey", "unit_price": "300.00"},
        headers=headers_b,
    )
    assert service.status_code == status.HTTP_201_CREATED
    urls["service"] = f"/api/v1/services/{service.json()['id']}"

    invoice = await client.post(
        f"/api/v1/projects/{project_b_id}/invoices",
        json={"total_amount": "1000.00"},
        headers=headers_b,
    )
    assert invoice.status_code == status.HTTP_201_CREATED
    urls["invoice"] = f"/api/v1/invoices/{invoice.json()['id']}"

    payment = await client.post(
        f"{urls['invoice']}/payments", json={"amount": "100.00"}, headers=headers_b
    )
    assert payment.status_code == status.HTTP_201_CREATED
    urls["payment"] = f"/api/v1/payments/{payment.json()['id']}"

    expense = await client.post(
        f"/api/v1/projects/{project_b_id}/expenses",
        json={"category": "Travel", "description": "Mileage", "amount": "42.00"},
        headers=headers_b,
    )
    assert expense.status_code == status.HTTP_201_CREATED
    urls["expense"] = f"/api/v1/expenses/{expense.json()['id']}"

    vendor = await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers_b)
    assert vendor.status_code == status.HTTP_201_CREATED
    urls["vendor"] = f"/api/v1/vendors/{vendor.json()['id']}"

    proposal = await client.post(
        f"/api/v1/projects/{project_b_id}/proposals", json={}, headers=headers_b
    )
    assert proposal.status_code == status.HTTP_201_CREATED
    urls["proposal"] = f"/api/v1/proposals/{proposal.json()['id']}"

    return urls


READABLE = ["project", "task", "service", "invoice", "payment", "expense", "vendor", "proposal"]
UPDATES = {
    "project": {"name": "Hijacked"},
    "task": {"name": "Hijacked"},
    "service": {"name": "Hijacked"},
    "invoice": {"status": "paid"},
    "payment": {"amount": "1.00"},
    "expense": {"description": "Hijacked"},
    "vendor": {"name": "Hijacked"},
    "proposal": {"title": "Hijacked"},
}


class TestCrossOrganizationAccess:
    """Organization A's admin against organization B's records."""

    @pytest.mark.asyncio
    async def test_reads_return_404(self, client, admin_a, admin_b, project_b, auth_headers):
        headers_a = auth_headers(admin_a)
        urls = await _seed_org_b(client, auth_headers(admin_b), project_b.id)

        for kind in READABLE:
            response = await client.get(urls[kind], headers=headers_a)
            assert response.status_code == status.HTTP_404_NOT_FOUND, kind

    @pytest.mark.asyncio
    async def test_updates_return_404_and_change_nothing(
        self, client, admin_a, admin_b, project_b, auth_headers
    ):
        headers_a = auth_headers(admin_a)
        headers_b = auth_headers(admin_b)
        urls = await _seed_org_b(client, headers_b, project_b.id)

        for kind, body in UPDATES.items():
            response = await client.put(urls[kind], json=body, headers=headers_a)
            assert response.status_code == status.HTTP_404_NOT_FOUND, kind

        project = await client.get(urls["project"], headers=headers_b)
        assert project.json()["name"] == "Warehouse"

    @pytest.mark.asyncio
    async def test_deletes_return_404_and_keep_rows(
        self, client, admin_a, admin_b, project_b, auth_headers
    ):
        headers_a = auth_headers(admin_a)
        headers_b = auth_headers(admin_b)
        urls = await _seed_org_b(client, headers_b, project_b.id)

        for kind in READABLE:
            response = await client.delete(urls[kind], headers=headers_a)
            assert response.status_code == status.HTTP_404_NOT_FOUND, kind

        for kind in READABLE:
            response = await client.get(urls[kind], headers=headers_b)
            assert response.status_code == status.HTTP_200_OK, kind

    @pytest.mark.asyncio
    async def test_child_collections_of_foreign_project_return_404(
        self, client, admin_a, project_b, auth_headers
    ):
        headers_a = auth_headers(admin_a)
        for child in ("tasks", "services", "invoices", "expenses", "proposals", "drawings", "documents"):
            response = await client.get(f"/api/v1/projects/{project_b.id}/{child}", headers=headers_a)
            assert response.status_code == status.HTTP_404_NOT_FOUND, child

    @pytest.mark.asyncio
    async def test_project_expenses_lists_only_that_project(
        self, client, admin_a, project_a, project_factory, auth_headers
    ):
        headers_a = auth_headers(admin_a)
        other = await project_factory(admin_a, name="Deck", client_name="Initech")
        for project_id, amount in ((project_a.id, "40.00"), (other.id, "15.00")):
            await client.post(
                f"/api/v1/projects/{project_id}/expenses",
                json={"category": "Travel", "description": "Mileage", "amount": amount},
                headers=headers_a,
            )

        response = await client.get(f"/api/v1/projects/{project_a.id}/expenses", headers=headers_a)
        assert response.status_code == status.HTTP_200_OK
        assert [e["project_id"] for e in response.json()] == [str(project_a.id)]

    @pytest.mark.asyncio
    async def test_cannot_create_children_under_foreign_project(
        self, client, admin_a, project_b, auth_headers
    ):
        response = await client.post(
            f"/api/v1/projects/{project_b.id}/tasks",
            json={"name": "Sneaky"},
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestListsAreScoped:
    @pytest.mark.asyncio
    async def test_project_list_excludes_other_organizations(
        self, client, admin_a, admin_b, project_a, project_b, auth_headers
    ):
        response = await client.get("/api/v1/projects", headers=auth_headers(admin_a))
        assert response.status_code == status.HTTP_200_OK
        ids = {p["id"] for p in response.json()}
        assert ids == {str(project_a.id)}

    @pytest.mark.asyncio
    async def test_vendor_and_expense_lists_exclude_other_organizations(
        self, client, admin_a, admin_b, project_b, auth_headers
    ):
        await _seed_org_b(client, auth_headers(admin_b), project_b.id)
        headers_a = auth_headers(admin_a)

        assert (await client.get("/api/v1/vendors", headers=headers_a)).json() == []
        assert (await client.get("/api/v1/expenses", headers=headers_a)).json() == []
        assert (await client.get("/api/v1/expense-categories", headers=headers_a)).json() == []

    @pytest.mark.asyncio
    async def test_profile_list_excludes_other_organizations(
        self, client, admin_a, designer_a, admin_b, auth_headers
    ):
        response = await client.get("/api/v1/profiles", headers=auth_headers(admin_a))
        emails = {p["email"] for p in response.json()}
        assert emails == {"admin@org-a.com", "designer@org-a.com"}

        response = await client.get(f"/api/v1/profiles/{admin_b.id}", headers=auth_headers(admin_a))
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestSpoofedOrganization:
    """Writes that name another organization are rejected."""

    @pytest.mark.asyncio
    async def test_create_project_for_other_organization_returns_403(
        self, client, admin_a, org_b, auth_headers
    ):
        response = await client.post(
            "/api/v1/projects",
            json={
                "name": "Spoofed",
                "project_type": "renovation",
                "client_name": "Acme",
                "organization_id": str(org_b.id),
            },
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_create_vendor_for_other_organization_returns_403(
        self, client, admin_a, org_b, auth_headers
    ):
        response = await client.post(
            "/api/v1/vendors",
            json={"name": "Spoofed", "organization_id": str(org_b.id)},
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_create_profile_in_other_organization_returns_403(
        self, client, admin_a, org_b, auth_headers
    ):
        response = await client.post(
            "/api/v1/profiles",
            json={"email": "mole@example.com", "organization_id": str(org_b.id)},
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_project_manager_from_other_organization_is_rejected(
        self, client, admin_a, admin_b, auth_headers
    ):
        response = await client.post(
            "/api/v1/projects",
            json={
                "name": "House",
                "project_type": "renovation",
                "client_name": "Acme",
                "project_manager_id": str(admin_b.id),
            },
            headers=auth_headers(admin_a),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
