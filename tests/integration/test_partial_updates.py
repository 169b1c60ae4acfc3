"""
Integration tests for PUT with explicit nulls.

A null sent for a NOT NULL column keeps the stored value; a null sent for a
nullable column clears it.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi import status


@pytest_asyncio.fixture
async def records(client, admin_a, project_a, auth_headers):
    """One record of every updatable kind in organization A, created through the API."""
    headers = auth_headers(admin_a)
    project_id = project_a.id

    task = (
        await client.post(f"/api/v1/projects/{project_id}/tasks", json={"name": "Framing"}, headers=headers)
    ).json()
    assignment = (
        await client.post(
            f"/api/v1/tasks/{task['id']}/assignments",
            json={"hours_spent": "2", "cost_incurred": "100"},
            headers=headers,
        )
    ).json()
    service = (
        await client.post(
            f"/api/v1/projects/{project_id}/services",
            json={"name": "Survey", "unit_price": "300"},
            headers=headers,
        )
    ).json()
    invoice = (
        await client.post(
            f"/api/v1/projects/{project_id}/invoices",
            json={"total_amount": "500", "notes": "Net 30"},
            headers=headers,
        )
    ).json()
    item = (
        await client.post(
            f"/api/v1/invoices/{invoice['id']}/items",
            json={"description": "Survey", "unit_price": "300", "total_price": "300"},
            headers=headers,
        )
    ).json()
    payment = (
        await client.post(
            f"/api/v1/invoices/{invoice['id']}/payments", json={"amount": "200"}, headers=headers
        )
    ).json()
    expense = (
        await client.post(
            f"/api/v1/projects/{project_id}/expenses",
            json={"category": "Travel", "description": "Mileage", "amount": "12.00"},
            headers=headers,
        )
    ).json()
    category = (
        await client.post("/api/v1/expense-categories", json={"name": "Permits"}, headers=headers)
    ).json()
    vendor = (await client.post("/api/v1/vendors", json={"name": "Lumber Co"}, headers=headers)).json()
    proposal = (
        await client.post(
            f"/api/v1/projects/{project_id}/proposals", json={"title": "Roof Proposal"}, headers=headers
        )
    ).json()
    drawing = (
        await client.post(
            f"/api/v1/projects/{project_id}/drawings",
            files={"file": ("plan.pdf", b"%PDF-1.4 plan", "application/pdf")},
            data={"title": "Ground floor", "category": "architectural"},
            headers=headers,
        )
    ).json()
    document = (
        await client.post(
            f"/api/v1/projects/{project_id}/documents",
            files={"file": ("contract.pdf", b"%PDF-1.4 contract", "application/pdf")},
            data={"title": "Contract", "category": "contract"},
            headers=headers,
        )
    ).json()

    return {
        "headers": headers,
        "project": str(project_id),
        "task": task["id"],
        "assignment": assignment["id"],
        "service": service["id"],
        "invoice": invoice["id"],
        "item": item["id"],
        "payment": payment["id"],
        "expense": expense["id"],
        "category": category["id"],
        "vendor": vendor["id"],
        "proposal": proposal["id"],
        "drawing": drawing["id"],
        "document": document["id"],
        "profile": str(admin_a.id),
    }


NULL_UPDATES = [
    (
        "/api/v1/projects/{project}",
        {"name": None, "client_name": None, "status": None, "project_type": None},
        {"name": "Roof Replacement", "client_name": "Acme", "status": "planning"},
    ),
    (
        "/api/v1/tasks/{task}",
        {"name": None, "status": None},
        {"name": "Framing", "status": "pending"},
    ),
    (
        "/api/v1/task-assignments/{assignment}",
        {"hours_spent": None, "cost_incurred": None},
        {"hours_spent": Decimal("2"), "cost_incurred": Decimal("100")},
    ),
    (
        "/api/v1/services/{service}",
        {"name": None, "unit_price": None, "unit": None},
        {"name": "Survey", "unit_price": Decimal("300"), "unit": "hour"},
    ),
    (
        "/api/v1/invoices/{invoice}",
        {"invoice_number": None, "total_amount": None, "status": None, "issue_date": None},
        {"total_amount": Decimal("500"), "balance_due": Decimal("300"), "status": "draft"},
    ),
    (
        "/api/v1/invoice-items/{item}",
        {"description": None, "quantity": None, "unit_price": None, "total_price": None},
        {"description": "Survey", "quantity": Decimal("1"), "total_price": Decimal("300")},
    ),
    (
        "/api/v1/payments/{payment}",
        {"amount": None, "payment_date": None},
        {"amount": Decimal("200")},
    ),
    (
        "/api/v1/expenses/{expense}",
        {"category": None, "description": None, "amount": None, "expense_date": None},
        {"category": "Travel", "description": "Mileage", "amount": Decimal("12")},
    ),
    ("/api/v1/expense-categories/{category}", {"name": None}, {"name": "Permits"}),
    ("/api/v1/vendors/{vendor}", {"name": None}, {"name": "Lumber Co"}),
    (
        "/api/v1/proposals/{proposal}",
        {"title": None, "approval_status": None},
        {"title": "Roof Proposal", "approval_status": "pending"},
    ),
    ("/api/v1/drawings/{drawing}", {"title": None}, {"title": "Ground floor"}),
    ("/api/v1/documents/{document}", {"title": None}, {"title": "Contract"}),
    ("/api/v1/organization", {"name": None}, {"name": "Organization A"}),
    ("/api/v1/profiles/{profile}", {"role": None}, {"role": "admin"}),
]


def _matches(actual, expected) -> bool:
    if isinstance(expected, Decimal):
        return Decimal(str(actual)) == expected
    return actual == expected


class TestNullOnRequiredColumns:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url,body,expected",
        NULL_UPDATES,
        ids=[case[0].split("/")[3] for case in NULL_UPDATES],
    )
    async def test_null_keeps_stored_value(self, client, records, url, body, expected):
        response = await client.put(url.format(**records), json=body, headers=records["headers"])
        assert response.status_code == status.HTTP_200_OK, response.text

        data = response.json()
        for field, value in expected.items():
            assert _matches(data[field], value), (field, data[field])

    @pytest.mark.asyncio
    async def test_invoice_number_is_kept(self, client, records):
        url = f"/api/v1/invoices/{records['invoice']}"
        before = (await client.get(url, headers=records["headers"])).json()

        response = await client.put(url, json={"invoice_number": None}, headers=records["headers"])
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["invoice_number"] == before["invoice_number"]


class TestNullOnNullableColumns:
    @pytest.mark.asyncio
    async def test_null_clears_invoice_notes(self, client, records):
        response = await client.put(
            f"/api/v1/invoices/{records['invoice']}", json={"notes": None}, headers=records["headers"]
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["notes"] is None

    @pytest.mark.asyncio
    async def test_null_clears_project_description(self, client, records):
        url = f"/api/v1/projects/{records['project']}"
        await client.put(url, json={"description": "Full tear-off"}, headers=records["headers"])

        response = await client.put(url, json={"description": None}, headers=records["headers"])
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["description"] is None
