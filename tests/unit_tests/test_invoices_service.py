"""Unit tests for invoices and line items."""

from decimal import Decimal

import pytest
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from models.invoice import InvoiceCreate, InvoiceUpdate
from models.invoice_item import InvoiceItemCreate, InvoiceItemUpdate
from models.service import ServiceCreate
from services import invoices_service, project_services_service


@pytest.mark.asyncio
async def test_items_without_total_set_invoice_total(
    db_session: AsyncSession, admin_a, project_a, caller
):
    """Test: When items are sent without total_amount, the total is their sum."""
    admin = caller(admin_a)
    invoice = await invoices_service.create_invoice(
        db_session,
        caller=admin,
        project_id=project_a.id,
        payload=InvoiceCreate(
            invoice_number="INV-000001",
            items=[
                InvoiceItemCreate(description="Design", quantity=Decimal("10"), unit_price=Decimal("50"), total_price=Decimal("500")),
                InvoiceItemCreate(description="Permits", unit_price=Decimal("120"), total_price=Decimal("120")),
            ],
        ),
    )

    assert invoice.invoice_number == "INV-000001"
    assert invoice.total_amount == Decimal("620")
    assert invoice.balance_due == Decimal("620")

    items = await invoices_service.list_items(db_session, caller=admin, invoice_id=invoice.id)
    assert sorted(item.description for item in items) == ["Design", "Permits"]


@pytest.mark.asyncio
async def test_explicit_total_wins_over_items(db_session: AsyncSession, admin_a, project_a, caller):
    invoice = await invoices_service.create_invoice(
        db_session,
        caller=caller(admin_a),
        project_id=project_a.id,
        payload=InvoiceCreate(
            total_amount=Decimal("450"),
            items=[InvoiceItemCreate(description="Design", unit_price=Decimal("500"), total_price=Decimal("500"))],
        ),
    )
    assert invoice.total_amount == Decimal("450")


@pytest.mark.asyncio
async def test_item_total_price_is_not_derived(db_session: AsyncSession, admin_a, project_a, caller):
    """Test: total_price may differ from quantity x unit_price (e.g. a discount) and is kept as sent."""
    admin = caller(admin_a)
    invoice = await invoices_service.create_invoice(
        db_session, caller=admin, project_id=project_a.id, payload=InvoiceCreate(total_amount=Decimal("100"))
    )

    item = await invoices_service.add_item(
        db_session,
        caller=admin,
        invoice_id=invoice.id,
        payload=InvoiceItemCreate(
            description="Site visits",
            quantity=Decimal("3"),
            unit_price=Decimal("40"),
            total_price=Decimal("100"),
        ),
    )
    assert item.quantity * item.unit_price == Decimal("120")
    assert item.total_price == Decimal("100")

    item = await invoices_service.update_item(
        db_session, caller=admin, item_id=item.id, payload=InvoiceItemUpdate(quantity=Decimal("4"))
    )
    assert item.total_price == Decimal("100")

    # Items do not change the invoice total
    invoice = await invoices_service.get_invoice(db_session, caller=admin, invoice_id=invoice.id)
    assert invoice.total_amount == Decimal("100")


@pytest.mark.asyncio
async def test_item_service_must_be_in_same_organization(
    db_session: AsyncSession, admin_a, admin_b, project_a, project_b, caller
):
    foreign_service = await project_services_service.create_service(
        db_session,
        caller=caller(admin_b),
        project_id=project_b.id,
        payload=ServiceCreate(name="Survey", unit_price=Decimal("300")),
    )
    invoice = await invoices_service.create_invoice(
        db_session, caller=caller(admin_a), project_id=project_a.id, payload=InvoiceCreate()
    )

    with pytest.raises(HTTPException) as exc_info:
        await invoices_service.add_item(
            db_session,
            caller=caller(admin_a),
            invoice_id=invoice.id,
            payload=InvoiceItemCreate(
                service_id=foreign_service.id,
                description="Survey",
                unit_price=Decimal("300"),
                total_price=Decimal("300"),
            ),
        )
    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_designer_cannot_update_invoice(
    db_session: AsyncSession, admin_a, designer_a, project_a, caller
):
    invoice = await invoices_service.create_invoice(
        db_session, caller=caller(designer_a), project_id=project_a.id, payload=InvoiceCreate()
    )
    with pytest.raises(HTTPException) as exc_info:
        await invoices_service.update_invoice(
            db_session, caller=caller(designer_a), invoice_id=invoice.id, payload=InvoiceUpdate(status="sent")
        )
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN
