"""Service layer for invoices and invoice line items."""

import time
from datetime import date
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.invoice import Invoice, InvoiceCreate, InvoiceUpdate
from models.invoice_item import InvoiceItem, InvoiceItemCreate, InvoiceItemUpdate
from models.service import Service
from repos import base, invoices_repo
from services.common import apply_updates, target_organization, visible_project


def generate_invoice_number() -> str:
    """INV- followed by the last six digits of the current millisecond timestamp."""
    return f"INV-{str(int(time.time() * 1000))[-6:]}"


async def recompute_invoice_totals(session: AsyncSession, invoice: Invoice) -> Invoice:
    """
    Re-derive paid_amount and balance_due from the invoice's full payment set.

    paid_amount is the sum of all payments (0 when there are none) and
    balance_due is total_amount - paid_amount. Pending changes are flushed
    first so the sum sees them; the caller commits.
    """
    await session.flush()
    invoice.paid_amount = await invoices_repo.sum_payments(session, invoice.id)
    invoice.balance_due = invoice.total_amount - invoice.paid_amount
    return invoice


async def _check_service(
    session: AsyncSession,
    caller: CallerContext,
    service_id: UUID | None,
) -> None:
    if service_id is None:
        return
    service = await base.get_scoped(
        session, Service, organization_id=caller.organization_id, record_id=service_id
    )
    if not service:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Service must belong to the same organization",
        )


async def list_invoices(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> list[Invoice]:
    await visible_project(session, caller, project_id)
    return await invoices_repo.list_for_project(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )


async def get_invoice(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
) -> Invoice:
    invoice = await base.get_scoped(
        session, Invoice, organization_id=caller.organization_id, record_id=invoice_id
    )
    if not invoice:
        raise not_found("invoices")
    authorize("invoices", Operation.SELECT, caller, invoice)
    return invoice


async def create_invoice(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: InvoiceCreate,
) -> Invoice:
    """
    Create an invoice, optionally with its line items, in one transaction.

    Args:
        session: Database session
        caller: Caller context
        project_id: Project being billed
        payload: Invoice data

    Returns:
        Created invoice with balance_due = total_amount
    """
    project = await visible_project(session, caller, project_id)

    total_amount = payload.total_amount
    if payload.items and "total_amount" not in payload.model_fields_set:
        total_amount = sum((item.total_price for item in payload.items), start=total_amount)

    invoice = Invoice(
        project_id=project.id,
        organization_id=target_organization(caller, payload.organization_id),
        invoice_number=payload.invoice_number or generate_invoice_number(),
        total_amount=total_amount,
        status=payload.status,
        issue_date=payload.issue_date or date.today(),
        due_date=payload.due_date,
        notes=payload.notes,
    )
    authorize("invoices", Operation.INSERT, caller, invoice)

    for item in payload.items:
        await _check_service(session, caller, item.service_id)

    invoice = await base.create(session, invoice)
    for item in payload.items:
        session.add(InvoiceItem(invoice_id=invoice.id, **item.model_dump()))

    await recompute_invoice_totals(session, invoice)
    await session.commit()
    await session.refresh(invoice)
    return invoice


async def update_invoice(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
    payload: InvoiceUpdate,
) -> Invoice:
    """Update an invoice (admin or pm); balance_due follows total_amount."""
    invoice = await get_invoice(session, caller=caller, invoice_id=invoice_id)
    authorize("invoices", Operation.UPDATE, caller, invoice)

    apply_updates(invoice, payload)
    await recompute_invoice_totals(session, invoice)
    await session.commit()
    await session.refresh(invoice)
    return invoice


async def delete_invoice(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
) -> None:
    invoice = await get_invoice(session, caller=caller, invoice_id=invoice_id)
    authorize("invoices", Operation.DELETE, caller, invoice)

    await base.delete(session, invoice)
    await session.commit()


async def list_items(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
) -> list[InvoiceItem]:
    invoice = await get_invoice(session, caller=caller, invoice_id=invoice_id)
    return await invoices_repo.list_items(
        session,
        organization_id=caller.organization_id,
        invoice_ids=[invoice.id],
    )


async def _get_item(
    session: AsyncSession,
    *,
    caller: CallerContext,
    item_id: UUID,
) -> tuple[InvoiceItem, Invoice]:
    item = await invoices_repo.get_item(
        session,
        organization_id=caller.organization_id,
        item_id=item_id,
    )
    if not item:
        raise not_found("invoice_items")
    invoice = await get_invoice(session, caller=caller, invoice_id=item.invoice_id)
    return item, invoice


async def add_item(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
    payload: InvoiceItemCreate,
) -> InvoiceItem:
    """
    Add a line item. total_price is stored exactly as sent.

    The invoice's total_amount is not touched; totals are managed on the
    invoice itself.
    """
    invoice = await get_invoice(session, caller=caller, invoice_id=invoice_id)

    item = InvoiceItem(invoice_id=invoice.id, **payload.model_dump())
    authorize(
        "invoice_items",
        Operation.INSERT,
        caller,
        item,
        organization_id=invoice.organization_id,
    )
    await _check_service(session, caller, payload.service_id)

    item = await base.create(session, item)
    await session.commit()
    await session.refresh(item)
    return item


async def update_item(
    session: AsyncSession,
    *,
    caller: CallerContext,
    item_id: UUID,
    payload: InvoiceItemUpdate,
) -> InvoiceItem:
    item, invoice = await _get_item(session, caller=caller, item_id=item_id)
    authorize(
        "invoice_items",
        Operation.UPDATE,
        caller,
        item,
        organization_id=invoice.organization_id,
    )
    if "service_id" in payload.model_fields_set:
        await _check_service(session, caller, payload.service_id)

    apply_updates(item, payload)
    await session.commit()
    await session.refresh(item)
    return item


async def delete_item(
    session: AsyncSession,
    *,
    caller: CallerContext,
    item_id: UUID,
) -> None:
    item, invoice = await _get_item(session, caller=caller, item_id=item_id)
    authorize(
        "invoice_items",
        Operation.DELETE,
        caller,
        item,
        organization_id=invoice.organization_id,
    )

    await base.delete(session, item)
    await session.commit()
