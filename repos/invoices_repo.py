"""Repository for invoices, invoice items and payments."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.invoice import Invoice
from models.invoice_item import InvoiceItem
from models.payment import Payment

CENTS = Decimal("0.01")


async def list_for_project(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_id: UUID,
) -> list[Invoice]:
    result = await session.execute(
        select(Invoice)
        .where(
            Invoice.organization_id == organization_id,
            Invoice.project_id == project_id,
        )
        .order_by(Invoice.issue_date.desc(), Invoice.created_at.desc())
    )
    return [invoice for invoice in result.scalars().all()]


async def get_item(
    session: AsyncSession,
    *,
    organization_id: UUID,
    item_id: UUID,
) -> InvoiceItem | None:
    """Get an invoice item by ID, scoped through its invoice's organization."""
    result = await session.execute(
        select(InvoiceItem)
        .join(Invoice, Invoice.id == InvoiceItem.invoice_id)
        .where(
            InvoiceItem.id == item_id,
            Invoice.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_items(
    session: AsyncSession,
    *,
    organization_id: UUID,
    invoice_ids: list[UUID],
) -> list[InvoiceItem]:
    if not invoice_ids:
        return []
    result = await session.execute(
        select(InvoiceItem)
        .join(Invoice, Invoice.id == InvoiceItem.invoice_id)
        .where(
            InvoiceItem.invoice_id.in_(invoice_ids),
            Invoice.organization_id == organization_id,
        )
        .order_by(InvoiceItem.created_at)
    )
    return [item for item in result.scalars().all()]


async def get_payment(
    session: AsyncSession,
    *,
    organization_id: UUID,
    payment_id: UUID,
) -> Payment | None:
    """Get a payment by ID, scoped through its invoice's organization."""
    result = await session.execute(
        select(Payment)
        .join(Invoice, Invoice.id == Payment.invoice_id)
        .where(
            Payment.id == payment_id,
            Invoice.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_payments(
    session: AsyncSession,
    *,
    organization_id: UUID,
    invoice_ids: list[UUID],
) -> list[Payment]:
    if not invoice_ids:
        return []
    result = await session.execute(
        select(Payment)
        .join(Invoice, Invoice.id == Payment.invoice_id)
        .where(
            Payment.invoice_id.in_(invoice_ids),
            Invoice.organization_id == organization_id,
        )
        .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
    )
    return [payment for payment in result.scalars().all()]


async def sum_payments(session: AsyncSession, invoice_id: UUID) -> Decimal:
    """Sum of all payment amounts for an invoice, 0 when there are none."""
    result = await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.invoice_id == invoice_id
        )
    )
    return Decimal(str(result.scalar_one())).quantize(CENTS)


async def latest_payment_date(session: AsyncSession, invoice_ids: list[UUID]) -> date | None:
    if not invoice_ids:
        return None
    result = await session.execute(
        select(func.max(Payment.payment_date)).where(Payment.invoice_id.in_(invoice_ids))
    )
    return result.scalar_one_or_none()
