"""Service layer for payments.

Every payment mutation and the recompute of the parent invoice's
paid_amount/balance_due happen in the same transaction, with one commit.
"""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.invoice import Invoice
from models.payment import Payment, PaymentCreate, PaymentUpdate
from repos import base, invoices_repo
from services import invoices_service
from services.common import apply_updates


async def list_payments(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
) -> list[Payment]:
    invoice = await invoices_service.get_invoice(session, caller=caller, invoice_id=invoice_id)
    return await invoices_repo.list_payments(
        session,
        organization_id=caller.organization_id,
        invoice_ids=[invoice.id],
    )


async def _get_payment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payment_id: UUID,
) -> tuple[Payment, Invoice]:
    payment = await invoices_repo.get_payment(
        session,
        organization_id=caller.organization_id,
        payment_id=payment_id,
    )
    if not payment:
        raise not_found("payments")
    invoice = await invoices_service.get_invoice(
        session, caller=caller, invoice_id=payment.invoice_id
    )
    authorize(
        "payments",
        Operation.SELECT,
        caller,
        payment,
        organization_id=invoice.organization_id,
    )
    return payment, invoice


async def get_payment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payment_id: UUID,
) -> Payment:
    payment, _ = await _get_payment(session, caller=caller, payment_id=payment_id)
    return payment


async def create_payment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    invoice_id: UUID,
    payload: PaymentCreate,
) -> Payment:
    """
    Record a payment against an invoice.

    Args:
        session: Database session
        caller: Caller context
        invoice_id: Invoice being paid
        payload: Payment data

    Returns:
        Created payment; the invoice totals are updated in the same commit
    """
    invoice = await invoices_service.get_invoice(session, caller=caller, invoice_id=invoice_id)

    payment = Payment(
        invoice_id=invoice.id,
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_method=payload.payment_method,
        notes=payload.notes,
    )
    authorize(
        "payments",
        Operation.INSERT,
        caller,
        payment,
        organization_id=invoice.organization_id,
    )

    payment = await base.create(session, payment)
    await invoices_service.recompute_invoice_totals(session, invoice)
    await session.commit()
    await session.refresh(payment)
    return payment


async def update_payment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payment_id: UUID,
    payload: PaymentUpdate,
) -> Payment:
    """Correct a payment (admin only). The invoice it belongs to cannot change."""
    payment, invoice = await _get_payment(session, caller=caller, payment_id=payment_id)
    authorize(
        "payments",
        Operation.UPDATE,
        caller,
        payment,
        organization_id=invoice.organization_id,
    )

    apply_updates(payment, payload)
    await invoices_service.recompute_invoice_totals(session, invoice)
    await session.commit()
    await session.refresh(payment)
    return payment


async def delete_payment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payment_id: UUID,
) -> Invoice:
    """
    Delete a payment (admin only).

    Returns:
        The parent invoice with recomputed totals
    """
    payment, invoice = await _get_payment(session, caller=caller, payment_id=payment_id)
    authorize(
        "payments",
        Operation.DELETE,
        caller,
        payment,
        organization_id=invoice.organization_id,
    )

    await base.delete(session, payment)
    await invoices_service.recompute_invoice_totals(session, invoice)
    await session.commit()
    await session.refresh(invoice)
    return invoice
