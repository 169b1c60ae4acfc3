"""Invoice, invoice item and payment endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.invoice import InvoiceCreate, InvoiceResponse, InvoiceUpdate
from models.invoice_item import InvoiceItemCreate, InvoiceItemResponse, InvoiceItemUpdate
from models.payment import PaymentCreate, PaymentResponse, PaymentUpdate
from services import invoices_service, payments_service

router = APIRouter()


@router.get("/projects/{project_id}/invoices", response_model=List[InvoiceResponse])
async def list_invoices_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.list_invoices(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch invoices: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/invoices",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice_endpoint(
    project_id: UUID,
    payload: InvoiceCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an invoice, optionally with line items.

    invoice_number is generated when omitted.
    """
    try:
        return await invoices_service.create_invoice(
            db, caller=caller, project_id=project_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create invoice: {str(e)}",
        )


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice_endpoint(
    invoice_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await invoices_service.get_invoice(db, caller=caller, invoice_id=invoice_id)


@router.put("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice_endpoint(
    invoice_id: UUID,
    payload: InvoiceUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.update_invoice(
            db, caller=caller, invoice_id=invoice_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update invoice: {str(e)}",
        )


@router.delete("/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice_endpoint(
    invoice_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await invoices_service.delete_invoice(db, caller=caller, invoice_id=invoice_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete invoice: {str(e)}",
        )


@router.get("/invoices/{invoice_id}/items", response_model=List[InvoiceItemResponse])
async def list_items_endpoint(
    invoice_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await invoices_service.list_items(db, caller=caller, invoice_id=invoice_id)


@router.post(
    "/invoices/{invoice_id}/items",
    response_model=InvoiceItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_item_endpoint(
    invoice_id: UUID,
    payload: InvoiceItemCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.add_item(
            db, caller=caller, invoice_id=invoice_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create invoice item: {str(e)}",
        )


@router.put("/invoice-items/{item_id}", response_model=InvoiceItemResponse)
async def update_item_endpoint(
    item_id: UUID,
    payload: InvoiceItemUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.update_item(db, caller=caller, item_id=item_id, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update invoice item: {str(e)}",
        )


@router.delete("/invoice-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item_endpoint(
    item_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await invoices_service.delete_item(db, caller=caller, item_id=item_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete invoice item: {str(e)}",
        )


@router.get("/invoices/{invoice_id}/payments", response_model=List[PaymentResponse])
async def list_payments_endpoint(
    invoice_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await payments_service.list_payments(db, caller=caller, invoice_id=invoice_id)


@router.post(
    "/invoices/{invoice_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_endpoint(
    invoice_id: UUID,
    payload: PaymentCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a payment.

    The invoice's paid_amount and balance_due are recomputed in the same
    transaction.
    """
    try:
        return await payments_service.create_payment(
            db, caller=caller, invoice_id=invoice_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create payment: {str(e)}",
        )


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment_endpoint(
    payment_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await payments_service.get_payment(db, caller=caller, payment_id=payment_id)


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
async def update_payment_endpoint(
    payment_id: UUID,
    payload: PaymentUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await payments_service.update_payment(
            db, caller=caller, payment_id=payment_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update payment: {str(e)}",
        )


@router.delete("/payments/{payment_id}", response_model=InvoiceResponse)
async def delete_payment_endpoint(
    payment_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete a payment and return the invoice with recomputed totals."""
    try:
        return await payments_service.delete_payment(db, caller=caller, payment_id=payment_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete payment: {str(e)}",
        )
