"""Expense, expense category and vendor endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from models.expense_category import (
    ExpenseCategoryCreate,
    ExpenseCategoryResponse,
    ExpenseCategoryUpdate,
)
from models.vendor import VendorCreate, VendorResponse, VendorUpdate
from services import expenses_service

router = APIRouter()


@router.get("/expenses", response_model=List[ExpenseResponse])
async def list_expenses_endpoint(
    project_id: UUID | None = Query(None),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """List the organization's expenses, optionally for one project."""
    try:
        return await expenses_service.list_expenses(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch expenses: {str(e)}",
        )


@router.get("/projects/{project_id}/expenses", response_model=List[ExpenseResponse])
async def list_project_expenses_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    List a project's expenses, newest first.

    Raises:
        404 if the project is not visible to the caller.
    """
    try:
        return await expenses_service.list_expenses(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch expenses: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/expenses",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense_endpoint(
    project_id: UUID,
    payload: ExpenseCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Record an expense.

    tax_amount is computed from tax_rate unless manual_tax_override is set.
    """
    try:
        return await expenses_service.create_expense(
            db, caller=caller, project_id=project_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create expense: {str(e)}",
        )


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
async def get_expense_endpoint(
    expense_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await expenses_service.get_expense(db, caller=caller, expense_id=expense_id)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense_endpoint(
    expense_id: UUID,
    payload: ExpenseUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await expenses_service.update_expense(
            db, caller=caller, expense_id=expense_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update expense: {str(e)}",
        )


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_endpoint(
    expense_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await expenses_service.delete_expense(db, caller=caller, expense_id=expense_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete expense: {str(e)}",
        )


@router.get("/expense-categories", response_model=List[ExpenseCategoryResponse])
async def list_categories_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await expenses_service.list_categories(db, caller=caller)


@router.post(
    "/expense-categories",
    response_model=ExpenseCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category_endpoint(
    payload: ExpenseCategoryCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an expense category.

    Raises:
        409 if the name already exists in the organization.
    """
    try:
        return await expenses_service.create_category(db, caller=caller, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create expense category: {str(e)}",
        )


@router.post(
    "/expense-categories/seed-defaults",
    response_model=List[ExpenseCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def seed_categories_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Insert the default categories that are missing; returns the new ones."""
    try:
        return await expenses_service.seed_default_categories(db, caller=caller)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to seed expense categories: {str(e)}",
        )


@router.put("/expense-categories/{category_id}", response_model=ExpenseCategoryResponse)
async def update_category_endpoint(
    category_id: UUID,
    payload: ExpenseCategoryUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await expenses_service.update_category(
            db, caller=caller, category_id=category_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update expense category: {str(e)}",
        )


@router.delete("/expense-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_endpoint(
    category_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await expenses_service.delete_category(db, caller=caller, category_id=category_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete expense category: {str(e)}",
        )


@router.get("/vendors", response_model=List[VendorResponse])
async def list_vendors_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await expenses_service.list_vendors(db, caller=caller)


@router.get("/vendors/{vendor_id}", response_model=VendorResponse)
async def get_vendor_endpoint(
    vendor_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await expenses_service.get_vendor(db, caller=caller, vendor_id=vendor_id)


@router.post("/vendors", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor_endpoint(
    payload: VendorCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await expenses_service.create_vendor(db, caller=caller, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create vendor: {str(e)}",
        )


@router.put("/vendors/{vendor_id}", response_model=VendorResponse)
async def update_vendor_endpoint(
    vendor_id: UUID,
    payload: VendorUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await expenses_service.update_vendor(
            db, caller=caller, vendor_id=vendor_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update vendor: {str(e)}",
        )


@router.delete("/vendors/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor_endpoint(
    vendor_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await expenses_service.delete_vendor(db, caller=caller, vendor_id=vendor_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete vendor: {str(e)}",
        )
