"""Service layer for expenses, expense categories and vendors."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.expense import Expense, ExpenseCreate, ExpenseUpdate
from models.expense_category import (
    DEFAULT_CATEGORIES,
    ExpenseCategory,
    ExpenseCategoryCreate,
    ExpenseCategoryUpdate,
)
from models.vendor import Vendor, VendorCreate, VendorUpdate
from repos import base
from services.common import (
    apply_updates,
    target_organization,
    translate_integrity_errors,
    visible_project,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def compute_tax_amount(amount: Decimal, tax_rate: Decimal) -> Decimal:
    """Tax for a percentage rate, rounded half-up to cents."""
    return (amount * tax_rate / 100).quantize(CENTS, rounding=ROUND_HALF_UP)


def _apply_tax(expense: Expense) -> None:
    if expense.manual_tax_override or expense.tax_rate is None:
        return
    expense.tax_amount = compute_tax_amount(Decimal(expense.amount), Decimal(expense.tax_rate))


async def _check_vendor(session: AsyncSession, caller: CallerContext, vendor_id: UUID | None) -> None:
    if vendor_id is None:
        return
    vendor = await base.get_scoped(
        session, Vendor, organization_id=caller.organization_id, record_id=vendor_id
    )
    if not vendor:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vendor must belong to the same organization",
        )


# Expenses

async def list_expenses(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID | None = None,
) -> list[Expense]:
    """List expenses of the organization, or of one project."""
    if project_id is not None:
        await visible_project(session, caller, project_id)
    return await base.list_scoped(
        session,
        Expense,
        organization_id=caller.organization_id,
        order_by=Expense.expense_date.desc(),
        project_id=project_id,
    )


async def get_expense(session: AsyncSession, *, caller: CallerContext, expense_id: UUID) -> Expense:
    expense = await base.get_scoped(
        session, Expense, organization_id=caller.organization_id, record_id=expense_id
    )
    if not expense:
        raise not_found("expenses")
    authorize("expenses", Operation.SELECT, caller, expense)
    return expense


async def create_expense(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: ExpenseCreate,
) -> Expense:
    """
    Record an expense on a project.

    Unless manual_tax_override is set, tax_amount is derived from amount and
    tax_rate.
    """
    project = await visible_project(session, caller, project_id)

    data = payload.model_dump(exclude={"organization_id", "expense_date"})
    expense = Expense(
        **data,
        project_id=project.id,
        organization_id=target_organization(caller, payload.organization_id),
        expense_date=payload.expense_date or date.today(),
    )
    authorize("expenses", Operation.INSERT, caller, expense)
    await _check_vendor(session, caller, payload.vendor_id)

    _apply_tax(expense)
    expense = await base.create(session, expense)
    await session.commit()
    await session.refresh(expense)
    return expense


async def update_expense(
    session: AsyncSession,
    *,
    caller: CallerContext,
    expense_id: UUID,
    payload: ExpenseUpdate,
) -> Expense:
    expense = await get_expense(session, caller=caller, expense_id=expense_id)
    authorize("expenses", Operation.UPDATE, caller, expense)
    if "vendor_id" in payload.model_fields_set:
        await _check_vendor(session, caller, payload.vendor_id)

    apply_updates(expense, payload)
    _apply_tax(expense)
    await session.commit()
    await session.refresh(expense)
    return expense


async def delete_expense(session: AsyncSession, *, caller: CallerContext, expense_id: UUID) -> None:
    expense = await get_expense(session, caller=caller, expense_id=expense_id)
    authorize("expenses", Operation.DELETE, caller, expense)

    await base.delete(session, expense)
    await session.commit()


# Expense categories

async def list_categories(session: AsyncSession, *, caller: CallerContext) -> list[ExpenseCategory]:
    return await base.list_scoped(
        session,
        ExpenseCategory,
        organization_id=caller.organization_id,
        order_by=ExpenseCategory.name,
    )


async def get_category(
    session: AsyncSession,
    *,
    caller: CallerContext,
    category_id: UUID,
) -> ExpenseCategory:
    category = await base.get_scoped(
        session, ExpenseCategory, organization_id=caller.organization_id, record_id=category_id
    )
    if not category:
        raise not_found("expense_categories")
    authorize("expense_categories", Operation.SELECT, caller, category)
    return category


async def create_category(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: ExpenseCategoryCreate,
) -> ExpenseCategory:
    category = ExpenseCategory(
        organization_id=target_organization(caller, payload.organization_id),
        name=payload.name,
        description=payload.description,
    )
    authorize("expense_categories", Operation.INSERT, caller, category)

    async with translate_integrity_errors(
        session, conflict_detail=f"Expense category '{payload.name}' already exists"
    ):
        category = await base.create(session, category)
        await session.commit()

    await session.refresh(category)
    return category


async def update_category(
    session: AsyncSession,
    *,
    caller: CallerContext,
    category_id: UUID,
    payload: ExpenseCategoryUpdate,
) -> ExpenseCategory:
    category = await get_category(session, caller=caller, category_id=category_id)
    authorize("expense_categories", Operation.UPDATE, caller, category)

    async with translate_integrity_errors(
        session, conflict_detail=f"Expense category '{payload.name}' already exists"
    ):
        apply_updates(category, payload)
        await session.commit()

    await session.refresh(category)
    return category


async def delete_category(session: AsyncSession, *, caller: CallerContext, category_id: UUID) -> None:
    category = await get_category(session, caller=caller, category_id=category_id)
    authorize("expense_categories", Operation.DELETE, caller, category)

    await base.delete(session, category)
    await session.commit()


async def seed_default_categories(
    session: AsyncSession,
    *,
    caller: CallerContext,
) -> list[ExpenseCategory]:
    """
    Insert the default expense categories for the caller's organization.

    Names that already exist are skipped, so seeding twice is harmless.

    Returns:
        The categories that were created
    """
    existing = {
        category.name
        for category in await list_categories(session, caller=caller)
    }

    created = []
    for name, description in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        category = ExpenseCategory(
            organization_id=caller.organization_id,
            name=name,
            description=description,
        )
        authorize("expense_categories", Operation.INSERT, caller, category)
        session.add(category)
        created.append(category)

    await session.commit()
    for category in created:
        await session.refresh(category)

    logger.info(
        "Seeded %d default expense categories for organization %s",
        len(created),
        caller.organization_id,
    )
    return created


# Vendors

async def list_vendors(session: AsyncSession, *, caller: CallerContext) -> list[Vendor]:
    return await base.list_scoped(
        session,
        Vendor,
        organization_id=caller.organization_id,
        order_by=Vendor.name,
    )


async def get_vendor(session: AsyncSession, *, caller: CallerContext, vendor_id: UUID) -> Vendor:
    vendor = await base.get_scoped(
        session, Vendor, organization_id=caller.organization_id, record_id=vendor_id
    )
    if not vendor:
        raise not_found("vendors")
    authorize("vendors", Operation.SELECT, caller, vendor)
    return vendor


async def _check_category(
    session: AsyncSession,
    caller: CallerContext,
    category_id: UUID | None,
) -> None:
    if category_id is None:
        return
    category = await base.get_scoped(
        session, ExpenseCategory, organization_id=caller.organization_id, record_id=category_id
    )
    if not category:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Default category must belong to the same organization",
        )


async def create_vendor(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: VendorCreate,
) -> Vendor:
    vendor = Vendor(
        **payload.model_dump(exclude={"organization_id"}),
        organization_id=target_organization(caller, payload.organization_id),
    )
    authorize("vendors", Operation.INSERT, caller, vendor)
    await _check_category(session, caller, payload.default_category_id)

    async with translate_integrity_errors(
        session, conflict_detail=f"Vendor '{payload.name}' already exists"
    ):
        vendor = await base.create(session, vendor)
        await session.commit()

    await session.refresh(vendor)
    return vendor


async def update_vendor(
    session: AsyncSession,
    *,
    caller: CallerContext,
    vendor_id: UUID,
    payload: VendorUpdate,
) -> Vendor:
    vendor = await get_vendor(session, caller=caller, vendor_id=vendor_id)
    authorize("vendors", Operation.UPDATE, caller, vendor)
    if "default_category_id" in payload.model_fields_set:
        await _check_category(session, caller, payload.default_category_id)

    async with translate_integrity_errors(
        session, conflict_detail=f"Vendor '{payload.name}' already exists"
    ):
        apply_updates(vendor, payload)
        await session.commit()

    await session.refresh(vendor)
    return vendor


async def delete_vendor(session: AsyncSession, *, caller: CallerContext, vendor_id: UUID) -> None:
    vendor = await get_vendor(session, caller=caller, vendor_id=vendor_id)
    authorize("vendors", Operation.DELETE, caller, vendor)

    await base.delete(session, vendor)
    await session.commit()
