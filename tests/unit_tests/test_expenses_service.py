"""Unit tests for expenses, categories and vendors."""

from decimal import Decimal

import pytest
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from models.expense import ExpenseCreate, ExpenseUpdate
from models.expense_category import DEFAULT_CATEGORIES, ExpenseCategoryCreate
from models.vendor import VendorCreate
from services import expenses_service
from services.expenses_service import compute_tax_amount


@pytest.mark.parametrize(
    "amount, rate, expected",
    [
        ("100.00", "13", "13.00"),
        ("19.99", "8.875", "1.77"),
        ("0.10", "5", "0.01"),
        ("250.00", "0", "0.00"),
    ],
)
def test_compute_tax_amount_rounds_half_up(amount, rate, expected):
    assert compute_tax_amount(Decimal(amount), Decimal(rate)) == Decimal(expected)


@pytest.mark.asyncio
async def test_tax_amount_derived_from_rate(db_session: AsyncSession, admin_a, project_a, caller):
    admin = caller(admin_a)
    expense = await expenses_service.create_expense(
        db_session,
        caller=admin,
        project_id=project_a.id,
        payload=ExpenseCreate(
            category="Equipment",
            description="Laser level",
            amount=Decimal("200.00"),
            tax_rate=Decimal("13"),
        ),
    )
    assert expense.tax_amount == Decimal("26.00")

    expense = await expenses_service.update_expense(
        db_session, caller=admin, expense_id=expense.id, payload=ExpenseUpdate(amount=Decimal("100.00"))
    )
    assert expense.tax_amount == Decimal("13.00")


@pytest.mark.asyncio
async def test_manual_tax_override_is_kept(db_session: AsyncSession, admin_a, project_a, caller):
    expense = await expenses_service.create_expense(
        db_session,
        caller=caller(admin_a),
        project_id=project_a.id,
        payload=ExpenseCreate(
            category="Travel",
            description="Flight",
            amount=Decimal("200.00"),
            tax_rate=Decimal("13"),
            tax_amount=Decimal("5.00"),
            manual_tax_override=True,
        ),
    )
    assert expense.tax_amount == Decimal("5.00")


@pytest.mark.asyncio
async def test_expense_vendor_must_be_in_same_organization(
    db_session: AsyncSession, admin_a, admin_b, project_a, caller
):
    foreign_vendor = await expenses_service.create_vendor(
        db_session, caller=caller(admin_b), payload=VendorCreate(name="Lumber Co")
    )
    with pytest.raises(HTTPException) as exc_info:
        await expenses_service.create_expense(
            db_session,
            caller=caller(admin_a),
            project_id=project_a.id,
            payload=ExpenseCreate(
                category="Equipment",
                description="Boards",
                amount=Decimal("10"),
                vendor_id=foreign_vendor.id,
            ),
        )
    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_list_expenses_across_projects(
    db_session: AsyncSession, admin_a, project_a, project_factory, caller
):
    admin = caller(admin_a)
    other_project = await project_factory(admin_a, name="Deck", client_name="Initech")
    for project in (project_a, other_project):
        await expenses_service.create_expense(
            db_session,
            caller=admin,
            project_id=project.id,
            payload=ExpenseCreate(category="Other", description="Misc", amount=Decimal("1")),
        )

    assert len(await expenses_service.list_expenses(db_session, caller=admin)) == 2
    only_deck = await expenses_service.list_expenses(db_session, caller=admin, project_id=other_project.id)
    assert [e.project_id for e in only_deck] == [other_project.id]


@pytest.mark.asyncio
async def test_seed_default_categories_is_idempotent(db_session: AsyncSession, admin_a, caller):
    admin = caller(admin_a)
    await expenses_service.create_category(
        db_session, caller=admin, payload=ExpenseCategoryCreate(name="Travel")
    )

    created = await expenses_service.seed_default_categories(db_session, caller=admin)
    assert len(created) == len(DEFAULT_CATEGORIES) - 1

    assert await expenses_service.seed_default_categories(db_session, caller=admin) == []
    categories = await expenses_service.list_categories(db_session, caller=admin)
    assert len(categories) == len(DEFAULT_CATEGORIES)


@pytest.mark.asyncio
async def test_duplicate_category_name_conflicts(db_session: AsyncSession, admin_a, admin_b, caller):
    await expenses_service.create_category(
        db_session, caller=caller(admin_a), payload=ExpenseCategoryCreate(name="Permits")
    )
    # Same name in another organization is fine
    await expenses_service.create_category(
        db_session, caller=caller(admin_b), payload=ExpenseCategoryCreate(name="Permits")
    )

    admin = caller(admin_a)
    with pytest.raises(HTTPException) as exc_info:
        await expenses_service.create_category(
            db_session, caller=admin, payload=ExpenseCategoryCreate(name="Permits")
        )
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT
