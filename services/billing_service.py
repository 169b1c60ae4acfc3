"""Billing and budget summaries computed from invoices, payments and expenses."""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import CallerContext
from models.billing import BudgetOverview, ProjectFinancialSummary, ServiceBillingStatus
from models.expense import Expense
from models.project import CLOSED_STATUSES, ProjectStatus
from models.service import PaymentStatus, Service
from repos import base, invoices_repo, projects_repo
from services.common import visible_project

CENTS = Decimal("0.01")
ZERO = Decimal("0")


async def service_billing_status(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> list[ServiceBillingStatus]:
    """
    Paid status of every service on a project.

    Each invoice's total payments are spread over its line items in
    proportion to their total_price. A service counts as paid once the
    amount allocated to it reaches its unit price.
    """
    await visible_project(session, caller, project_id)

    services = await base.list_scoped(
        session,
        Service,
        organization_id=caller.organization_id,
        order_by=Service.name,
        project_id=project_id,
    )
    invoices = await invoices_repo.list_for_project(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )
    invoice_ids = [invoice.id for invoice in invoices]
    items = await invoices_repo.list_items(
        session, organization_id=caller.organization_id, invoice_ids=invoice_ids
    )
    payments = await invoices_repo.list_payments(
        session, organization_id=caller.organization_id, invoice_ids=invoice_ids
    )

    paid_by_invoice: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
    last_paid_by_invoice: dict[UUID, date] = {}
    for payment in payments:
        paid_by_invoice[payment.invoice_id] += Decimal(payment.amount)
        latest = last_paid_by_invoice.get(payment.invoice_id)
        if latest is None or payment.payment_date > latest:
            last_paid_by_invoice[payment.invoice_id] = payment.payment_date

    items_total_by_invoice: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
    for item in items:
        items_total_by_invoice[item.invoice_id] += Decimal(item.total_price)

    paid_by_service: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
    last_paid_by_service: dict[UUID, date] = {}
    for item in items:
        if item.service_id is None:
            continue
        # Zero-total invoices would divide by zero; treat their denominator as 1
        denominator = items_total_by_invoice[item.invoice_id] or Decimal("1")
        share = Decimal(item.total_price) / denominator
        paid_by_service[item.service_id] += paid_by_invoice[item.invoice_id] * share

        paid_on = last_paid_by_invoice.get(item.invoice_id)
        current = last_paid_by_service.get(item.service_id)
        if paid_on is not None and (current is None or paid_on > current):
            last_paid_by_service[item.service_id] = paid_on

    statuses = []
    for service in services:
        amount_paid = paid_by_service[service.id].quantize(CENTS)
        unit_price = Decimal(service.unit_price)
        statuses.append(
            ServiceBillingStatus(
                service_id=service.id,
                name=service.name,
                unit_price=unit_price,
                amount_paid=amount_paid,
                balance_due=unit_price - amount_paid,
                payment_status=PaymentStatus.PAID if amount_paid >= unit_price else PaymentStatus.UNPAID,
                last_payment_date=last_paid_by_service.get(service.id),
            )
        )
    return statuses


async def project_financial_summary(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> ProjectFinancialSummary:
    project = await visible_project(session, caller, project_id)

    expenses = await base.list_scoped(
        session,
        Expense,
        organization_id=caller.organization_id,
        project_id=project_id,
    )
    invoices = await invoices_repo.list_for_project(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )

    return ProjectFinancialSummary(
        project_id=project.id,
        estimated_budget=project.estimated_budget,
        actual_budget=project.actual_budget,
        total_expenses=sum((Decimal(e.amount) for e in expenses), start=ZERO),
        total_invoiced=sum((Decimal(i.total_amount) for i in invoices), start=ZERO),
        total_paid=sum((Decimal(i.paid_amount) for i in invoices), start=ZERO),
        outstanding_balance=sum((Decimal(i.balance_due) for i in invoices), start=ZERO),
    )


async def organization_budget_overview(
    session: AsyncSession,
    *,
    caller: CallerContext,
) -> BudgetOverview:
    """
    Budget totals across the organization's projects.

    completed_budget_utilization is the actual budget of all projects as a
    whole-number percentage of the estimated budget of completed ones.
    """
    projects = await projects_repo.list_projects(session, organization_id=caller.organization_id)

    completed = [p for p in projects if p.status == ProjectStatus.COMPLETED.value]
    active = [p for p in projects if p.status not in CLOSED_STATUSES]

    def budget(rows, attr: str) -> Decimal:
        return sum((Decimal(getattr(p, attr) or 0) for p in rows), start=ZERO)

    total_actual = budget(projects, "actual_budget")
    completed_estimated = budget(completed, "estimated_budget")
    utilization = (
        int((total_actual / completed_estimated * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        if completed and completed_estimated
        else 0
    )

    return BudgetOverview(
        total_projects=len(projects),
        active_projects=len(active),
        completed_projects=len(completed),
        total_estimated_budget=budget(projects, "estimated_budget"),
        total_actual_budget=total_actual,
        active_estimated_budget=budget(active, "estimated_budget"),
        completed_budget_utilization=utilization,
    )
