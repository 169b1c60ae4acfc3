"""Read-only billing and budget summary schemas (no tables)."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from models.service import PaymentStatus


class ServiceBillingStatus(BaseModel):
    """How much of a service's price has been paid through invoices."""

    service_id: UUID
    name: str
    unit_price: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus
    last_payment_date: date | None = None


class ProjectFinancialSummary(BaseModel):
    project_id: UUID
    estimated_budget: Decimal | None
    actual_budget: Decimal | None
    total_expenses: Decimal
    total_invoiced: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal


class BudgetOverview(BaseModel):
    """Budget totals across all projects of an organization."""

    total_projects: int
    active_projects: int
    completed_projects: int
    total_estimated_budget: Decimal
    total_actual_budget: Decimal
    active_estimated_budget: Decimal
    completed_budget_utilization: int
