"""Invoice model - a bill issued against a project."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow
from models.invoice_item import InvoiceItemCreate


class Invoice(Base):
    """Invoice ORM model.

    paid_amount and balance_due are derived: paid_amount is the sum of the
    invoice's payments and balance_due is total_amount - paid_amount. Both are
    rewritten by services.payments_service whenever either side changes.
    """

    __tablename__ = "invoices"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    balance_due: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    # draft, sent, paid, overdue - free text
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="draft")
    issue_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )


# Pydantic schemas
class InvoiceBase(BaseModel):
    """Base invoice schema."""

    total_amount: Decimal = Decimal("0")
    status: str = "draft"
    issue_date: date | None = None
    due_date: date | None = None
    notes: str | None = None


class InvoiceCreate(InvoiceBase):
    """Schema for creating an invoice under a project.

    invoice_number is generated when omitted. paid_amount/balance_due are
    never accepted from the client. When line items are sent without a
    total_amount, the total is the sum of their total_price.
    """

    invoice_number: str | None = None
    organization_id: UUID | None = None
    items: list[InvoiceItemCreate] = []


class InvoiceUpdate(BaseModel):
    """Schema for updating an invoice (all fields optional)."""

    invoice_number: str | None = None
    total_amount: Decimal | None = None
    status: str | None = None
    issue_date: date | None = None
    due_date: date | None = None
    notes: str | None = None


class InvoiceResponse(InvoiceBase):
    """Schema for invoice response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    organization_id: UUID
    invoice_number: str
    issue_date: date
    paid_amount: Decimal
    balance_due: Decimal
    created_at: datetime
    updated_at: datetime
