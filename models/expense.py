"""Expense model - money spent on a project."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Numeric, Boolean, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class Expense(Base):
    """Expense ORM model."""

    __tablename__ = "expenses"

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
    vendor_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("vendors.id", ondelete="SET NULL"),
        nullable=True,
    )
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 3), nullable=True, default=Decimal("0"))
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True, default=Decimal("0"))
    manual_tax_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
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
class ExpenseBase(BaseModel):
    """Base expense schema."""

    expense_date: date | None = None
    category: str
    description: str
    amount: Decimal
    payment_method: str | None = None
    receipt_url: str | None = None
    vendor_id: UUID | None = None
    tax_rate: Decimal | None = None
    tax_amount: Decimal | None = None
    manual_tax_override: bool = False


class ExpenseCreate(ExpenseBase):
    """Schema for creating an expense under a project."""

    organization_id: UUID | None = None


class ExpenseUpdate(BaseModel):
    """Schema for updating an expense (all fields optional)."""

    expense_date: date | None = None
    category: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    payment_method: str | None = None
    receipt_url: str | None = None
    vendor_id: UUID | None = None
    tax_rate: Decimal | None = None
    tax_amount: Decimal | None = None
    manual_tax_override: bool | None = None


class ExpenseResponse(ExpenseBase):
    """Schema for expense response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    organization_id: UUID
    expense_date: date
    created_at: datetime
    updated_at: datetime
