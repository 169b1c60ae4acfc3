"""InvoiceItem model - a line on an invoice."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Text, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class InvoiceItem(Base):
    """InvoiceItem ORM model.

    total_price is stored as submitted and is not required to equal
    quantity * unit_price (manual discounts and rounding are allowed).
    """

    __tablename__ = "invoice_items"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    invoice_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("services.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("1"))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
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
class InvoiceItemBase(BaseModel):
    """Base invoice item schema."""

    service_id: UUID | None = None
    description: str
    quantity: Decimal = Decimal("1")
    unit_price: Decimal
    total_price: Decimal


class InvoiceItemCreate(InvoiceItemBase):
    """Schema for adding a line to an invoice."""


class InvoiceItemUpdate(BaseModel):
    """Schema for updating an invoice line (all fields optional)."""

    service_id: UUID | None = None
    description: str | None = None
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    total_price: Decimal | None = None


class InvoiceItemResponse(InvoiceItemBase):
    """Schema for invoice item response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    created_at: datetime
