"""Payment model - money received against an invoice."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class Payment(Base):
    """Payment ORM model. Access is resolved through the invoice."""

    __tablename__ = "payments"

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
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    # cash, check, bank_transfer, ...
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
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
class PaymentBase(BaseModel):
    """Base payment schema."""

    amount: Decimal
    payment_date: date | None = None
    payment_method: str | None = None
    notes: str | None = None


class PaymentCreate(PaymentBase):
    """Schema for recording a payment on an invoice."""


class PaymentUpdate(BaseModel):
    """Schema for correcting a payment. The invoice cannot be changed."""

    amount: Decimal | None = None
    payment_date: date | None = None
    payment_method: str | None = None
    notes: str | None = None


class PaymentResponse(PaymentBase):
    """Schema for payment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    payment_date: date
    created_at: datetime
