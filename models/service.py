"""Service model - a billable offering on a project."""

import enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, DateTime, ForeignKey, Numeric, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class PaymentStatus(str, enum.Enum):
    """Manual payment status of a service."""

    PAID = "paid"
    TO_BE_PAID = "to_be_paid"
    UNPAID = "unpaid"


class Service(Base):
    """Service ORM model."""

    __tablename__ = "services"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    organization_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="hour")
    payment_status: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default=PaymentStatus.UNPAID.value
    )
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

    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('paid', 'to_be_paid', 'unpaid')",
            name="ck_services_payment_status",
        ),
    )


# Pydantic schemas
class ServiceBase(BaseModel):
    """Base service schema."""

    name: str
    description: str | None = None
    unit_price: Decimal
    unit: str = "hour"
    payment_status: PaymentStatus | None = PaymentStatus.UNPAID


class ServiceCreate(ServiceBase):
    """Schema for creating a service under a project."""

    organization_id: UUID | None = None


class ServiceUpdate(BaseModel):
    """Schema for updating a service (all fields optional)."""

    name: str | None = None
    description: str | None = None
    unit_price: Decimal | None = None
    unit: str | None = None
    payment_status: PaymentStatus | None = None


class ServiceResponse(ServiceBase):
    """Schema for service response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    project_id: UUID
    created_at: datetime
    updated_at: datetime
