"""Vendor model - organization lookup table for payees."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class Vendor(Base):
    """Vendor ORM model."""

    __tablename__ = "vendors"

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
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    default_category_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("expense_categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
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
        UniqueConstraint("organization_id", "name", name="uq_vendor_org_name"),
    )


# Pydantic schemas
class VendorBase(BaseModel):
    """Base vendor schema."""

    name: str
    default_category_id: UUID | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class VendorCreate(VendorBase):
    """Schema for creating a vendor."""

    organization_id: UUID | None = None


class VendorUpdate(BaseModel):
    """Schema for updating a vendor (all fields optional)."""

    name: str | None = None
    default_category_id: UUID | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class VendorResponse(VendorBase):
    """Schema for vendor response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    created_at: datetime
