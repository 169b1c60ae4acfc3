"""ExpenseCategory model - organization lookup table for expense categories."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow

DEFAULT_CATEGORIES = [
    ("Office Supplies", "General office supplies and equipment"),
    ("Travel", "Business travel expenses"),
    ("Meals & Entertainment", "Business meals and client entertainment"),
    ("Professional Services", "Legal, accounting, and consulting fees"),
    ("Marketing", "Advertising and promotional expenses"),
    ("Utilities", "Phone, internet, electricity, etc."),
    ("Equipment", "Computer hardware, tools, and equipment"),
    ("Software", "Software licenses and subscriptions"),
    ("Insurance", "Business insurance premiums"),
    ("Other", "Miscellaneous business expenses"),
]


class ExpenseCategory(Base):
    """ExpenseCategory ORM model."""

    __tablename__ = "expense_categories"

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
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
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
        UniqueConstraint("organization_id", "name", name="uq_expense_category_org_name"),
    )


# Pydantic schemas
class ExpenseCategoryBase(BaseModel):
    """Base expense category schema."""

    name: str
    description: str | None = None


class ExpenseCategoryCreate(ExpenseCategoryBase):
    """Schema for creating an expense category."""

    organization_id: UUID | None = None


class ExpenseCategoryUpdate(BaseModel):
    """Schema for updating an expense category."""

    name: str | None = None
    description: str | None = None


class ExpenseCategoryResponse(ExpenseCategoryBase):
    """Schema for expense category response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    created_at: datetime
