"""Task model - a unit of work on a project."""

import enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import String, Text, DateTime, ForeignKey, Numeric, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(Base):
    """Task ORM model."""

    __tablename__ = "tasks"

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
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=TaskStatus.PENDING.value)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    actual_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    actual_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id"),
        nullable=False,
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
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_tasks_status",
        ),
    )


# Pydantic schemas
class TaskBase(BaseModel):
    """Base task schema."""

    name: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    estimated_hours: Decimal | None = None
    estimated_cost: Decimal | None = None


class TaskCreate(TaskBase):
    """Schema for creating a task under a project."""

    organization_id: UUID | None = None


class TaskUpdate(BaseModel):
    """Schema for updating a task (all fields optional)."""

    name: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    estimated_hours: Decimal | None = None
    estimated_cost: Decimal | None = None


class TaskResponse(TaskBase):
    """Schema for task response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    organization_id: UUID
    actual_hours: Decimal
    actual_cost: Decimal
    created_by: UUID
    created_at: datetime
    updated_at: datetime
