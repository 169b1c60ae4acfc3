"""TaskAssignment model - one profile's time entry on a task for one day."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Date, DateTime, ForeignKey, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class TaskAssignment(Base):
    """TaskAssignment ORM model.

    Carries no organization_id of its own; access is resolved through the task.
    """

    __tablename__ = "task_assignments"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    task_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id"),
        nullable=False,
        index=True,
    )
    hours_spent: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    cost_incurred: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_worked: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
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
        UniqueConstraint("task_id", "user_id", "date_worked", name="uq_task_assignment_day"),
    )


# Pydantic schemas
class TaskAssignmentBase(BaseModel):
    """Base task assignment schema."""

    hours_spent: Decimal = Decimal("0")
    cost_incurred: Decimal = Decimal("0")
    notes: str | None = None
    date_worked: date | None = None


class TaskAssignmentCreate(TaskAssignmentBase):
    """Schema for logging time on a task.

    user_id defaults to the caller's profile; logging time for someone else is rejected.
    """

    user_id: UUID | None = None


class TaskAssignmentUpdate(BaseModel):
    """Schema for updating a time entry."""

    hours_spent: Decimal | None = None
    cost_incurred: Decimal | None = None
    notes: str | None = None


class TaskAssignmentResponse(TaskAssignmentBase):
    """Schema for task assignment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    user_id: UUID
    date_worked: date
    created_at: datetime
    updated_at: datetime
