"""Project model - an organization's construction or design engagement."""

import enum
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Index, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class ProjectType(str, enum.Enum):
    """Kind of engagement."""

    RESIDENTIAL_CONSTRUCTION = "residential_construction"
    COMMERCIAL_CONSTRUCTION = "commercial_construction"
    INFRASTRUCTURE = "infrastructure"
    RENOVATION = "renovation"
    DESIGN_ONLY = "design_only"
    ENGINEERING_ANALYSIS = "engineering_analysis"
    PERMIT_DRAWINGS = "permit_drawings"
    LANDSCAPE_DESIGN = "landscape_design"


class ProjectStatus(str, enum.Enum):
    """Project lifecycle state."""

    PLANNING = "planning"
    DESIGN_PHASE = "design_phase"
    PERMITTING = "permitting"
    CONSTRUCTION = "construction"
    INSPECTION = "inspection"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


# Statuses that take a project off the active list
CLOSED_STATUSES = (ProjectStatus.COMPLETED.value, ProjectStatus.CANCELLED.value)


class Project(Base):
    """Project ORM model."""

    __tablename__ = "projects"

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
    project_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=ProjectStatus.PLANNING.value, index=True
    )
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    project_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    actual_budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    project_manager_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
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
        Index("ix_projects_org_client_name", "organization_id", "client_name", "name"),
    )


# Pydantic schemas
class ProjectBase(BaseModel):
    """Base project schema."""

    name: str
    description: str | None = None
    project_type: ProjectType
    status: ProjectStatus = ProjectStatus.PLANNING
    client_name: str
    client_email: EmailStr | None = None
    client_phone: str | None = None
    project_address: str | None = None
    estimated_budget: Decimal | None = None
    actual_budget: Decimal | None = None
    start_date: date | None = None
    estimated_completion_date: date | None = None
    actual_completion_date: date | None = None
    project_manager_id: UUID | None = None


class ProjectCreate(ProjectBase):
    """Schema for creating a project.

    organization_id defaults to the caller's organization; a different value is rejected.
    """

    organization_id: UUID | None = None


class ProjectUpdate(BaseModel):
    """Schema for updating a project (all fields optional)."""

    name: str | None = None
    description: str | None = None
    project_type: ProjectType | None = None
    status: ProjectStatus | None = None
    client_name: str | None = None
    client_email: EmailStr | None = None
    client_phone: str | None = None
    project_address: str | None = None
    estimated_budget: Decimal | None = None
    actual_budget: Decimal | None = None
    start_date: date | None = None
    estimated_completion_date: date | None = None
    actual_completion_date: date | None = None
    project_manager_id: UUID | None = None


class ProjectResponse(ProjectBase):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
