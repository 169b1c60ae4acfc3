"""ProjectProposal model - the proposal document for a project."""

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import JSON, String, Text, Date, DateTime, ForeignKey, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class ProjectProposal(Base):
    """ProjectProposal ORM model."""

    __tablename__ = "project_proposals"

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
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="PROJECT PROPOSAL")
    work_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    scope_of_work: Mapped[list | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )
    project_lead: Mapped[str | None] = mapped_column(String(255), nullable=True)
    site_engineer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    supervisor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    proposal_file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    proposal_file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    approval_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    approval_status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
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
class ProjectProposalBase(BaseModel):
    """Base proposal schema."""

    title: str = "PROJECT PROPOSAL"
    work_summary: str | None = "Work summary to be provided."
    scope_of_work: list[str] | None = None
    project_lead: str | None = "TBD"
    site_engineer: str | None = "TBD"
    supervisor: str | None = "TBD"
    additional_notes: str | None = None
    proposal_file_url: str | None = None
    proposal_file_name: str | None = None
    approved_by: str | None = None
    approval_date: date | None = None
    approval_status: str = "pending"


class ProjectProposalCreate(ProjectProposalBase):
    """Schema for creating a proposal under a project."""

    organization_id: UUID | None = None


class ProjectProposalUpdate(BaseModel):
    """Schema for updating a proposal (all fields optional)."""

    title: str | None = None
    work_summary: str | None = None
    scope_of_work: list[str] | None = None
    project_lead: str | None = None
    site_engineer: str | None = None
    supervisor: str | None = None
    additional_notes: str | None = None
    proposal_file_url: str | None = None
    proposal_file_name: str | None = None
    approved_by: str | None = None
    approval_date: date | None = None
    approval_status: str | None = None


class ProjectProposalResponse(ProjectProposalBase):
    """Schema for proposal response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    organization_id: UUID
    created_at: datetime
    updated_at: datetime
