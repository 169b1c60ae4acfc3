"""OneDriveFile model - local mirror of one remote OneDrive file."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import BigInteger, String, Text, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class OneDriveFile(Base):
    """OneDriveFile ORM model, keyed by (organization, remote file id)."""

    __tablename__ = "onedrive_files"

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
    project_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    onedrive_file_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    web_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    download_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    modified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    parsed_client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parsed_project_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sync_status: Mapped[str | None] = mapped_column(String(50), nullable=True, default="synced")
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
        UniqueConstraint("organization_id", "onedrive_file_id", name="uq_onedrive_file_org_remote_id"),
    )


# Pydantic schemas
class OneDriveFileResponse(BaseModel):
    """Schema for mirrored file response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    project_id: UUID | None
    onedrive_file_id: str
    file_name: str
    file_path: str
    web_url: str | None
    download_url: str | None
    file_size: int | None
    modified_at: datetime | None
    parsed_client_name: str | None
    parsed_project_name: str | None
    file_type: str | None
    sync_status: str | None
    created_at: datetime
    updated_at: datetime
