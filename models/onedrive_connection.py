"""OneDriveConnection model - OAuth state and sync cursor for one organization."""

import enum
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

import config
from db import Base, utcnow


class OneDriveConnection(Base):
    """OneDriveConnection ORM model. At most one per organization."""

    __tablename__ = "onedrive_connections"

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
        unique=True,
        index=True,
    )
    # Profile that connected the drive; auto-imported projects are attributed to it
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    folder_path: Mapped[str | None] = mapped_column(
        String(1024), nullable=True, default=lambda: config.settings.ONEDRIVE_DEFAULT_FOLDER
    )
    sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_sync_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
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
class OneDriveConnectionResponse(BaseModel):
    """Schema for connection response. Tokens are never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    folder_path: str | None
    sync_enabled: bool
    last_sync_at: datetime | None
    token_expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


class SyncAction(str, enum.Enum):
    """Actions accepted by the sync endpoint."""

    GET_AUTH_URL = "get_auth_url"
    EXCHANGE_CODE = "exchange_code"
    SYNC_FILES = "sync_files"
    DISCONNECT = "disconnect"


class OneDriveSyncRequest(BaseModel):
    """Body of POST /onedrive-sync. camelCase keys are accepted too."""

    model_config = ConfigDict(populate_by_name=True)

    action: SyncAction
    code: str | None = None
    organization_id: UUID | None = Field(default=None, alias="organizationId")
    connection_id: UUID | None = Field(default=None, alias="connectionId")
    redirect_uri: str | None = Field(default=None, alias="redirectUri")
