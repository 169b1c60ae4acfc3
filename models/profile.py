"""Profile model - a user's membership in exactly one organization."""

import enum
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr
from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base, utcnow


class Role(str, enum.Enum):
    """Profile role within an organization."""

    ADMIN = "admin"
    PM = "pm"
    DESIGNER = "designer"
    ACCOUNTANT = "accountant"


class Profile(Base):
    """Profile ORM model - links a user to an organization with a role."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    organization_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=Role.DESIGNER.value)
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
class ProfileCreate(BaseModel):
    """Schema for inviting a user into the caller's organization.

    organization_id is optional; when given it must be the caller's own.
    """

    email: EmailStr
    first_name: str | None = None
    last_name: str | None = None
    role: Role = Role.DESIGNER
    organization_id: UUID | None = None


class ProfileUpdate(BaseModel):
    """Schema for updating a profile (all fields optional)."""

    first_name: str | None = None
    last_name: str | None = None
    role: Role | None = None


class ProfileResponse(BaseModel):
    """Schema for profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    organization_id: UUID
    email: str
    first_name: str | None
    last_name: str | None
    role: Role
    created_at: datetime
    updated_at: datetime
