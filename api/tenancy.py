"""Caller context and organization resolution for tenant-scoped operations."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile, Role


class CallerContext:
    """Resolved identity of the caller for one request."""

    def __init__(self, user_id: UUID, profile_id: UUID, organization_id: UUID, role: str):
        """
        Initialize caller context.

        Args:
            user_id: Authenticated user ID (token subject)
            profile_id: Profile.id of the caller
            organization_id: Resolved organization of the caller's profile
            role: Caller's role in that organization
        """
        self.user_id = user_id
        self.profile_id = profile_id
        self.organization_id = organization_id
        self.role = role

    def has_role(self, *roles: Role) -> bool:
        """Return True if the caller holds any of the given roles."""
        return self.role in {r.value for r in roles}

    @classmethod
    def from_profile(cls, profile: Profile) -> "CallerContext":
        return cls(
            user_id=profile.user_id,
            profile_id=profile.id,
            organization_id=profile.organization_id,
            role=profile.role,
        )

    def __repr__(self) -> str:
        return (
            f"CallerContext(user_id={self.user_id}, organization_id={self.organization_id}, "
            f"role={self.role})"
        )


async def get_caller_profile(session: AsyncSession, user_id: UUID) -> Profile | None:
    """
    Look up the caller's own profile.

    This is a direct read of the profiles table. It must never be routed
    through the policy checks in api.policies: profile visibility itself
    depends on the organization this lookup returns.

    Args:
        session: Database session
        user_id: Authenticated user ID

    Returns:
        Profile if the user has one, None otherwise
    """
    result = await session.execute(
        select(Profile).where(Profile.user_id == user_id).limit(1)
    )
    return result.scalar_one_or_none()


async def resolve_organization_id(session: AsyncSession, user_id: UUID) -> UUID | None:
    """Return the organization id of the user's profile, or None if there is no profile."""
    profile = await get_caller_profile(session, user_id)
    return profile.organization_id if profile else None


async def resolve_caller(session: AsyncSession, user_id: UUID) -> CallerContext:
    """
    Build the CallerContext for an authenticated user.

    Args:
        session: Database session
        user_id: Authenticated user ID

    Returns:
        CallerContext with organization and role resolved

    Raises:
        HTTPException: 403 if the user has no profile (no organization)
    """
    profile = await get_caller_profile(session, user_id)

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No profile found. User must belong to an organization.",
        )

    return CallerContext.from_profile(profile)
