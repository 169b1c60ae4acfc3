"""Repository for organizations, users and profiles."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.organization import Organization
from models.profile import Profile
from models.user import User


async def get_organization(session: AsyncSession, organization_id: UUID) -> Organization | None:
    result = await session.execute(
        select(Organization).where(Organization.id == organization_id)
    )
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_profile_for_user(session: AsyncSession, user_id: UUID) -> Profile | None:
    result = await session.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_profile(
    session: AsyncSession,
    *,
    organization_id: UUID,
    profile_id: UUID,
) -> Profile | None:
    """
    Get a profile by ID within one organization.

    Args:
        session: Database session
        organization_id: Organization to filter by
        profile_id: Profile ID to fetch

    Returns:
        Profile if found, None otherwise
    """
    result = await session.execute(
        select(Profile).where(
            Profile.id == profile_id,
            Profile.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_profiles(session: AsyncSession, *, organization_id: UUID) -> list[Profile]:
    result = await session.execute(
        select(Profile)
        .where(Profile.organization_id == organization_id)
        .order_by(Profile.created_at)
    )
    return [profile for profile in result.scalars().all()]


async def first_admin(session: AsyncSession, *, organization_id: UUID) -> Profile | None:
    """Oldest admin profile of an organization."""
    result = await session.execute(
        select(Profile)
        .where(
            Profile.organization_id == organization_id,
            Profile.role == "admin",
        )
        .order_by(Profile.created_at)
        .limit(1)
    )
    return result.scalar_one_or_none()
