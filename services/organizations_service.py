"""Service layer for signup, organizations and profiles."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.organization import Organization, OrganizationUpdate
from models.profile import Profile, ProfileCreate, ProfileUpdate, Role
from models.project import Project
from models.user import User
from repos import base, organizations_repo, projects_repo
from services.common import apply_updates, target_organization, translate_integrity_errors

logger = logging.getLogger(__name__)


def organization_name_for(email: str) -> str:
    return f"{email}'s Organization"


async def signup(
    session: AsyncSession,
    *,
    email: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> Profile:
    """
    Create a user together with a new organization and an admin profile.

    All three rows are written in one transaction.

    Args:
        session: Database session
        email: Email of the new user
        first_name: Optional first name
        last_name: Optional last name

    Returns:
        The admin profile of the new organization

    Raises:
        HTTPException: 409 if the email is already registered
    """
    email = email.lower()
    if await organizations_repo.get_user_by_email(session, email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User with email '{email}' already exists",
        )

    async with translate_integrity_errors(
        session, conflict_detail=f"User with email '{email}' already exists"
    ):
        user = await base.create(
            session,
            User(email=email, first_name=first_name, last_name=last_name),
        )
        organization = await base.create(
            session,
            Organization(name=organization_name_for(email)),
        )
        profile = await base.create(
            session,
            Profile(
                user_id=user.id,
                organization_id=organization.id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=Role.ADMIN.value,
            ),
        )
        await session.commit()

    logger.info("Provisioned organization %s for new user %s", organization.id, user.id)
    await session.refresh(profile)
    return profile


async def get_my_profile(session: AsyncSession, *, caller: CallerContext) -> Profile:
    profile = await organizations_repo.get_profile(
        session,
        organization_id=caller.organization_id,
        profile_id=caller.profile_id,
    )
    if not profile:
        raise not_found("profiles")
    return profile


async def list_profiles(session: AsyncSession, *, caller: CallerContext) -> list[Profile]:
    return await organizations_repo.list_profiles(
        session, organization_id=caller.organization_id
    )


async def get_profile(
    session: AsyncSession,
    *,
    caller: CallerContext,
    profile_id: UUID,
) -> Profile:
    profile = await organizations_repo.get_profile(
        session,
        organization_id=caller.organization_id,
        profile_id=profile_id,
    )
    if not profile:
        raise not_found("profiles")
    authorize("profiles", Operation.SELECT, caller, profile)
    return profile


async def create_profile(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: ProfileCreate,
) -> Profile:
    """
    Add a user to an organization (admin only).

    Creates the user record if the email is not yet known.

    Raises:
        HTTPException: 403 if not admin or wrong organization, 409 if the user
            already has a profile
    """
    email = payload.email.lower()
    profile = Profile(
        organization_id=target_organization(caller, payload.organization_id),
        email=email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role.value,
    )
    authorize("profiles", Operation.INSERT, caller, profile)

    user = await organizations_repo.get_user_by_email(session, email)
    if user and await organizations_repo.get_profile_for_user(session, user.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User '{email}' already belongs to an organization",
        )

    async with translate_integrity_errors(
        session, conflict_detail=f"User '{email}' already belongs to an organization"
    ):
        if not user:
            user = await base.create(
                session,
                User(email=email, first_name=payload.first_name, last_name=payload.last_name),
            )
        profile.user_id = user.id
        profile = await base.create(session, profile)
        await session.commit()

    await session.refresh(profile)
    return profile


async def update_profile(
    session: AsyncSession,
    *,
    caller: CallerContext,
    profile_id: UUID,
    payload: ProfileUpdate,
) -> Profile:
    """
    Update a profile. Users may edit their own names; only admins change roles.

    Raises:
        HTTPException: 404 if not visible, 403 if not permitted
    """
    profile = await get_profile(session, caller=caller, profile_id=profile_id)
    authorize("profiles", Operation.UPDATE, caller, profile)

    if payload.role is not None and payload.role.value != profile.role:
        if not caller.has_role(Role.ADMIN):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only admins can change roles",
            )

    apply_updates(profile, payload)
    await session.commit()
    await session.refresh(profile)
    return profile


async def delete_profile(
    session: AsyncSession,
    *,
    caller: CallerContext,
    profile_id: UUID,
) -> None:
    profile = await get_profile(session, caller=caller, profile_id=profile_id)
    authorize("profiles", Operation.DELETE, caller, profile)

    # Projects, tasks, time entries and uploads keep a reference to their author
    try:
        await base.delete(session, profile)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile is still referenced by records it created",
        )


async def get_my_organization(session: AsyncSession, *, caller: CallerContext) -> Organization:
    organization = await organizations_repo.get_organization(session, caller.organization_id)
    if not organization:
        raise not_found("organizations")
    return organization


async def update_organization(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: OrganizationUpdate,
) -> Organization:
    organization = await get_my_organization(session, caller=caller)
    authorize("organizations", Operation.UPDATE, caller, organization)

    apply_updates(organization, payload)
    await session.commit()
    await session.refresh(organization)
    return organization


async def delete_organization(session: AsyncSession, *, caller: CallerContext) -> None:
    """
    Delete the caller's organization and everything it owns.

    Projects are deleted first: they reference their creator profile with
    ON DELETE RESTRICT, so the profiles can only go once the projects are gone.
    Every other organization-scoped row cascades through its foreign keys.
    """
    organization = await get_my_organization(session, caller=caller)
    authorize("organizations", Operation.DELETE, caller, organization)

    project_ids = await projects_repo.list_ids(session, organization_id=organization.id)
    for project_id in project_ids:
        project = await session.get(Project, project_id)
        await base.delete(session, project)

    await base.delete(session, organization)
    await session.commit()

    logger.info(
        "Deleted organization %s with %d projects", organization.id, len(project_ids)
    )
