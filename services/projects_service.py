"""Service layer for Project business logic."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.project import Project, ProjectCreate, ProjectUpdate
from repos import base, files_repo, organizations_repo, projects_repo
from services import storage
from services.common import apply_updates, target_organization


async def _check_project_manager(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_manager_id: UUID | None,
) -> None:
    if project_manager_id is None:
        return
    manager = await organizations_repo.get_profile(
        session,
        organization_id=organization_id,
        profile_id=project_manager_id,
    )
    if not manager:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project manager must belong to the same organization",
        )


async def list_projects(
    session: AsyncSession,
    *,
    caller: CallerContext,
    status_filter: str | None = None,
    active: bool | None = None,
) -> list[Project]:
    """
    List projects of the caller's organization.

    Args:
        session: Database session
        caller: Caller context
        status_filter: Only projects in this status
        active: True for open projects, False for completed or cancelled ones

    Returns:
        List of projects
    """
    return await projects_repo.list_projects(
        session,
        organization_id=caller.organization_id,
        status=status_filter,
        active=active,
    )


async def get_project(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> Project:
    """
    Get a project by ID.

    Raises:
        HTTPException: 404 if project not found
    """
    project = await projects_repo.get_by_id(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )

    if not project:
        raise not_found("projects")

    authorize("projects", Operation.SELECT, caller, project)
    return project


async def create_project(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: ProjectCreate,
) -> Project:
    """
    Create a new project owned by the caller's profile.

    Args:
        session: Database session
        caller: Caller context
        payload: Project creation data

    Returns:
        Created project
    """
    data = payload.model_dump(mode="python", exclude={"organization_id"})
    project = Project(
        **{key: getattr(value, "value", value) for key, value in data.items()},
        organization_id=target_organization(caller, payload.organization_id),
        created_by=caller.profile_id,
    )
    authorize("projects", Operation.INSERT, caller, project)

    await _check_project_manager(
        session,
        organization_id=caller.organization_id,
        project_manager_id=payload.project_manager_id,
    )

    created_project = await base.create(session, project)
    await session.commit()
    await session.refresh(created_project)

    return created_project


async def update_project(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: ProjectUpdate,
) -> Project:
    """
    Update an existing project (admin or pm).

    Args:
        session: Database session
        caller: Caller context
        project_id: Project ID to update
        payload: Project update data (only provided fields will be updated)

    Returns:
        Updated project

    Raises:
        HTTPException: 404 if project not found, 403 if role not permitted
    """
    project = await get_project(session, caller=caller, project_id=project_id)
    authorize("projects", Operation.UPDATE, caller, project)

    if "project_manager_id" in payload.model_fields_set:
        await _check_project_manager(
            session,
            organization_id=caller.organization_id,
            project_manager_id=payload.project_manager_id,
        )

    apply_updates(project, payload)

    await session.commit()
    await session.refresh(project)

    return project


async def delete_project(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> None:
    """Delete a project; its tasks, invoices, expenses and files go with it."""
    project = await get_project(session, caller=caller, project_id=project_id)
    authorize("projects", Operation.DELETE, caller, project)

    object_keys = await files_repo.object_keys_for_project(
        session,
        organization_id=caller.organization_id,
        project_id=project.id,
    )

    await base.delete(session, project)
    await session.commit()

    for bucket, key in object_keys:
        if storage.is_object_visible(caller, key):
            storage.delete_object(bucket, key)
