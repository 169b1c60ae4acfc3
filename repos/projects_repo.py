"""Repository for Project database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.project import CLOSED_STATUSES, Project


async def get_by_id(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_id: UUID,
) -> Project | None:
    """
    Get a project by ID.

    Args:
        session: Database session
        organization_id: Organization to filter by
        project_id: Project ID to fetch

    Returns:
        Project if found, None otherwise
    """
    query = select(Project).where(
        Project.id == project_id,
        Project.organization_id == organization_id,
    )

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def list_projects(
    session: AsyncSession,
    *,
    organization_id: UUID,
    status: str | None = None,
    active: bool | None = None,
) -> list[Project]:
    """
    List projects for an organization, newest first.

    Args:
        session: Database session
        organization_id: Organization to filter by
        status: Only projects in this status
        active: True for open projects, False for completed/cancelled ones

    Returns:
        List of projects
    """
    query = select(Project).where(Project.organization_id == organization_id)

    if status is not None:
        query = query.where(Project.status == status)
    if active is True:
        query = query.where(Project.status.not_in(CLOSED_STATUSES))
    elif active is False:
        query = query.where(Project.status.in_(CLOSED_STATUSES))

    query = query.order_by(Project.created_at.desc())

    result = await session.execute(query)
    return [project for project in result.scalars().all()]


async def find_by_client_and_name(
    session: AsyncSession,
    *,
    organization_id: UUID,
    client_name: str,
    name: str,
) -> Project | None:
    """First project in the organization matching (client_name, name) exactly."""
    result = await session.execute(
        select(Project)
        .where(
            Project.organization_id == organization_id,
            Project.client_name == client_name,
            Project.name == name,
        )
        .order_by(Project.created_at)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_ids(session: AsyncSession, *, organization_id: UUID) -> list[UUID]:
    result = await session.execute(
        select(Project.id).where(Project.organization_id == organization_id)
    )
    return [project_id for project_id in result.scalars().all()]
