"""Repository for OneDrive connection and mirrored file rows."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.onedrive_connection import OneDriveConnection
from models.onedrive_file import OneDriveFile


async def get_connection_for_organization(
    session: AsyncSession,
    *,
    organization_id: UUID,
) -> OneDriveConnection | None:
    result = await session.execute(
        select(OneDriveConnection).where(
            OneDriveConnection.organization_id == organization_id
        )
    )
    return result.scalar_one_or_none()


async def get_file_by_remote_id(
    session: AsyncSession,
    *,
    organization_id: UUID,
    onedrive_file_id: str,
) -> OneDriveFile | None:
    result = await session.execute(
        select(OneDriveFile).where(
            OneDriveFile.organization_id == organization_id,
            OneDriveFile.onedrive_file_id == onedrive_file_id,
        )
    )
    return result.scalar_one_or_none()


async def list_files(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_id: UUID | None = None,
) -> list[OneDriveFile]:
    query = select(OneDriveFile).where(OneDriveFile.organization_id == organization_id)
    if project_id is not None:
        query = query.where(OneDriveFile.project_id == project_id)
    query = query.order_by(OneDriveFile.modified_at.desc(), OneDriveFile.file_name)

    result = await session.execute(query)
    return [row for row in result.scalars().all()]
