"""OneDrive integration: connect, disconnect and the file import batch."""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from db import utcnow
from models.onedrive_connection import (
    OneDriveConnection,
    OneDriveConnectionResponse,
    OneDriveSyncRequest,
    SyncAction,
)
from models.onedrive_file import OneDriveFile
from models.project import Project, ProjectStatus, ProjectType
from repos import base, onedrive_repo, organizations_repo, projects_repo
from services.common import target_organization
from services.filename_parser import get_file_type, parse_file_name
from services.onedrive_client import OneDriveClient, OneDriveError

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Counts for one sync batch."""

    files_seen: int = 0
    files_created: int = 0
    files_updated: int = 0
    projects_created: int = 0
    projects_linked: int = 0


async def get_connection(
    session: AsyncSession,
    *,
    caller: CallerContext,
    connection_id: UUID | None = None,
) -> OneDriveConnection:
    """
    The caller's organization connection, optionally checked against an ID.

    Raises:
        HTTPException: 404 if there is no visible connection
    """
    connection = await onedrive_repo.get_connection_for_organization(
        session, organization_id=caller.organization_id
    )
    if not connection or (connection_id is not None and connection.id != connection_id):
        raise not_found("onedrive_connections")
    authorize("onedrive_connections", Operation.SELECT, caller, connection)
    return connection


async def list_files(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID | None = None,
) -> list[OneDriveFile]:
    return await onedrive_repo.list_files(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )


async def _import_creator(session: AsyncSession, connection: OneDriveConnection) -> UUID | None:
    """Profile that auto-imported projects are attributed to."""
    if connection.created_by is not None:
        return connection.created_by
    admin = await organizations_repo.first_admin(
        session, organization_id=connection.organization_id
    )
    return admin.id if admin else None


async def sync_files(
    session: AsyncSession,
    *,
    caller: CallerContext,
    connection: OneDriveConnection,
    client: OneDriveClient,
) -> SyncResult:
    """
    Mirror the connection's folder and link files to projects.

    The listing is fetched once and files are processed in order, with one
    commit per file. Mirror rows are upserted by remote file ID. When a name
    parses into both a client and a project, the matching project is reused
    or created; existing projects are never modified. An upstream failure
    aborts the batch, leaving already committed files in place.

    Args:
        session: Database session
        caller: Caller context
        connection: Active connection of the caller's organization
        client: OneDrive HTTP client

    Returns:
        SyncResult with per-batch counts

    Raises:
        OneDriveError: If the listing cannot be fetched
    """
    if not connection.access_token or not connection.sync_enabled:
        raise OneDriveError("OneDrive connection is not active")

    folder_path = connection.folder_path or config.settings.ONEDRIVE_DEFAULT_FOLDER
    organization_id = connection.organization_id
    logger.info("Starting OneDrive sync for organization %s (%s)", organization_id, folder_path)

    remote_files = await client.list_folder(connection.access_token, folder_path)
    creator_id = await _import_creator(session, connection)
    result = SyncResult(files_seen=len(remote_files))

    for remote in remote_files:
        parsed = parse_file_name(remote.name)
        values: dict[str, Any] = {
            "file_name": remote.name,
            "file_path": f"{folder_path}/{remote.name}",
            "web_url": remote.web_url,
            "download_url": remote.download_url,
            "file_size": remote.size,
            "modified_at": remote.modified_at,
            "parsed_client_name": parsed.client_name,
            "parsed_project_name": parsed.project_name,
            "file_type": get_file_type(remote.name),
            "sync_status": "synced",
        }

        row = await onedrive_repo.get_file_by_remote_id(
            session,
            organization_id=organization_id,
            onedrive_file_id=remote.id,
        )
        if row:
            authorize("onedrive_files", Operation.UPDATE, caller, row)
            for field, value in values.items():
                setattr(row, field, value)
            result.files_updated += 1
        else:
            row = OneDriveFile(
                organization_id=organization_id,
                onedrive_file_id=remote.id,
                **values,
            )
            authorize("onedrive_files", Operation.INSERT, caller, row)
            session.add(row)
            result.files_created += 1

        if parsed.is_complete:
            project = await projects_repo.find_by_client_and_name(
                session,
                organization_id=organization_id,
                client_name=parsed.client_name,
                name=parsed.project_name,
            )
            if not project and creator_id is not None:
                project = Project(
                    organization_id=organization_id,
                    name=parsed.project_name,
                    client_name=parsed.client_name,
                    description=f"Auto-imported from OneDrive file: {remote.name}",
                    project_type=ProjectType.RESIDENTIAL_CONSTRUCTION.value,
                    status=ProjectStatus.PLANNING.value,
                    created_by=creator_id,
                )
                authorize("projects", Operation.INSERT, caller, project)
                project = await base.create(session, project)
                result.projects_created += 1
                logger.info(
                    "Created project '%s' for client '%s' from %s",
                    parsed.project_name,
                    parsed.client_name,
                    remote.name,
                )
            elif not project:
                logger.warning(
                    "No profile to attribute imported project to in organization %s",
                    organization_id,
                )
            if project:
                row.project_id = project.id
                result.projects_linked += 1

        await session.commit()

    connection.last_sync_at = utcnow()
    await session.commit()

    logger.info(
        "OneDrive sync finished: %d files (%d new), %d projects created",
        result.files_seen,
        result.files_created,
        result.projects_created,
    )
    return result


async def handle_action(
    session: AsyncSession,
    *,
    caller: CallerContext,
    payload: OneDriveSyncRequest,
    client: OneDriveClient,
) -> dict[str, Any]:
    """
    Run one action of the sync endpoint.

    Returns:
        {"auth_url": ...} for get_auth_url, {"success": True, "connection": ...}
        for exchange_code, {"success": True, ...} otherwise

    Raises:
        OneDriveError: For upstream failures and missing parameters
        HTTPException: For access-control denials
    """
    logger.info("OneDrive sync action: %s", payload.action.value)
    redirect_uri = payload.redirect_uri or config.settings.ONEDRIVE_REDIRECT_URI

    if payload.action is SyncAction.GET_AUTH_URL:
        organization_id = target_organization(caller, payload.organization_id)
        authorize(
            "onedrive_connections",
            Operation.INSERT,
            caller,
            OneDriveConnection(organization_id=organization_id),
        )
        return {"auth_url": client.build_authorize_url(redirect_uri, str(organization_id))}

    if payload.action is SyncAction.EXCHANGE_CODE:
        if not payload.code:
            raise OneDriveError("Missing authorization code")
        organization_id = target_organization(caller, payload.organization_id)

        connection = await onedrive_repo.get_connection_for_organization(
            session, organization_id=organization_id
        )
        if connection:
            authorize("onedrive_connections", Operation.UPDATE, caller, connection)
        else:
            connection = OneDriveConnection(
                organization_id=organization_id,
                created_by=caller.profile_id,
                folder_path=config.settings.ONEDRIVE_DEFAULT_FOLDER,
            )
            authorize("onedrive_connections", Operation.INSERT, caller, connection)
            session.add(connection)

        grant = await client.exchange_code(payload.code, redirect_uri)
        connection.access_token = grant.access_token
        connection.refresh_token = grant.refresh_token
        connection.token_expires_at = grant.expires_at
        connection.sync_enabled = True
        await session.commit()
        await session.refresh(connection)

        await sync_files(session, caller=caller, connection=connection, client=client)
        await session.refresh(connection)
        return {
            "success": True,
            "connection": OneDriveConnectionResponse.model_validate(connection).model_dump(mode="json"),
        }

    connection = await get_connection(session, caller=caller, connection_id=payload.connection_id)

    if payload.action is SyncAction.SYNC_FILES:
        authorize("onedrive_connections", Operation.UPDATE, caller, connection)
        result = await sync_files(session, caller=caller, connection=connection, client=client)
        return {
            "success": True,
            "files_synced": result.files_seen,
            "projects_created": result.projects_created,
        }

    authorize("onedrive_connections", Operation.UPDATE, caller, connection)
    connection.access_token = None
    connection.refresh_token = None
    connection.sync_enabled = False
    await session.commit()
    return {"success": True}

