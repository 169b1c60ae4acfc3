"""OneDrive sync endpoint and read-only views of the mirrored state."""

import logging
from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db, get_onedrive_client
from api.tenancy import CallerContext
from models.onedrive_connection import OneDriveConnectionResponse, OneDriveSyncRequest
from models.onedrive_file import OneDriveFileResponse
from services import onedrive_service
from services.onedrive_client import OneDriveClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_message(error: Exception) -> str:
    if isinstance(error, HTTPException):
        return str(error.detail)
    if isinstance(error, ValidationError):
        if any(err["loc"][:1] == ("action",) for err in error.errors()):
            return "Invalid action"
        return "Invalid request: " + "; ".join(err["msg"] for err in error.errors())
    return str(error)


@router.post("/onedrive-sync")
async def onedrive_sync_endpoint(
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    client: OneDriveClient = Depends(get_onedrive_client),
):
    """
    Run a OneDrive action: get_auth_url, exchange_code, sync_files or disconnect.

    Every failure, including access denials and upstream errors, is returned
    as 400 {"error": message}.
    """
    try:
        payload = OneDriveSyncRequest.model_validate(body)
        return await onedrive_service.handle_action(
            db,
            caller=caller,
            payload=payload,
            client=client,
        )
    except Exception as e:
        await db.rollback()
        logger.error("OneDrive sync error: %s", e)
        return JSONResponse(status_code=400, content={"error": _error_message(e)})


@router.get("/onedrive/connection", response_model=OneDriveConnectionResponse)
async def get_connection_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    The organization's OneDrive connection. Tokens are never returned.

    Raises:
        404 if OneDrive has not been connected.
    """
    return await onedrive_service.get_connection(db, caller=caller)


@router.get("/onedrive/files", response_model=List[OneDriveFileResponse])
async def list_files_endpoint(
    project_id: UUID | None = Query(None),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await onedrive_service.list_files(db, caller=caller, project_id=project_id)
