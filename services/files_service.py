"""Service layer for project drawings and documents backed by blob storage."""

import logging
from typing import Any
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.document import Document, DocumentUpdate
from models.drawing import Drawing, DrawingUpdate
from repos import base
from services import storage
from services.common import apply_updates, visible_project

logger = logging.getLogger(__name__)

# table name -> (model, bucket)
FILE_TABLES: dict[str, tuple[type, str]] = {
    "drawings": (Drawing, "drawings"),
    "documents": (Document, "documents"),
}


async def list_files(
    session: AsyncSession,
    *,
    caller: CallerContext,
    table: str,
    project_id: UUID,
) -> list[Any]:
    model, _ = FILE_TABLES[table]
    await visible_project(session, caller, project_id)
    return await base.list_scoped(
        session,
        model,
        organization_id=caller.organization_id,
        order_by=model.created_at.desc(),
        project_id=project_id,
    )


async def get_file(
    session: AsyncSession,
    *,
    caller: CallerContext,
    table: str,
    file_id: UUID,
) -> Any:
    model, _ = FILE_TABLES[table]
    row = await base.get_scoped(
        session, model, organization_id=caller.organization_id, record_id=file_id
    )
    if not row:
        raise not_found(table)
    authorize(table, Operation.SELECT, caller, row)
    return row


async def upload_file(
    session: AsyncSession,
    *,
    caller: CallerContext,
    table: str,
    project_id: UUID,
    file: UploadFile,
    **fields: Any,
) -> Any:
    """
    Store an uploaded file and create its metadata row.

    The object is written first; if the row cannot be committed the object
    is removed again.

    Args:
        session: Database session
        caller: Caller context
        table: "drawings" or "documents"
        project_id: Project the file belongs to
        file: Uploaded file
        **fields: Row fields such as title, category, description

    Returns:
        The created Drawing or Document
    """
    model, bucket = FILE_TABLES[table]
    project = await visible_project(session, caller, project_id)

    file_name = file.filename or "upload"
    key = storage.generate_object_key(caller.organization_id, project.id, file_name)
    storage.authorize_object(caller, Operation.INSERT, key)

    row = model(
        project_id=project.id,
        organization_id=caller.organization_id,
        file_name=file_name,
        file_url=key,
        file_type=file.content_type or "application/octet-stream",
        uploaded_by=caller.profile_id,
        **fields,
    )
    authorize(table, Operation.INSERT, caller, row)

    row.file_size = await storage.save_object(bucket, key, file)
    try:
        row = await base.create(session, row)
        await session.commit()
    except Exception:
        await session.rollback()
        storage.delete_object(bucket, key)
        raise

    logger.info("Stored %s object %s (%d bytes)", bucket, key, row.file_size)
    await session.refresh(row)
    return row


async def update_file(
    session: AsyncSession,
    *,
    caller: CallerContext,
    table: str,
    file_id: UUID,
    payload: DrawingUpdate | DocumentUpdate,
) -> Any:
    row = await get_file(session, caller=caller, table=table, file_id=file_id)
    authorize(table, Operation.UPDATE, caller, row)

    apply_updates(row, payload)
    await session.commit()
    await session.refresh(row)
    return row


async def delete_file(
    session: AsyncSession,
    *,
    caller: CallerContext,
    table: str,
    file_id: UUID,
) -> None:
    """Delete the metadata row and then its stored object."""
    _, bucket = FILE_TABLES[table]
    row = await get_file(session, caller=caller, table=table, file_id=file_id)
    authorize(table, Operation.DELETE, caller, row)

    key = row.file_url
    await base.delete(session, row)
    await session.commit()

    if storage.is_object_visible(caller, key):
        storage.delete_object(bucket, key)


async def upload_receipt(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    file: UploadFile,
) -> str:
    """
    Store a receipt and return its key, to be saved in expenses.receipt_url.
    """
    project = await visible_project(session, caller, project_id)
    key = storage.generate_object_key(caller.organization_id, project.id, file.filename or "receipt")
    storage.authorize_object(caller, Operation.INSERT, key)

    await storage.save_object("receipts", key, file)
    return key
