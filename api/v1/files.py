"""Drawing, document and receipt uploads plus stored object downloads."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.policies import Operation, not_found
from api.tenancy import CallerContext
from models.document import DocumentResponse, DocumentUpdate
from models.drawing import DrawingResponse, DrawingUpdate
from services import files_service, storage

router = APIRouter()


class ReceiptUploadResponse(BaseModel):
    """Key of the stored receipt, for expenses.receipt_url."""

    bucket: str
    key: str


@router.get("/projects/{project_id}/drawings", response_model=List[DrawingResponse])
async def list_drawings_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await files_service.list_files(
        db, caller=caller, table="drawings", project_id=project_id
    )


@router.post(
    "/projects/{project_id}/drawings",
    response_model=DrawingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_drawing_endpoint(
    project_id: UUID,
    file: UploadFile = File(...),
    title: str = Form(...),
    category: str = Form(...),
    custom_category: str | None = Form(None),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Upload a drawing (multipart/form-data).

    The file is stored under the caller's organization prefix and the
    metadata row is created with it.
    """
    try:
        return await files_service.upload_file(
            db,
            caller=caller,
            table="drawings",
            project_id=project_id,
            file=file,
            title=title,
            category=category,
            custom_category=custom_category,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload drawing: {str(e)}",
        )


@router.put("/drawings/{drawing_id}", response_model=DrawingResponse)
async def update_drawing_endpoint(
    drawing_id: UUID,
    payload: DrawingUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await files_service.update_file(
            db, caller=caller, table="drawings", file_id=drawing_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update drawing: {str(e)}",
        )


@router.delete("/drawings/{drawing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_drawing_endpoint(
    drawing_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete a drawing and its stored file (admin or pm)."""
    try:
        await files_service.delete_file(db, caller=caller, table="drawings", file_id=drawing_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete drawing: {str(e)}",
        )


@router.get("/projects/{project_id}/documents", response_model=List[DocumentResponse])
async def list_documents_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await files_service.list_files(
        db, caller=caller, table="documents", project_id=project_id
    )


@router.post(
    "/projects/{project_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document_endpoint(
    project_id: UUID,
    file: UploadFile = File(...),
    title: str = Form(...),
    category: str = Form(...),
    description: str | None = Form(None),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Upload a document (multipart/form-data)."""
    try:
        return await files_service.upload_file(
            db,
            caller=caller,
            table="documents",
            project_id=project_id,
            file=file,
            title=title,
            category=category,
            description=description,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload document: {str(e)}",
        )


@router.put("/documents/{document_id}", response_model=DocumentResponse)
async def update_document_endpoint(
    document_id: UUID,
    payload: DocumentUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await files_service.update_file(
            db, caller=caller, table="documents", file_id=document_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update document: {str(e)}",
        )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document_endpoint(
    document_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete a document and its stored file (uploader, admin or pm)."""
    try:
        await files_service.delete_file(db, caller=caller, table="documents", file_id=document_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete document: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/receipts",
    response_model=ReceiptUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_receipt_endpoint(
    project_id: UUID,
    file: UploadFile = File(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Store a receipt; save the returned key in an expense's receipt_url."""
    try:
        key = await files_service.upload_receipt(
            db, caller=caller, project_id=project_id, file=file
        )
        return ReceiptUploadResponse(bucket="receipts", key=key)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload receipt: {str(e)}",
        )


@router.get("/storage/{bucket}/{key:path}")
async def download_object_endpoint(
    bucket: str,
    key: str,
    caller: CallerContext = Depends(get_caller),
):
    """
    Download a stored object.

    Raises:
        404 if the key is outside the caller's organization or missing.
    """
    storage.authorize_object(caller, Operation.SELECT, key)
    path = storage.object_path(bucket, key)
    if not path.is_file():
        raise not_found("storage_objects")
    return FileResponse(path, filename=path.name.split("_", 1)[-1])
