"""Blob storage for uploaded drawings, documents and receipts (local disk)."""

import re
import time
from pathlib import Path
from uuid import UUID

from fastapi import HTTPException, UploadFile, status

import config
from api.policies import Operation, authorize, is_allowed, object_organization
from api.tenancy import CallerContext

BUCKETS = ("documents", "drawings", "receipts")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Reduce a client-supplied file name to a safe single path segment."""
    name = filename.replace("/", "_").replace("\\", "_").replace("..", "_")
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "file"


def generate_object_key(
    organization_id: UUID,
    project_id: UUID,
    filename: str,
) -> str:
    """
    Generate a storage key for an upload.

    Args:
        organization_id: Organization owning the object
        project_id: Project the object belongs to
        filename: Original filename (will be sanitized)

    Returns:
        Key of the form "{organization_id}/{project_id}/{timestamp}_{filename}"
    """
    timestamp = int(time.time() * 1000)
    return f"{organization_id}/{project_id}/{timestamp}_{sanitize_filename(filename)}"


def object_path(bucket: str, key: str) -> Path:
    """
    Resolve a bucket/key pair to a path under STORAGE_DIR.

    Raises:
        HTTPException: 400 for unknown buckets or keys escaping the bucket
    """
    if bucket not in BUCKETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown bucket '{bucket}'",
        )

    bucket_dir = (Path(config.settings.STORAGE_DIR) / bucket).resolve()
    full_path = (bucket_dir / key).resolve()
    if bucket_dir not in full_path.parents:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid object key",
        )
    return full_path


def authorize_object(caller: CallerContext, operation: Operation, key: str) -> None:
    """Objects are visible only to the organization named by the key's first segment."""
    authorize(
        "storage_objects",
        operation,
        caller,
        key,
        organization_id=object_organization(key),
    )


def is_object_visible(caller: CallerContext, key: str) -> bool:
    return is_allowed(
        "storage_objects",
        Operation.SELECT,
        caller,
        key,
        organization_id=object_organization(key),
    )


async def save_object(bucket: str, key: str, file: UploadFile) -> int:
    """
    Save an uploaded file to local disk.

    Args:
        bucket: Bucket name
        key: Object key within the bucket
        file: FastAPI UploadFile object

    Returns:
        Number of bytes written

    Raises:
        OSError: If directory creation or file write fails
    """
    full_path = object_path(bucket, key)

    # Create parent directories if they don't exist
    full_path.parent.mkdir(parents=True, exist_ok=True)

    content = await file.read()
    with open(full_path, "wb") as f:
        bytes_written = f.write(content)

    return bytes_written


def delete_object(bucket: str, key: str) -> None:
    """
    Delete an object from storage. Missing objects are ignored.

    Raises:
        OSError: If file deletion fails
    """
    full_path = object_path(bucket, key)

    if full_path.exists():
        full_path.unlink()
