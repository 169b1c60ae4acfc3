"""Helpers shared by the domain services."""

from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from repos import projects_repo

UNIQUE_PATTERNS = (
    "unique constraint",
    "duplicate key",
    "violates unique constraint",
    "already exists",
)


def apply_updates(obj: Any, payload: BaseModel) -> dict[str, Any]:
    """
    Copy the fields the client actually sent onto an ORM object.

    An explicit null on a NOT NULL column leaves the column unchanged, the
    same as omitting the field. Nullable columns can be cleared with null.

    Returns:
        The applied field values
    """
    columns = inspect(obj).mapper.columns
    changes = {}
    for field, value in payload.model_dump(exclude_unset=True).items():
        column = columns.get(field)
        if value is None and column is not None and not column.nullable:
            continue
        setattr(obj, field, getattr(value, "value", value))
        changes[field] = value
    return changes


def target_organization(caller: CallerContext, requested: UUID | None) -> UUID:
    """Organization a new row is written to: the declared one, else the caller's."""
    return requested if requested is not None else caller.organization_id


async def visible_project(session: AsyncSession, caller: CallerContext, project_id: UUID):
    """
    Load a project the caller can see.

    Raises:
        HTTPException: 404 if missing or in another organization
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


def integrity_error_to_http(e: IntegrityError, *, conflict_detail: str) -> HTTPException:
    """
    Translate a constraint violation into a client error.

    Uniqueness violations become 409 with `conflict_detail`; foreign key and
    check violations become 422 naming the violated rule.
    """
    error_str = str(e.orig) if hasattr(e, "orig") else str(e)
    error_msg_lower = error_str.lower()

    # PostgreSQL error code for unique violation (23505)
    is_unique_violation = getattr(getattr(e, "orig", None), "pgcode", None) == "23505"

    if is_unique_violation or any(pattern in error_msg_lower for pattern in UNIQUE_PATTERNS):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict_detail)

    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Constraint violation: {error_str}",
    )


@asynccontextmanager
async def translate_integrity_errors(session: AsyncSession, *, conflict_detail: str):
    """Roll back and re-raise constraint violations from the wrapped block as HTTP errors."""
    try:
        yield
    except IntegrityError as e:
        await session.rollback()
        raise integrity_error_to_http(e, conflict_detail=conflict_detail)
