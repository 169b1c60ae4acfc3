"""Shared tenant-scoped query helpers used by the entity repositories."""

from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import Base

ModelT = TypeVar("ModelT", bound=Base)


async def get_scoped(
    session: AsyncSession,
    model: type[ModelT],
    *,
    organization_id: UUID,
    record_id: UUID,
) -> ModelT | None:
    """
    Get a row by ID within one organization.

    Args:
        session: Database session
        model: ORM model with an organization_id column
        organization_id: Organization to filter by
        record_id: Row ID to fetch

    Returns:
        The row if it exists in that organization, None otherwise
    """
    result = await session.execute(
        select(model).where(
            model.id == record_id,
            model.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_scoped(
    session: AsyncSession,
    model: type[ModelT],
    *,
    organization_id: UUID,
    order_by: Any = None,
    **filters: Any,
) -> list[ModelT]:
    """
    List rows of one organization, optionally filtered by column equality.

    None-valued filters are ignored.
    """
    query = select(model).where(model.organization_id == organization_id)
    for column, value in filters.items():
        if value is not None:
            query = query.where(getattr(model, column) == value)
    if order_by is not None:
        query = query.order_by(order_by)

    result = await session.execute(query)
    return [row for row in result.scalars().all()]


async def create(session: AsyncSession, obj: ModelT) -> ModelT:
    """
    Add a new row and flush it so defaults are populated.

    The caller owns the transaction and commits.
    """
    session.add(obj)
    await session.flush()
    await session.refresh(obj)
    return obj


async def delete(session: AsyncSession, obj: Base) -> None:
    """Delete a row. Child rows are removed by ON DELETE CASCADE."""
    await session.delete(obj)
    await session.flush()
