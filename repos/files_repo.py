"""Repository queries over the tables that point at stored objects."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.document import Document
from models.drawing import Drawing
from models.expense import Expense


async def object_keys_for_project(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_id: UUID,
) -> list[tuple[str, str]]:
    """(bucket, key) of every stored object referenced by a project's rows."""
    keys: list[tuple[str, str]] = []
    for bucket, column, model in (
        ("drawings", Drawing.file_url, Drawing),
        ("documents", Document.file_url, Document),
        ("receipts", Expense.receipt_url, Expense),
    ):
        result = await session.execute(
            select(column).where(
                model.organization_id == organization_id,
                model.project_id == project_id,
                column.is_not(None),
            )
        )
        keys.extend((bucket, key) for key in result.scalars().all())
    return keys
