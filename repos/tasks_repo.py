"""Repository for tasks and task assignments."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.task import Task
from models.task_assignment import TaskAssignment

CENTS = Decimal("0.01")


async def list_for_project(
    session: AsyncSession,
    *,
    organization_id: UUID,
    project_id: UUID,
) -> list[Task]:
    result = await session.execute(
        select(Task)
        .where(
            Task.organization_id == organization_id,
            Task.project_id == project_id,
        )
        .order_by(Task.created_at)
    )
    return [task for task in result.scalars().all()]


async def get_assignment(
    session: AsyncSession,
    *,
    organization_id: UUID,
    assignment_id: UUID,
) -> TaskAssignment | None:
    """
    Get an assignment by ID, scoped through its task's organization.

    Args:
        session: Database session
        organization_id: Organization to filter by
        assignment_id: Assignment ID to fetch

    Returns:
        TaskAssignment if found, None otherwise
    """
    result = await session.execute(
        select(TaskAssignment)
        .join(Task, Task.id == TaskAssignment.task_id)
        .where(
            TaskAssignment.id == assignment_id,
            Task.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_assignments(
    session: AsyncSession,
    *,
    organization_id: UUID,
    task_id: UUID,
) -> list[TaskAssignment]:
    result = await session.execute(
        select(TaskAssignment)
        .join(Task, Task.id == TaskAssignment.task_id)
        .where(
            TaskAssignment.task_id == task_id,
            Task.organization_id == organization_id,
        )
        .order_by(TaskAssignment.date_worked, TaskAssignment.created_at)
    )
    return [assignment for assignment in result.scalars().all()]


async def sum_assignments(session: AsyncSession, task_id: UUID) -> tuple[Decimal, Decimal]:
    """Total (hours_spent, cost_incurred) over all assignments of a task."""
    result = await session.execute(
        select(
            func.coalesce(func.sum(TaskAssignment.hours_spent), 0),
            func.coalesce(func.sum(TaskAssignment.cost_incurred), 0),
        ).where(TaskAssignment.task_id == task_id)
    )
    hours, cost = result.one()
    return Decimal(str(hours)).quantize(CENTS), Decimal(str(cost)).quantize(CENTS)
