"""Service layer for tasks and task assignments (time entries)."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.task import Task, TaskCreate, TaskUpdate
from models.task_assignment import TaskAssignment, TaskAssignmentCreate, TaskAssignmentUpdate
from repos import base, tasks_repo
from services.common import apply_updates, target_organization, translate_integrity_errors, visible_project

DUPLICATE_ASSIGNMENT = "A time entry for this task, user and date already exists"


async def list_tasks(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> list[Task]:
    await visible_project(session, caller, project_id)
    return await tasks_repo.list_for_project(
        session,
        organization_id=caller.organization_id,
        project_id=project_id,
    )


async def get_task(session: AsyncSession, *, caller: CallerContext, task_id: UUID) -> Task:
    task = await base.get_scoped(
        session, Task, organization_id=caller.organization_id, record_id=task_id
    )
    if not task:
        raise not_found("tasks")
    authorize("tasks", Operation.SELECT, caller, task)
    return task


async def create_task(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: TaskCreate,
) -> Task:
    project = await visible_project(session, caller, project_id)

    task = Task(
        project_id=project.id,
        organization_id=target_organization(caller, payload.organization_id),
        name=payload.name,
        description=payload.description,
        status=payload.status.value,
        estimated_hours=payload.estimated_hours,
        estimated_cost=payload.estimated_cost,
        created_by=caller.profile_id,
    )
    authorize("tasks", Operation.INSERT, caller, task)

    task = await base.create(session, task)
    await session.commit()
    await session.refresh(task)
    return task


async def update_task(
    session: AsyncSession,
    *,
    caller: CallerContext,
    task_id: UUID,
    payload: TaskUpdate,
) -> Task:
    """Update a task. Allowed for its creator, admins and project managers."""
    task = await get_task(session, caller=caller, task_id=task_id)
    authorize("tasks", Operation.UPDATE, caller, task)

    apply_updates(task, payload)
    await session.commit()
    await session.refresh(task)
    return task


async def delete_task(session: AsyncSession, *, caller: CallerContext, task_id: UUID) -> None:
    task = await get_task(session, caller=caller, task_id=task_id)
    authorize("tasks", Operation.DELETE, caller, task)

    await base.delete(session, task)
    await session.commit()


async def recompute_task_actuals(session: AsyncSession, task: Task) -> Task:
    """Re-derive actual_hours/actual_cost from the full set of time entries."""
    await session.flush()
    task.actual_hours, task.actual_cost = await tasks_repo.sum_assignments(session, task.id)
    return task


async def list_assignments(
    session: AsyncSession,
    *,
    caller: CallerContext,
    task_id: UUID,
) -> list[TaskAssignment]:
    task = await get_task(session, caller=caller, task_id=task_id)
    return await tasks_repo.list_assignments(
        session,
        organization_id=caller.organization_id,
        task_id=task.id,
    )


async def _get_assignment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    assignment_id: UUID,
) -> tuple[TaskAssignment, Task]:
    assignment = await tasks_repo.get_assignment(
        session,
        organization_id=caller.organization_id,
        assignment_id=assignment_id,
    )
    if not assignment:
        raise not_found("task_assignments")
    task = await get_task(session, caller=caller, task_id=assignment.task_id)
    return assignment, task


async def create_assignment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    task_id: UUID,
    payload: TaskAssignmentCreate,
) -> TaskAssignment:
    """
    Log time against a task.

    Users can only log time for themselves. The task's actual hours and cost
    are recomputed in the same transaction.

    Raises:
        HTTPException: 404 if task not visible, 403 when logging for someone
            else, 409 for a second entry on the same day
    """
    task = await get_task(session, caller=caller, task_id=task_id)

    assignment = TaskAssignment(
        task_id=task.id,
        user_id=payload.user_id or caller.profile_id,
        hours_spent=payload.hours_spent,
        cost_incurred=payload.cost_incurred,
        notes=payload.notes,
        date_worked=payload.date_worked or date.today(),
    )
    authorize(
        "task_assignments",
        Operation.INSERT,
        caller,
        assignment,
        organization_id=task.organization_id,
    )

    async with translate_integrity_errors(session, conflict_detail=DUPLICATE_ASSIGNMENT):
        assignment = await base.create(session, assignment)
        await recompute_task_actuals(session, task)
        await session.commit()

    await session.refresh(assignment)
    return assignment


async def update_assignment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    assignment_id: UUID,
    payload: TaskAssignmentUpdate,
) -> TaskAssignment:
    assignment, task = await _get_assignment(
        session, caller=caller, assignment_id=assignment_id
    )
    authorize(
        "task_assignments",
        Operation.UPDATE,
        caller,
        assignment,
        organization_id=task.organization_id,
    )

    apply_updates(assignment, payload)
    await recompute_task_actuals(session, task)
    await session.commit()
    await session.refresh(assignment)
    return assignment


async def delete_assignment(
    session: AsyncSession,
    *,
    caller: CallerContext,
    assignment_id: UUID,
) -> None:
    assignment, task = await _get_assignment(
        session, caller=caller, assignment_id=assignment_id
    )
    authorize(
        "task_assignments",
        Operation.DELETE,
        caller,
        assignment,
        organization_id=task.organization_id,
    )

    await base.delete(session, assignment)
    await recompute_task_actuals(session, task)
    await session.commit()
