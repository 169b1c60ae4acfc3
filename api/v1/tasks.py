"""Task and time-entry endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.task import TaskCreate, TaskResponse, TaskUpdate
from models.task_assignment import (
    TaskAssignmentCreate,
    TaskAssignmentResponse,
    TaskAssignmentUpdate,
)
from services import tasks_service

router = APIRouter()


@router.get("/projects/{project_id}/tasks", response_model=List[TaskResponse])
async def list_tasks_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await tasks_service.list_tasks(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch tasks: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task_endpoint(
    project_id: UUID,
    payload: TaskCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await tasks_service.create_task(
            db, caller=caller, project_id=project_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create task: {str(e)}",
        )


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task_endpoint(
    task_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await tasks_service.get_task(db, caller=caller, task_id=task_id)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task_endpoint(
    task_id: UUID,
    payload: TaskUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Update a task (its creator, admin or pm). Only provided fields change."""
    try:
        return await tasks_service.update_task(db, caller=caller, task_id=task_id, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update task: {str(e)}",
        )


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(
    task_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await tasks_service.delete_task(db, caller=caller, task_id=task_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete task: {str(e)}",
        )


@router.get("/tasks/{task_id}/assignments", response_model=List[TaskAssignmentResponse])
async def list_assignments_endpoint(
    task_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await tasks_service.list_assignments(db, caller=caller, task_id=task_id)


@router.post(
    "/tasks/{task_id}/assignments",
    response_model=TaskAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment_endpoint(
    task_id: UUID,
    payload: TaskAssignmentCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Log time against a task for the caller.

    Raises:
        403 when logging time for another user, 409 for a duplicate day.
    """
    try:
        return await tasks_service.create_assignment(
            db, caller=caller, task_id=task_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create task assignment: {str(e)}",
        )


@router.put("/task-assignments/{assignment_id}", response_model=TaskAssignmentResponse)
async def update_assignment_endpoint(
    assignment_id: UUID,
    payload: TaskAssignmentUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await tasks_service.update_assignment(
            db, caller=caller, assignment_id=assignment_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update task assignment: {str(e)}",
        )


@router.delete("/task-assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment_endpoint(
    assignment_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await tasks_service.delete_assignment(db, caller=caller, assignment_id=assignment_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete task assignment: {str(e)}",
        )
