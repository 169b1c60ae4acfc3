"""Project endpoints with tenant isolation."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.billing import BudgetOverview, ProjectFinancialSummary, ServiceBillingStatus
from models.project import ProjectCreate, ProjectResponse, ProjectStatus, ProjectUpdate
from services import billing_service
from services.projects_service import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)

router = APIRouter()


@router.get("/projects", response_model=List[ProjectResponse])
async def list_projects_endpoint(
    status_filter: ProjectStatus | None = Query(None, alias="status"),
    active: bool | None = Query(None, description="true: open projects, false: completed or cancelled"),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    List projects in the caller's organization.

    Returns:
        List of projects, newest first.
    """
    try:
        return await list_projects(
            db,
            caller=caller,
            status_filter=status_filter.value if status_filter else None,
            active=active,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch projects: {str(e)}",
        )


@router.get("/projects/budget-overview", response_model=BudgetOverview)
async def budget_overview_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Budget totals across the organization's projects."""
    return await billing_service.organization_budget_overview(db, caller=caller)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific project by ID.

    Raises:
        404 if project not found or in another organization.
    """
    try:
        return await get_project(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch project: {str(e)}",
        )


@router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    project_data: ProjectCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new project.

    organization_id defaults to the caller's organization; any other value
    is rejected with 403.
    """
    try:
        return await create_project(db, caller=caller, payload=project_data)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create project: {str(e)}",
        )


@router.put("/projects/{project_id}", response_model=ProjectResponse)
async def update_project_endpoint(
    project_id: UUID,
    project_data: ProjectUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an existing project (admin or pm).

    Only provided fields will be updated.
    """
    try:
        return await update_project(
            db,
            caller=caller,
            project_id=project_id,
            payload=project_data,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update project: {str(e)}",
        )


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete a project and everything under it (admin only)."""
    try:
        await delete_project(db, caller=caller, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete project: {str(e)}",
        )


@router.get("/projects/{project_id}/financial-summary", response_model=ProjectFinancialSummary)
async def financial_summary_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await billing_service.project_financial_summary(db, caller=caller, project_id=project_id)


@router.get("/projects/{project_id}/service-billing", response_model=List[ServiceBillingStatus])
async def service_billing_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Paid status of each service, from payments spread over invoice items."""
    return await billing_service.service_billing_status(db, caller=caller, project_id=project_id)
