"""Endpoints for billable services on a project."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.service import ServiceCreate, ServiceResponse, ServiceUpdate
from services import project_services_service

router = APIRouter()


@router.get("/projects/{project_id}/services", response_model=List[ServiceResponse])
async def list_services_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await project_services_service.list_services(
            db, caller=caller, project_id=project_id
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch services: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/services",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_service_endpoint(
    project_id: UUID,
    payload: ServiceCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await project_services_service.create_service(
            db, caller=caller, project_id=project_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create service: {str(e)}",
        )


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service_endpoint(
    service_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await project_services_service.get_service(db, caller=caller, service_id=service_id)


@router.put("/services/{service_id}", response_model=ServiceResponse)
async def update_service_endpoint(
    service_id: UUID,
    payload: ServiceUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await project_services_service.update_service(
            db, caller=caller, service_id=service_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update service: {str(e)}",
        )


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_endpoint(
    service_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await project_services_service.delete_service(db, caller=caller, service_id=service_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete service: {str(e)}",
        )
