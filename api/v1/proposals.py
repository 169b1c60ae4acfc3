"""Project proposal endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.project_proposal import (
    ProjectProposalCreate,
    ProjectProposalResponse,
    ProjectProposalUpdate,
)
from services import proposals_service

router = APIRouter()


@router.get("/projects/{project_id}/proposals", response_model=List[ProjectProposalResponse])
async def list_proposals_endpoint(
    project_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await proposals_service.list_proposals(db, caller=caller, project_id=project_id)


@router.post(
    "/projects/{project_id}/proposals",
    response_model=ProjectProposalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_proposal_endpoint(
    project_id: UUID,
    payload: ProjectProposalCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await proposals_service.create_proposal(
            db, caller=caller, project_id=project_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create proposal: {str(e)}",
        )


@router.get("/proposals/{proposal_id}", response_model=ProjectProposalResponse)
async def get_proposal_endpoint(
    proposal_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await proposals_service.get_proposal(db, caller=caller, proposal_id=proposal_id)


@router.put("/proposals/{proposal_id}", response_model=ProjectProposalResponse)
async def update_proposal_endpoint(
    proposal_id: UUID,
    payload: ProjectProposalUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await proposals_service.update_proposal(
            db, caller=caller, proposal_id=proposal_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update proposal: {str(e)}",
        )


@router.delete("/proposals/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_proposal_endpoint(
    proposal_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await proposals_service.delete_proposal(db, caller=caller, proposal_id=proposal_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete proposal: {str(e)}",
        )
