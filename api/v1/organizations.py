"""Organization and profile endpoints, scoped to the caller's organization."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_caller, get_db
from api.tenancy import CallerContext
from models.organization import OrganizationResponse, OrganizationUpdate
from models.profile import ProfileCreate, ProfileResponse, ProfileUpdate
from services import organizations_service

router = APIRouter()


@router.get("/organization", response_model=OrganizationResponse)
async def get_organization_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's organization."""
    return await organizations_service.get_my_organization(db, caller=caller)


@router.put("/organization", response_model=OrganizationResponse)
async def update_organization_endpoint(
    payload: OrganizationUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Rename the caller's organization (admin only)."""
    try:
        return await organizations_service.update_organization(db, caller=caller, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update organization: {str(e)}",
        )


@router.delete("/organization", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete the caller's organization (admin only).

    Everything owned by the organization is deleted with it.
    """
    try:
        await organizations_service.delete_organization(db, caller=caller)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete organization: {str(e)}",
        )


@router.get("/profiles/me", response_model=ProfileResponse)
async def get_my_profile_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await organizations_service.get_my_profile(db, caller=caller)


@router.get("/profiles", response_model=List[ProfileResponse])
async def list_profiles_endpoint(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """List profiles of the caller's organization."""
    try:
        return await organizations_service.list_profiles(db, caller=caller)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch profiles: {str(e)}",
        )


@router.get("/profiles/{profile_id}", response_model=ProfileResponse)
async def get_profile_endpoint(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    return await organizations_service.get_profile(db, caller=caller, profile_id=profile_id)


@router.post("/profiles", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile_endpoint(
    payload: ProfileCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Add a user to the caller's organization (admin only).

    Raises:
        403 if not admin, 409 if the user already belongs to an organization.
    """
    try:
        return await organizations_service.create_profile(db, caller=caller, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create profile: {str(e)}",
        )


@router.put("/profiles/{profile_id}", response_model=ProfileResponse)
async def update_profile_endpoint(
    profile_id: UUID,
    payload: ProfileUpdate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await organizations_service.update_profile(
            db, caller=caller, profile_id=profile_id, payload=payload
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update profile: {str(e)}",
        )


@router.delete("/profiles/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile_endpoint(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        await organizations_service.delete_profile(db, caller=caller, profile_id=profile_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete profile: {str(e)}",
        )
