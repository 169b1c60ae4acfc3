"""Authentication endpoints: signup and dev login."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.deps import get_db
from auth.jwt import create_access_token
from models.profile import ProfileResponse
from repos import organizations_repo
from services.organizations_service import signup

router = APIRouter()


class SignupRequest(BaseModel):
    """Request schema for signup."""

    email: EmailStr
    first_name: str | None = None
    last_name: str | None = None


class DevLoginRequest(BaseModel):
    """Request schema for dev login."""

    email: EmailStr


class AuthResponse(BaseModel):
    """Token plus the caller's profile (None if the user has no organization)."""

    access_token: str
    token_type: str = "bearer"
    user_id: str
    profile: ProfileResponse | None


@router.post("/auth/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup_endpoint(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Sign up a new user.

    Creates the user, a new organization named after the email, and an
    admin profile in it, then returns a signed token.

    Raises:
        409 if the email is already registered.
    """
    try:
        profile = await signup(
            db,
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        return AuthResponse(
            access_token=create_access_token(profile.user_id, profile.email),
            user_id=str(profile.user_id),
            profile=ProfileResponse.model_validate(profile),
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sign up: {str(e)}",
        )


@router.post("/auth/dev-login", response_model=AuthResponse)
async def dev_login(
    request: DevLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    DEV-ONLY endpoint returning a token for an existing user.

    Raises:
        403 in production, 404 if no user has this email.
    """
    if config.settings.APP_ENV == "production":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Dev login is not available in production",
        )

    user = await organizations_repo.get_user_by_email(db, request.email)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    profile = await organizations_repo.get_profile_for_user(db, user.id)
    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user_id=str(user.id),
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )
