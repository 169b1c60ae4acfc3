"""FastAPI dependencies for authentication and database."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import decode_token
from db import get_db as get_db_session
from models.user import User

# HTTP Bearer token security scheme
security = HTTPBearer()


async def get_db() -> AsyncSession:
    """
    Dependency to get database session.
    Reuses the get_db function from db.py.
    """
    async for session in get_db_session():
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token from Authorization header
        db: Database session

    Returns:
        User: The authenticated user

    Raises:
        HTTPException: If token is invalid, expired, or user not found
    """
    token = credentials.credentials

    try:
        token_payload = decode_token(token)
        user_id = UUID(token_payload.sub)
    except (JWTError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    return user


async def get_caller(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Dependency to get the caller context for tenant-scoped operations.

    FastAPI caches dependency results per request, so the organization
    lookup runs once per request no matter how many endpoints or
    sub-dependencies ask for the caller.

    Returns:
        CallerContext: user, profile, organization and role of the caller

    Raises:
        HTTPException: 403 if the user has no profile
    """
    # Lazy import to avoid circular dependency
    from api.tenancy import resolve_caller

    return await resolve_caller(db, current_user.id)


def get_onedrive_client():
    """
    Dependency providing the OneDrive HTTP client.

    Tests override this to inject an httpx.MockTransport.
    """
    from services.onedrive_client import OneDriveClient

    return OneDriveClient()
