"""JWT token creation and validation."""

from datetime import datetime, timedelta, UTC
from uuid import UUID

from jose import jwt, JWTError

import config
from auth.schemas import TokenPayload


def create_access_token(
    user_id: UUID,
    email: str,
    expires_in_hours: int | None = None,
) -> str:
    """
    Create a signed access token for a user.

    The token only carries identity. Organization and role are resolved from
    the user's profile on every request, so a role change takes effect
    without re-issuing tokens.

    Args:
        user_id: User UUID
        email: User email
        expires_in_hours: Token expiration in hours (defaults to settings)

    Returns:
        Encoded JWT token string
    """
    if expires_in_hours is None:
        expires_in_hours = config.settings.ACCESS_TOKEN_EXPIRE_HOURS
    exp = datetime.now(UTC) + timedelta(hours=expires_in_hours)

    payload = {
        "sub": str(user_id),
        "email": email,
        "exp": int(exp.timestamp()),  # JWT expects Unix timestamp
    }

    return jwt.encode(
        payload,
        config.settings.JWT_SECRET,
        algorithm=config.settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            config.settings.JWT_SECRET,
            algorithms=[config.settings.JWT_ALGORITHM],
        )

        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            exp=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}") from e
    except KeyError as e:
        raise JWTError(f"Invalid token: missing claim {e}") from e
