"""Bearer token handling.

Tokens are issued by the external auth provider; this module only verifies
them and turns their claims into a ``Requester``. ``create_access_token`` is
kept for local development and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from labhub.config import settings
from labhub.core.exceptions import AuthenticationError
from labhub.schemas.user import Requester


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=60))
    to_encode.update({"exp": expire})
    if settings.jwt_audience:
        to_encode.setdefault("aud", settings.jwt_audience)
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")


def requester_from_claims(claims: dict[str, Any]) -> Requester:
    """Build the requester snapshot from token claims.

    Falls back to the local part of the email for the name and to the
    configured default role, matching what the sign-up flow stores.
    """
    user_id = claims.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    metadata = claims.get("user_metadata") or {}
    email = claims.get("email") or ""
    name = claims.get("name") or metadata.get("name") or email.split("@")[0] or str(user_id)
    role = (
        claims.get("user_role")
        or metadata.get("role")
        or claims.get("role")
        or settings.default_requester_role
    )
    # Supabase puts the postgres role ("authenticated") in "role"
    if role in ("authenticated", "anon"):
        role = settings.default_requester_role

    return Requester(
        id=str(user_id),
        name=name,
        role=role,
        avatar=claims.get("avatar") or metadata.get("avatar"),
    )
