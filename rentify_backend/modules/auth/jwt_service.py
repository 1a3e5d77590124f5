"""JWT access tokens."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt

from ...config import settings


def create_access_token(
    user_id: uuid.UUID | str,
    email: str,
    role: str,
    is_admin: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for a user."""
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "is_admin": is_admin,
        "exp": expire,
        "iat": now,
        "type": "access",
    }

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate an access token.

    Returns:
        Token payload if valid, None if invalid or expired.
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


def get_token_expiry_seconds() -> int:
    return settings.access_token_expire_minutes * 60
