"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .jwt_service import decode_access_token
from .models import UserRole
from .schemas import AuthenticatedUser

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _user_from_token(token: str) -> AuthenticatedUser:
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return AuthenticatedUser(
            id=payload["sub"],
            email=payload["email"],
            role=payload["role"],
            is_admin=payload.get("is_admin", False),
        )
    except (KeyError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token payload: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthenticatedUser:
    """Resolve the caller from the bearer token (no database call)."""
    return _user_from_token(credentials.credentials)


async def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_security)
    ],
) -> AuthenticatedUser | None:
    """Like get_current_user, but anonymous callers resolve to None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


def require_role(*allowed_roles: UserRole):
    """Dependency factory for role-based access control.

    Admin accounts pass every role check.

    Usage:
        @router.get("/landlord-area")
        async def endpoint(
            user: AuthenticatedUser = Depends(require_role(UserRole.LANDLORD))
        ):
            ...
    """
    allowed = set(allowed_roles)

    async def role_checker(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.has_admin_access or current_user.role in allowed:
            return current_user
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required roles: "
            + ", ".join(sorted(r.value for r in allowed) or ["admin"]),
        )

    return role_checker


# Type aliases for dependency injection
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]
AdminUser = Annotated[AuthenticatedUser, Depends(require_role(UserRole.ADMIN))]
LandlordUser = Annotated[AuthenticatedUser, Depends(require_role(UserRole.LANDLORD))]
TenantUser = Annotated[AuthenticatedUser, Depends(require_role(UserRole.TENANT))]
