"""Authentication module."""

from .dependencies import (
    AdminUser,
    CurrentUser,
    LandlordUser,
    OptionalUser,
    TenantUser,
    get_current_user,
    get_optional_user,
    require_role,
)
from .models import User, UserRole
from .routers import router
from .schemas import AuthenticatedUser

__all__ = [
    "User",
    "UserRole",
    "router",
    "get_current_user",
    "get_optional_user",
    "require_role",
    "CurrentUser",
    "OptionalUser",
    "AdminUser",
    "LandlordUser",
    "TenantUser",
    "AuthenticatedUser",
]
