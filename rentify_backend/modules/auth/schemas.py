"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .models import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone_number: str | None = Field(None, max_length=40)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    """Public view of an account."""

    id: UUID
    email: str
    full_name: str | None = None
    role: UserRole
    is_admin: bool
    is_active: bool
    phone_number: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone_number: str | None = Field(None, max_length=40)
    avatar_url: str | None = Field(None, max_length=1024)
    bio: str | None = None


class AuthenticatedUser(BaseModel):
    """Caller identity decoded from the bearer token.

    No database access happens when resolving it.
    """

    id: UUID
    email: str
    role: UserRole
    is_admin: bool = False

    @property
    def has_admin_access(self) -> bool:
        return self.is_admin or self.role == UserRole.ADMIN
