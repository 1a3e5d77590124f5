"""Authentication API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..commons import BaseResponse
from . import services
from .dependencies import CurrentUser
from .schemas import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=BaseResponse[TokenResponse])
async def login(
    login_data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Authenticate and return an access token."""
    user, token = await services.authenticate_user(
        db, email=login_data.email, password=login_data.password
    )
    return BaseResponse(
        success=True,
        message=f"Welcome back, {user.full_name or user.email}!",
        data=token,
    )


@router.post("/signup", response_model=BaseResponse[TokenResponse])
async def signup(
    data: SignupRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a tenant account."""
    _, token = await services.register_user(db, data)
    return BaseResponse(success=True, message="Account created", data=token)


@router.get("/me", response_model=BaseResponse[UserResponse])
async def get_me(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await services.get_user(db, current_user.id)
    return BaseResponse(success=True, data=UserResponse.model_validate(user))


@router.patch("/me", response_model=BaseResponse[UserResponse])
async def update_me(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await services.update_profile(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Profile updated",
        data=UserResponse.model_validate(user),
    )


@router.post("/change-password", response_model=BaseResponse[None])
async def change_password(
    data: ChangePasswordRequest,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.change_password(
        db,
        user_id=current_user.id,
        current_password=data.current_password,
        new_password=data.new_password,
    )
    return BaseResponse(success=True, message="Password changed successfully")
