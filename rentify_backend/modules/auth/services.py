"""Authentication business logic services."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ResourceAlreadyExistsError,
    ValidationError,
)
from ...core.logging import get_logger
from . import crud
from .jwt_service import create_access_token, get_token_expiry_seconds
from .models import User, UserRole
from .password_service import verify_password
from .schemas import ProfileUpdate, SignupRequest, TokenResponse

logger = get_logger(__name__)


def issue_token(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            is_admin=user.is_admin,
        ),
        expires_in=get_token_expiry_seconds(),
    )


async def authenticate_user(
    db: AsyncSession, email: str, password: str
) -> tuple[User, TokenResponse]:
    """Check credentials and issue an access token.

    Raises:
        AuthenticationError: On unknown e-mail, wrong password or a
            deactivated account
    """
    user = await crud.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    await crud.touch_last_login(db, user)
    await db.commit()

    return user, issue_token(user)


async def register_user(
    db: AsyncSession, data: SignupRequest
) -> tuple[User, TokenResponse]:
    """Self-service signup; new accounts are tenants."""
    if await crud.get_user_by_email(db, data.email):
        raise ResourceAlreadyExistsError("User", data.email)

    user = await crud.create_user(
        db,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        role=UserRole.TENANT,
        phone_number=data.phone_number,
    )
    await db.commit()
    logger.info(f"Registered user {user.id}")
    return user, issue_token(user)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await crud.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


async def update_profile(
    db: AsyncSession, user_id: uuid.UUID, data: ProfileUpdate
) -> User:
    user = await get_user(db, user_id)
    await crud.update_user(db, user, **data.model_dump(exclude_unset=True))
    await db.commit()
    return user


async def change_password(
    db: AsyncSession,
    user_id: uuid.UUID,
    current_password: str,
    new_password: str,
) -> None:
    user = await get_user(db, user_id)

    if not verify_password(current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    if current_password == new_password:
        raise ValidationError(
            "New password must differ from the current one", field="new_password"
        )

    await crud.set_password(db, user, new_password)
    await db.commit()
