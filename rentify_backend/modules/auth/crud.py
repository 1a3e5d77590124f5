"""CRUD operations for accounts."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now
from .models import User, UserRole
from .password_service import hash_password


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Case-insensitive lookup by e-mail."""
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    full_name: str | None = None,
    role: UserRole = UserRole.TENANT,
    is_admin: bool = False,
    phone_number: str | None = None,
) -> User:
    user = User(
        email=email.strip().lower(),
        password_hash=hash_password(password),
        full_name=full_name,
        role=role,
        is_admin=is_admin,
        phone_number=phone_number,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def update_user(db: AsyncSession, user: User, **fields) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    await db.flush()
    return user


async def set_password(db: AsyncSession, user: User, new_password: str) -> None:
    user.password_hash = hash_password(new_password)
    await db.flush()


async def touch_last_login(db: AsyncSession, user: User) -> None:
    user.last_login = utc_now()
    await db.flush()
