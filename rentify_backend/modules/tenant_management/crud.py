"""CRUD operations for tenant management module."""

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..auth.models import User
from ..commons.verification import VerificationStatus
from .models import TenantDocument, TenantProfile, TenantReference, TenantStatus

# ----- Profile CRUD -----


async def get_profile_by_id(
    db: AsyncSession, profile_id: uuid.UUID, include_details: bool = False
) -> TenantProfile | None:
    query = select(TenantProfile).where(TenantProfile.id == profile_id)
    if include_details:
        query = query.options(
            selectinload(TenantProfile.documents),
            selectinload(TenantProfile.references),
        ).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.unique().scalar_one_or_none()


async def get_profile_by_user_id(
    db: AsyncSession, user_id: uuid.UUID
) -> TenantProfile | None:
    result = await db.execute(
        select(TenantProfile).where(TenantProfile.user_id == user_id)
    )
    return result.unique().scalar_one_or_none()


async def get_profiles(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    status: TenantStatus | None = None,
    verification_status: VerificationStatus | None = None,
    search: str | None = None,
) -> tuple[list[TenantProfile], int]:
    """Get tenants with filtering and pagination."""
    filters = []
    if status:
        filters.append(TenantProfile.status == status)
    if verification_status:
        filters.append(TenantProfile.verification_status == verification_status)
    if search:
        term = f"%{search}%"
        filters.append(
            or_(
                User.full_name.ilike(term),
                User.email.ilike(term),
                TenantProfile.phone_number.ilike(term),
                TenantProfile.national_id.ilike(term),
            )
        )

    count_query = (
        select(func.count())
        .select_from(TenantProfile)
        .join(User, TenantProfile.user_id == User.id)
        .where(*filters)
    )
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(
        select(TenantProfile)
        .join(User, TenantProfile.user_id == User.id)
        .where(*filters)
        .order_by(TenantProfile.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.unique().scalars().all()), total


async def create_profile(db: AsyncSession, **fields) -> TenantProfile:
    profile = TenantProfile(**fields)
    db.add(profile)
    await db.flush()
    return profile


async def update_profile(
    db: AsyncSession, profile: TenantProfile, **fields
) -> TenantProfile:
    for key, value in fields.items():
        setattr(profile, key, value)
    await db.flush()
    return profile


# ----- Documents -----


async def get_documents(
    db: AsyncSession, profile_id: uuid.UUID
) -> list[TenantDocument]:
    result = await db.execute(
        select(TenantDocument)
        .where(TenantDocument.tenant_profile_id == profile_id)
        .order_by(TenantDocument.created_at.desc())
    )
    return list(result.scalars().all())


async def get_document(
    db: AsyncSession, profile_id: uuid.UUID, document_id: uuid.UUID
) -> TenantDocument | None:
    """A document, only if it belongs to the given tenant."""
    result = await db.execute(
        select(TenantDocument).where(
            TenantDocument.id == document_id,
            TenantDocument.tenant_profile_id == profile_id,
        )
    )
    return result.scalar_one_or_none()


async def count_documents(db: AsyncSession, profile_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(TenantDocument)
        .where(TenantDocument.tenant_profile_id == profile_id)
    )
    return result.scalar() or 0


async def create_document(db: AsyncSession, **fields) -> TenantDocument:
    document = TenantDocument(**fields)
    db.add(document)
    await db.flush()
    return document


async def update_document(
    db: AsyncSession, document: TenantDocument, **fields
) -> TenantDocument:
    for key, value in fields.items():
        setattr(document, key, value)
    await db.flush()
    return document


async def delete_document(db: AsyncSession, document: TenantDocument) -> None:
    await db.delete(document)
    await db.flush()


# ----- References -----


async def get_references(
    db: AsyncSession, profile_id: uuid.UUID
) -> list[TenantReference]:
    result = await db.execute(
        select(TenantReference)
        .where(TenantReference.tenant_profile_id == profile_id)
        .order_by(TenantReference.created_at.desc())
    )
    return list(result.scalars().all())


async def get_reference(
    db: AsyncSession, profile_id: uuid.UUID, reference_id: uuid.UUID
) -> TenantReference | None:
    result = await db.execute(
        select(TenantReference).where(
            TenantReference.id == reference_id,
            TenantReference.tenant_profile_id == profile_id,
        )
    )
    return result.scalar_one_or_none()


async def count_references(db: AsyncSession, profile_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(TenantReference)
        .where(TenantReference.tenant_profile_id == profile_id)
    )
    return result.scalar() or 0


async def create_reference(db: AsyncSession, **fields) -> TenantReference:
    reference = TenantReference(**fields)
    db.add(reference)
    await db.flush()
    return reference


async def update_reference(
    db: AsyncSession, reference: TenantReference, **fields
) -> TenantReference:
    for key, value in fields.items():
        setattr(reference, key, value)
    await db.flush()
    return reference


async def delete_reference(db: AsyncSession, reference: TenantReference) -> None:
    await db.delete(reference)
    await db.flush()
