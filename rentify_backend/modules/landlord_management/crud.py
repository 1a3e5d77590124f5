"""CRUD operations for landlord management module."""

import uuid

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..auth.models import User
from ..commons.verification import VerificationStatus
from ..property_management.models import Property, PropertyBlock, PropertyUnit
from .models import LandlordDocument, LandlordPayment, LandlordProfile, LandlordStatus

# ----- Landlord CRUD -----


async def get_landlord_by_id(
    db: AsyncSession,
    landlord_id: uuid.UUID,
    include_details: bool = False,
) -> LandlordProfile | None:
    query = select(LandlordProfile).where(LandlordProfile.id == landlord_id)
    if include_details:
        query = query.options(
            selectinload(LandlordProfile.payments),
            selectinload(LandlordProfile.documents),
        ).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.unique().scalar_one_or_none()


async def get_landlord_by_user_id(
    db: AsyncSession, user_id: uuid.UUID
) -> LandlordProfile | None:
    result = await db.execute(
        select(LandlordProfile).where(LandlordProfile.user_id == user_id)
    )
    return result.unique().scalar_one_or_none()


def _landlord_filters(
    status: LandlordStatus | None,
    verification_status: VerificationStatus | None,
    search: str | None,
) -> list:
    filters = []
    if status:
        filters.append(LandlordProfile.status == status)
    if verification_status:
        filters.append(LandlordProfile.verification_status == verification_status)
    if search:
        term = f"%{search}%"
        filters.append(
            or_(
                User.full_name.ilike(term),
                User.email.ilike(term),
                LandlordProfile.business_name.ilike(term),
                LandlordProfile.phone_number.ilike(term),
            )
        )
    return filters


async def get_landlords(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    status: LandlordStatus | None = None,
    verification_status: VerificationStatus | None = None,
    search: str | None = None,
) -> tuple[list[LandlordProfile], int]:
    """Get landlords with filtering and pagination."""
    filters = _landlord_filters(status, verification_status, search)

    count_query = (
        select(func.count())
        .select_from(LandlordProfile)
        .join(User, LandlordProfile.user_id == User.id)
        .where(*filters)
    )
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        select(LandlordProfile)
        .join(User, LandlordProfile.user_id == User.id)
        .where(*filters)
        .order_by(LandlordProfile.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.unique().scalars().all()), total


async def create_landlord(db: AsyncSession, **fields) -> LandlordProfile:
    landlord = LandlordProfile(**fields)
    db.add(landlord)
    await db.flush()
    return landlord


async def update_landlord(
    db: AsyncSession, landlord: LandlordProfile, **fields
) -> LandlordProfile:
    for key, value in fields.items():
        setattr(landlord, key, value)
    await db.flush()
    return landlord


async def delete_landlord(db: AsyncSession, landlord: LandlordProfile) -> None:
    await db.delete(landlord)
    await db.flush()


async def release_landlord_assignments(
    db: AsyncSession, landlord_id: uuid.UUID
) -> None:
    """Detach a landlord from every block and listing it owns."""
    await db.execute(
        update(Property)
        .where(Property.landlord_id == landlord_id)
        .values(landlord_id=None)
    )
    await db.execute(
        update(PropertyBlock)
        .where(PropertyBlock.landlord_id == landlord_id)
        .values(landlord_id=None)
    )


# ----- Stats -----


async def count_by_status(db: AsyncSession) -> dict[LandlordStatus, int]:
    result = await db.execute(
        select(LandlordProfile.status, func.count()).group_by(LandlordProfile.status)
    )
    return {status: count for status, count in result.all()}


async def count_by_verification(db: AsyncSession) -> dict[VerificationStatus, int]:
    result = await db.execute(
        select(LandlordProfile.verification_status, func.count()).group_by(
            LandlordProfile.verification_status
        )
    )
    return {status: count for status, count in result.all()}


async def count_assigned_properties(
    db: AsyncSession, landlord_id: uuid.UUID | None = None
) -> int:
    query = select(func.count()).select_from(Property)
    if landlord_id is None:
        query = query.where(Property.landlord_id.is_not(None))
    else:
        query = query.where(Property.landlord_id == landlord_id)
    return (await db.execute(query)).scalar() or 0


async def count_assigned_units(
    db: AsyncSession, landlord_id: uuid.UUID | None = None
) -> int:
    """Units of listings assigned to a landlord (any landlord when None)."""
    query = (
        select(func.count())
        .select_from(PropertyUnit)
        .join(Property, PropertyUnit.property_id == Property.id)
    )
    if landlord_id is None:
        query = query.where(Property.landlord_id.is_not(None))
    else:
        query = query.where(Property.landlord_id == landlord_id)
    return (await db.execute(query)).scalar() or 0


async def get_landlord_properties(
    db: AsyncSession, landlord_id: uuid.UUID
) -> list[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.landlord_id == landlord_id)
        .order_by(Property.created_at.desc())
    )
    return list(result.scalars().all())


# ----- Payments -----


async def create_payment(db: AsyncSession, **fields) -> LandlordPayment:
    payment = LandlordPayment(**fields)
    db.add(payment)
    await db.flush()
    return payment


async def get_payments(
    db: AsyncSession, landlord_id: uuid.UUID
) -> list[LandlordPayment]:
    result = await db.execute(
        select(LandlordPayment)
        .where(LandlordPayment.landlord_id == landlord_id)
        .order_by(LandlordPayment.period_start.desc())
    )
    return list(result.scalars().all())


# ----- Documents -----


async def create_document(db: AsyncSession, **fields) -> LandlordDocument:
    document = LandlordDocument(**fields)
    db.add(document)
    await db.flush()
    return document


async def get_document_by_id(
    db: AsyncSession, landlord_id: uuid.UUID, document_id: uuid.UUID
) -> LandlordDocument | None:
    result = await db.execute(
        select(LandlordDocument).where(
            LandlordDocument.id == document_id,
            LandlordDocument.landlord_id == landlord_id,
        )
    )
    return result.scalar_one_or_none()


async def get_documents(
    db: AsyncSession, landlord_id: uuid.UUID
) -> list[LandlordDocument]:
    result = await db.execute(
        select(LandlordDocument)
        .where(LandlordDocument.landlord_id == landlord_id)
        .order_by(LandlordDocument.created_at)
    )
    return list(result.scalars().all())


async def delete_document(db: AsyncSession, document: LandlordDocument) -> None:
    await db.delete(document)
    await db.flush()
