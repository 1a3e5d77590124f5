"""CRUD operations for bookings."""

import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..property_management.models import PropertyUnit
from .models import Booking, BookingPaymentStatus, BookingStatus


async def get_booking_by_id(db: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_bookings(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    tenant_id: uuid.UUID | None = None,
    property_id: uuid.UUID | None = None,
    status: BookingStatus | None = None,
) -> tuple[list[Booking], int]:
    query = select(Booking)
    count_query = select(func.count()).select_from(Booking)
    conditions = []
    if tenant_id is not None:
        conditions.append(Booking.tenant_id == tenant_id)
    if property_id is not None:
        conditions.append(Booking.property_id == property_id)
    if status is not None:
        conditions.append(Booking.status == status)
    if conditions:
        query = query.where(*conditions)
        count_query = count_query.where(*conditions)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Booking.created_at.desc(), Booking.id).offset(skip).limit(limit)
    )
    return list(result.scalars().unique().all()), total


async def create_booking(db: AsyncSession, **fields) -> Booking:
    booking = Booking(**fields)
    db.add(booking)
    await db.flush()
    return booking


async def update_booking(db: AsyncSession, booking: Booking, **fields) -> Booking:
    for key, value in fields.items():
        setattr(booking, key, value)
    await db.flush()
    return booking


async def reserve_unit(db: AsyncSession, unit_id: uuid.UUID) -> bool:
    """Mark an available unit taken; False when someone else holds it."""
    result = await db.execute(
        update(PropertyUnit)
        .where(PropertyUnit.id == unit_id, PropertyUnit.is_available.is_(True))
        .values(is_available=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def release_unit(db: AsyncSession, unit_id: uuid.UUID) -> None:
    await db.execute(
        update(PropertyUnit)
        .where(PropertyUnit.id == unit_id)
        .values(is_available=True)
        .execution_options(synchronize_session=False)
    )


# ----- Stats -----


async def count_by_status(db: AsyncSession) -> dict[BookingStatus, int]:
    result = await db.execute(
        select(Booking.status, func.count()).group_by(Booking.status)
    )
    return {status: count for status, count in result.all()}


async def count_paid(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Booking)
        .where(Booking.payment_status == BookingPaymentStatus.PAID)
    )
    return result.scalar() or 0
