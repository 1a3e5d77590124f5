"""Booking business logic services."""

import uuid
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    BusinessLogicError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.state_machine import StatusMachine
from ..property_management import crud as property_crud
from . import crud
from .models import Booking, BookingPaymentStatus, BookingStatus
from .schemas import BookingCreate, BookingStats

logger = get_logger(__name__)

booking_status_machine = StatusMachine(
    "booking status",
    {
        BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
        BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
        BookingStatus.CANCELLED: set(),
    },
)


def months_between(check_in: date, check_out: date) -> int:
    """Calendar months from check-in to check-out; a started month counts."""
    months = (check_out.year - check_in.year) * 12 + check_out.month - check_in.month
    if check_out.day > check_in.day:
        months += 1
    return months


async def create_booking(
    db: AsyncSession, tenant_id: uuid.UUID, data: BookingCreate
) -> Booking:
    """Book a listing for whole months, reserving the unit when one is given.

    Raises:
        NotFoundError: If the listing (or unit) does not exist or is inactive
        ValidationError: If the stay is shorter than the listing's minimum,
            or a building listing is booked without a unit
        ConflictError: If the unit is already taken
    """
    prop = await property_crud.get_property_by_id(db, data.property_id)
    if not prop or not prop.is_active:
        raise NotFoundError(f"Property {data.property_id} not found")
    if prop.is_occupied:
        raise ConflictError("This property is already occupied")

    if prop.block_id is not None and data.unit_id is None:
        raise ValidationError("Please select a unit to book", field="unit_id")

    months = months_between(data.check_in, data.check_out)
    minimum = prop.minimum_initial_months or 1
    if months < minimum:
        suffix = "s" if minimum > 1 else ""
        raise ValidationError(
            f"Minimum initial deposit required is {minimum} month{suffix}",
            field="check_out",
            details={"months": months, "minimum_initial_months": minimum},
        )

    price = prop.price_ugx
    if data.unit_id is not None:
        unit = await property_crud.get_unit_by_id(db, data.unit_id)
        if not unit or unit.property_id != prop.id:
            raise NotFoundError(f"Unit {data.unit_id} not found")
        if not await crud.reserve_unit(db, unit.id):
            raise ConflictError("This unit is no longer available")
        price = unit.price_ugx or price

    try:
        booking = await crud.create_booking(
            db,
            property_id=prop.id,
            tenant_id=tenant_id,
            unit_id=data.unit_id,
            check_in=data.check_in,
            check_out=data.check_out,
            months=months,
            total_price_ugx=price * months,
            status=BookingStatus.CONFIRMED,
            notes=data.notes,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"Booking {booking.id}: property {prop.id} for {months} months "
        f"by tenant {tenant_id}"
    )
    return await get_booking(db, booking.id)


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await crud.get_booking_by_id(db, booking_id)
    if not booking:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def get_own_booking(
    db: AsyncSession, tenant_id: uuid.UUID, booking_id: uuid.UUID
) -> Booking:
    booking = await get_booking(db, booking_id)
    if booking.tenant_id != tenant_id:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def change_status(
    db: AsyncSession,
    booking_id: uuid.UUID,
    status: BookingStatus,
    notes: str | None = None,
    tenant_id: uuid.UUID | None = None,
) -> Booking:
    """Move a booking along its status machine.

    Cancelling frees the reserved unit. With ``tenant_id`` only that
    tenant's booking is found.
    """
    if tenant_id is None:
        booking = await get_booking(db, booking_id)
    else:
        booking = await get_own_booking(db, tenant_id, booking_id)

    if not booking_status_machine.validate(booking.status, status):
        return booking

    changes = {"status": status}
    if notes is not None:
        changes["notes"] = notes
    await crud.update_booking(db, booking, **changes)
    if status == BookingStatus.CANCELLED and booking.unit_id is not None:
        await crud.release_unit(db, booking.unit_id)
    await db.commit()
    logger.info(f"Booking {booking_id} is now {status.value}")
    return await get_booking(db, booking_id)


async def cancel_own_booking(
    db: AsyncSession, tenant_id: uuid.UUID, booking_id: uuid.UUID
) -> Booking:
    booking = await get_own_booking(db, tenant_id, booking_id)
    if booking.status == BookingStatus.CANCELLED:
        raise BusinessLogicError("Booking is already cancelled")
    return await change_status(
        db, booking_id, BookingStatus.CANCELLED, tenant_id=tenant_id
    )


async def set_payment(db: AsyncSession, booking_id: uuid.UUID, paid: bool) -> Booking:
    booking = await get_booking(db, booking_id)
    payment_status = BookingPaymentStatus.PAID if paid else BookingPaymentStatus.PENDING
    await crud.update_booking(db, booking, payment_status=payment_status)
    await db.commit()
    return await get_booking(db, booking_id)


async def get_stats(db: AsyncSession) -> BookingStats:
    by_status = await crud.count_by_status(db)
    return BookingStats(
        total=sum(by_status.values()),
        pending=by_status.get(BookingStatus.PENDING, 0),
        confirmed=by_status.get(BookingStatus.CONFIRMED, 0),
        cancelled=by_status.get(BookingStatus.CANCELLED, 0),
        paid=await crud.count_paid(db),
    )
