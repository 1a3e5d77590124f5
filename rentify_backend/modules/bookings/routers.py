"""Booking API routes: tenants under /bookings, back-office under /admin/bookings."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import AdminUser, TenantUser
from ..commons import BaseResponse, PaginatedResponse, page_offset
from . import crud, services
from .models import BookingStatus
from .schemas import (
    BookingAdminResponse,
    BookingCreate,
    BookingListResponse,
    BookingPaymentUpdate,
    BookingResponse,
    BookingStats,
    BookingStatusUpdate,
)

router = APIRouter(prefix="/bookings", tags=["Bookings"])
admin_router = APIRouter(prefix="/admin/bookings", tags=["Admin Bookings"])


# ----- Tenant -----


@router.post("", response_model=BaseResponse[BookingResponse], status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Book a listing; inside a building a unit must be chosen."""
    booking = await services.create_booking(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Booking confirmed",
        data=BookingResponse.model_validate(booking),
    )


@router.get("", response_model=BaseResponse[PaginatedResponse[BookingResponse]])
async def list_my_bookings(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: BookingStatus | None = Query(None),
):
    bookings, total = await crud.get_bookings(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        tenant_id=current_user.id,
        status=status,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[BookingResponse.model_validate(b) for b in bookings],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@router.get("/{booking_id}", response_model=BaseResponse[BookingResponse])
async def get_my_booking(
    booking_id: uuid.UUID,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    booking = await services.get_own_booking(db, current_user.id, booking_id)
    return BaseResponse(success=True, data=BookingResponse.model_validate(booking))


@router.post("/{booking_id}/cancel", response_model=BaseResponse[BookingResponse])
async def cancel_my_booking(
    booking_id: uuid.UUID,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    booking = await services.cancel_own_booking(db, current_user.id, booking_id)
    return BaseResponse(
        success=True,
        message="Booking cancelled",
        data=BookingResponse.model_validate(booking),
    )


# ----- Admin -----


@admin_router.get("", response_model=BaseResponse[BookingListResponse])
async def admin_list_bookings(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: BookingStatus | None = Query(None),
    property_id: uuid.UUID | None = Query(None),
):
    """List bookings with filters, plus counts across all bookings."""
    bookings, total = await crud.get_bookings(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        status=status,
        property_id=property_id,
    )
    result = BookingListResponse.from_items(
        items=[BookingAdminResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )
    result.stats = await services.get_stats(db)
    return BaseResponse(success=True, data=result)


@admin_router.get("/stats", response_model=BaseResponse[BookingStats])
async def admin_booking_stats(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return BaseResponse(success=True, data=await services.get_stats(db))


@admin_router.get("/{booking_id}", response_model=BaseResponse[BookingAdminResponse])
async def admin_get_booking(
    booking_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    booking = await services.get_booking(db, booking_id)
    return BaseResponse(success=True, data=BookingAdminResponse.model_validate(booking))


@admin_router.post(
    "/{booking_id}/status", response_model=BaseResponse[BookingAdminResponse]
)
async def admin_update_booking_status(
    booking_id: uuid.UUID,
    data: BookingStatusUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    booking = await services.change_status(db, booking_id, data.status, data.notes)
    return BaseResponse(
        success=True,
        message=f"Booking {booking.status.value}",
        data=BookingAdminResponse.model_validate(booking),
    )


@admin_router.post(
    "/{booking_id}/payment", response_model=BaseResponse[BookingAdminResponse]
)
async def admin_update_booking_payment(
    booking_id: uuid.UUID,
    data: BookingPaymentUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    booking = await services.set_payment(db, booking_id, data.paid)
    return BaseResponse(success=True, data=BookingAdminResponse.model_validate(booking))
