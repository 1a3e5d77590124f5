"""Booking schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ..commons import PaginatedResponse
from .models import BookingPaymentStatus, BookingStatus


class BookingCreate(BaseModel):
    property_id: UUID
    unit_id: UUID | None = None
    check_in: date
    check_out: date
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "BookingCreate":
        if self.check_out <= self.check_in:
            raise ValueError("Check-out must be after check-in")
        return self


class BookingResponse(BaseModel):
    id: UUID
    property_id: UUID
    property_title: str | None = None
    unit_id: UUID | None = None
    unit_number: str | None = None
    tenant_id: UUID
    check_in: date
    check_out: date
    months: int
    total_price_ugx: int
    status: BookingStatus
    payment_status: BookingPaymentStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingAdminResponse(BookingResponse):
    tenant_name: str | None = None
    tenant_email: str | None = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    notes: str | None = Field(None, max_length=2000)


class BookingPaymentUpdate(BaseModel):
    paid: bool


class BookingStats(BaseModel):
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    paid: int = 0


class BookingListResponse(PaginatedResponse[BookingAdminResponse]):
    """A page of bookings plus counts across all bookings."""

    stats: BookingStats = BookingStats()
