"""Bookings: tenants reserving listings and units for whole months."""

from .models import Booking, BookingPaymentStatus, BookingStatus
from .routers import admin_router, router

__all__ = [
    "Booking",
    "BookingPaymentStatus",
    "BookingStatus",
    "admin_router",
    "router",
]
