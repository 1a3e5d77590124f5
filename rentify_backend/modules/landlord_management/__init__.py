"""Landlord management: profiles, verification, payments and documents."""

from .models import (
    LandlordDocument,
    LandlordPayment,
    LandlordProfile,
    LandlordStatus,
    PaymentStatus,
)
from .routers import router, self_router

__all__ = [
    "LandlordDocument",
    "LandlordPayment",
    "LandlordProfile",
    "LandlordStatus",
    "PaymentStatus",
    "router",
    "self_router",
]
