"""Property management: listings, buildings, units and engagement."""

from .models import (
    Property,
    PropertyBlock,
    PropertyImage,
    PropertyInterest,
    PropertyUnit,
    PropertyView,
)
from .routers import admin_router, buildings_router, router

__all__ = [
    "Property",
    "PropertyBlock",
    "PropertyImage",
    "PropertyInterest",
    "PropertyUnit",
    "PropertyView",
    "router",
    "admin_router",
    "buildings_router",
]
