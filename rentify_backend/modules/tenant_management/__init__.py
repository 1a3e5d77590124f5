"""Tenant management: profiles, screening documents and references."""

from .models import (
    DocumentStatus,
    ReferenceStatus,
    TenantDocument,
    TenantProfile,
    TenantReference,
    TenantStatus,
)
from .routers import admin_router, router

__all__ = [
    "DocumentStatus",
    "ReferenceStatus",
    "TenantDocument",
    "TenantProfile",
    "TenantReference",
    "TenantStatus",
    "admin_router",
    "router",
]
