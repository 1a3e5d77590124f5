"""File uploads backed by object storage."""

from .routers import files_router, router
from .storage import (
    LocalStorageProvider,
    S3StorageProvider,
    StorageProvider,
    get_storage,
)

__all__ = [
    "LocalStorageProvider",
    "S3StorageProvider",
    "StorageProvider",
    "files_router",
    "get_storage",
    "router",
]
