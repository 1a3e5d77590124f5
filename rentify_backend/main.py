"""Rentify backend - main application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.exceptions import RentifyException
from .core.logging import (
    RequestContextMiddleware,
    get_logger,
    setup_logging_from_settings,
    shutdown_logging,
)

# Import routers
from .modules.auth import router as auth_router
from .modules.bookings import admin_router as admin_bookings_router
from .modules.bookings import router as bookings_router
from .modules.landlord_management import router as landlords_router
from .modules.landlord_management import self_router as landlord_self_router
from .modules.property_editor import router as property_editor_router
from .modules.property_management import (
    admin_router as admin_properties_router,
)
from .modules.property_management import (
    buildings_router,
)
from .modules.property_management import (
    router as properties_router,
)
from .modules.tenant_management import (
    admin_router as admin_tenants_router,
)
from .modules.tenant_management import (
    router as tenant_router,
)
from .modules.uploads import files_router
from .modules.uploads import router as uploads_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging_from_settings(settings)
    logger.info("Starting Rentify application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")
    yield
    # Shutdown
    logger.info("Shutting down Rentify application...")
    shutdown_logging()


app = FastAPI(
    title=settings.api_title,
    description="Rental marketplace: listings, buildings, landlords and tenants",
    version=settings.api_version,
    docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Transaction id per request, echoed in the x-transaction-id header
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(RentifyException)
async def rentify_exception_handler(request: Request, exc: RentifyException):
    """Render domain exceptions in the response envelope."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.message,
            "error": exc.message,
            "details": exc.details,
            "data": None,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) if settings.app_debug else "Internal server error",
            "data": None,
        },
    )


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


# Auth routes
app.include_router(auth_router, prefix=settings.api_prefix)

# Listings, buildings and engagement
app.include_router(property_editor_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(admin_properties_router, prefix=settings.api_prefix)
app.include_router(buildings_router, prefix=settings.api_prefix)

# Landlords
app.include_router(landlords_router, prefix=settings.api_prefix)
app.include_router(landlord_self_router, prefix=settings.api_prefix)

# Tenants
app.include_router(tenant_router, prefix=settings.api_prefix)
app.include_router(admin_tenants_router, prefix=settings.api_prefix)

# Bookings
app.include_router(bookings_router, prefix=settings.api_prefix)
app.include_router(admin_bookings_router, prefix=settings.api_prefix)

# Uploads
app.include_router(uploads_router, prefix=settings.api_prefix)

# Locally stored files; private buckets need a signed link
if settings.storage_provider == "local":
    app.include_router(files_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rentify_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
