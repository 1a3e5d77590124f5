"""
Database engine, session factory and declarative base for Rentify.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy import DateTime, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

from .config import settings
from .core.database_types import UUID as UUID_DB
from .core.utils import utc_now

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    """Create the async engine for the configured backend.

    MySQL gets SSL connect args when enabled. SQLite gets the pysqlite
    transaction hooks so SAVEPOINTs (begin_nested) behave.
    """
    connect_args = {}
    engine_kwargs = {}
    if database_url.startswith("mysql+asyncmy"):
        engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 3600}
        if settings.database_ssl_enabled:
            connect_args = {
                "ssl": {
                    "ssl_check_hostname": settings.database_ssl_check_hostname,
                    "ssl_verify_cert": settings.database_ssl_verify_cert,
                },
            }

    async_engine = create_async_engine(
        database_url,
        echo=echo,
        connect_args=connect_args,
        **engine_kwargs,
    )

    if database_url.startswith("sqlite"):

        @event.listens_for(async_engine.sync_engine, "connect")
        def _sqlite_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(async_engine.sync_engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return async_engine


engine = build_engine(settings.database_url, echo=settings.database_echo)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
    )


class UUIDPrimaryKey:
    """Mixin for rows identified by a generated UUID."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), primary_key=True, default=uuid.uuid4
    )


async def get_db() -> AsyncSession:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def import_models() -> None:
    """Register every model module on Base.metadata."""
    from .modules.auth import models as auth_models  # noqa: F401
    from .modules.bookings import models as booking_models  # noqa: F401
    from .modules.landlord_management import models as landlord_models  # noqa: F401
    from .modules.property_management import models as property_models  # noqa: F401
    from .modules.tenant_management import models as tenant_models  # noqa: F401


async def init_db(bind=None):
    """Create all tables on the given engine (defaults to the app engine)."""
    import_models()
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
