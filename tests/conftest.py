"""
Test configuration and fixtures for the Rentify backend.
Each test gets its own SQLite database and local object storage.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from pathlib import Path

# CONFIG must point at the test settings before the app is imported
os.environ.setdefault(
    "CONFIG", str(Path(__file__).parent / "resources" / "test.yaml")
)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from rentify_backend.database import build_engine, get_db, init_db  # noqa: E402
from rentify_backend.main import app  # noqa: E402
from rentify_backend.modules.auth import crud as auth_crud  # noqa: E402
from rentify_backend.modules.auth.jwt_service import create_access_token  # noqa: E402
from rentify_backend.modules.auth.models import User, UserRole  # noqa: E402
from rentify_backend.modules.property_management.schemas import (  # noqa: E402
    BuildingConfig,
    BuildingCreate,
    FloorConfig,
    UnitTypeCount,
)
from rentify_backend.modules.uploads.storage import (  # noqa: E402
    LocalStorageProvider,
    get_storage,
)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh SQLite database with every table created."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'rentify.db'}")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> LocalStorageProvider:
    return LocalStorageProvider(tmp_path / "storage", "http://testserver/files")


@pytest_asyncio.fixture
async def client(session_factory, storage) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, wired to the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ----- Accounts -----


async def make_user(
    db: AsyncSession,
    role: UserRole = UserRole.TENANT,
    email: str | None = None,
    full_name: str = "Test User",
    is_admin: bool = False,
) -> User:
    user = await auth_crud.create_user(
        db,
        email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
        password="password123",
        full_name=full_name,
        role=role,
        is_admin=is_admin,
    )
    await db.commit()
    return user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
        is_admin=user.is_admin,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_user(db_session) -> User:
    return await make_user(db_session, UserRole.ADMIN, full_name="Site Admin", is_admin=True)


@pytest_asyncio.fixture
async def tenant_user(db_session) -> User:
    return await make_user(db_session, UserRole.TENANT, full_name="Jane Tenant")


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def tenant_headers(tenant_user) -> dict[str, str]:
    return auth_headers(tenant_user)


# ----- Buildings -----


def building_payload(**overrides) -> BuildingCreate:
    """Two floors: Studio and 2BR on floor 1, 2BR and 3BR on floor 2."""
    data = {
        "building_name": "Kololo Heights",
        "title": "Kololo Heights Apartments",
        "location": "Kololo, Kampala",
        "description": "Modern apartments close to the city centre.",
        "image_url": "https://cdn.example.com/kololo/front.jpg",
        "shared_image_urls": ["https://cdn.example.com/kololo/pool.jpg"],
        "config": BuildingConfig(
            total_floors=2,
            floors=[
                FloorConfig(
                    floor_number=1,
                    unit_types=[
                        UnitTypeCount(type="Studio", count=2, monthly_fee=800_000),
                        UnitTypeCount(type="2BR", count=1, monthly_fee=1_000_000),
                    ],
                ),
                FloorConfig(
                    floor_number=2,
                    unit_types=[
                        UnitTypeCount(type="2BR", count=2, monthly_fee=1_200_000),
                        UnitTypeCount(type="3BR", count=1, monthly_fee=1_800_000),
                    ],
                ),
            ],
        ),
    }
    data.update(overrides)
    return BuildingCreate(**data)


@pytest.fixture
def building_data() -> BuildingCreate:
    return building_payload()


@pytest.fixture
def building_factory():
    return building_payload


@pytest.fixture
def user_factory(db_session):
    async def factory(role: UserRole = UserRole.TENANT, **kwargs) -> User:
        return await make_user(db_session, role, **kwargs)

    return factory


@pytest.fixture
def headers_for():
    return auth_headers
