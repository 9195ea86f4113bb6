"""
Pytest fixtures for testing.

Provides:
- Async database session with rollback
- AuthManager bound to that session with a private access cache
- Test client with database override
- Factory fixtures for creating users
"""

from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from authgraph.main import app
from authgraph.models.base import Base
from authgraph.models.user import User
from authgraph.api.dependencies.database import get_db
from authgraph.rbac.cache import AccessCache, access_cache
from authgraph.rbac.service import AuthManager


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session with automatic rollback.

    Each test gets a fresh transaction that's rolled back after.
    """
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_global_cache():
    """Keep the process-wide access cache off between tests."""
    access_cache.disable()
    yield
    access_cache.disable()


# ============ Service Fixtures ============


@pytest.fixture
def cache() -> AccessCache:
    """Private access cache, disabled."""
    return AccessCache()


@pytest.fixture
def auth(db: AsyncSession, cache: AccessCache) -> AuthManager:
    """Lenient AuthManager (the default mode)."""
    return AuthManager(
        db,
        strict=False,
        allow_cycles=False,
        invalidate_on_write=True,
        cache=cache,
    )


@pytest.fixture
def strict_auth(db: AsyncSession, cache: AccessCache) -> AuthManager:
    """AuthManager that raises on blank names and missing items."""
    return AuthManager(
        db,
        strict=True,
        allow_cycles=False,
        invalidate_on_write=True,
        cache=cache,
    )


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str | None = None) -> User:
        """Create a user in the database."""
        user = User(
            username=username or f"user-{uuid4().hex[:8]}",
            assignments=[],
        )
        self.db.add(user)
        await self.db.commit()
        return user


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    """Fixture that provides UserFactory."""
    return UserFactory(db)


@pytest_asyncio.fixture
async def users(user_factory: UserFactory) -> dict[str, User]:
    """Three users with no assignments."""
    return {
        name: await user_factory.create(name)
        for name in ("eve", "bob", "joe")
    }


ROLES = ["admin", "editor", "sales"]


async def create_roles(auth: AuthManager, names=ROLES) -> None:
    for name in names:
        await auth.create_role(name)


async def assert_roles(auth: AuthManager, user: User, expected: list[str]) -> None:
    """Check direct membership of user in every known test role."""
    for role in ROLES + ["user"]:
        in_role = await auth.user_is_in_role(user.id, role)
        if role in expected:
            assert in_role, f"{user.username} is not in expected role {role}"
        else:
            assert not in_role, f"{user.username} is in unexpected role {role}"
