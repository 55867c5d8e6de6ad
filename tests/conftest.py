"""
Synapse API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied BEFORE any synapse import so the
       settings singleton and the engine pick up the test values.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── database:        SQLite schema created from Base.metadata, dropped afterwards
    ├── db_session:      Real AsyncSession on that schema
    ├── test_client:     HTTPX AsyncClient talking to the ASGI app
    ├── make_user:       Factory inserting users directly
    ├── admin_user / member_user
    └── auth_headers:    Builds a Bearer header for a user
"""

import os

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before synapse.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_synapse.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # bcrypt minimum keeps the suite fast
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import synapse.models  # noqa: E402,F401
from synapse.database import Base, async_session_factory, engine  # noqa: E402
from synapse.models.user import User, UserRole, UserStatus  # noqa: E402
from synapse.security import create_access_token, hash_password  # noqa: E402

DEFAULT_PASSWORD = "Str0ng@Pass"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


def scalar_result(value):
    """A mocked Result whose scalar_one_or_none() returns `value`."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def make_scalar_result():
    return scalar_result


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """Fresh schema for every test; pooled connections are closed afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from synapse.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# User Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    """Factory that inserts and commits a user; returns the ORM object."""

    async def _make(
        name: str = "Member User",
        email: str = None,
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.MEMBER,
        status: UserStatus = UserStatus.ACTIVE,
        company: str = "Acme",
    ) -> User:
        user = User(
            name=name,
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            company=company,
            password_hash=hash_password(password) if password else None,
            role=role,
            status=status,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def admin_user(make_user):
    return await make_user(name="Admin User", email="admin@example.com", role=UserRole.ADMIN)


@pytest_asyncio.fixture
async def member_user(make_user):
    return await make_user(name="Member User", email="member@example.com")


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(str(user.id), user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers
