"""Shared test fixtures — async DB, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test JWT_SECRET before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hrops.auth.service import hash_password
from hrops.common.constants import PredefinedRole
from hrops.config import settings
from hrops.database import Base, get_db
from hrops.main import create_app
from hrops.users.models import User

# Import ALL model modules so every table is on Base.metadata
import hrops.attendance.models  # noqa: F401
import hrops.common.audit  # noqa: F401
import hrops.common.models  # noqa: F401
import hrops.leave.models  # noqa: F401
import hrops.payroll.models  # noqa: F401

# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hrops.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """Factory on the test engine, for reading back what a request committed."""
    return TestSessionFactory


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_user(
    *,
    email: str = "test.user@acme-hr.com",
    name: str = "Test User",
    role: str = PredefinedRole.employee.value,
    department: Optional[str] = "Engineering",
    user_id: Optional[int] = None,
    password: str = DEFAULT_PASSWORD,
) -> dict:
    data = dict(
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role,
        department=department,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
    if user_id is not None:
        data["id"] = user_id
    return data


async def _seed_user(db: AsyncSession, **kwargs) -> User:
    """Insert and commit a user.

    Committed so a request that fails (and rolls back the shared
    connection) does not take the fixture data with it.
    """
    user = User(**_make_user(**kwargs))
    db.add(user)
    await db.commit()
    return user


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(
    user_id: int,
    email: str = "test.user@acme-hr.com",
    role: str = PredefinedRole.employee.value,
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": token_type,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user: User) -> dict[str, str]:
    """Bearer headers for an already-persisted user."""
    token = create_access_token(user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin(db) -> User:
    return await _seed_user(
        db, email="admin@acme-hr.com", name="Ada Admin", role=PredefinedRole.admin.value,
    )


@pytest.fixture
async def manager(db) -> User:
    return await _seed_user(
        db, email="manager@acme-hr.com", name="Max Manager", role=PredefinedRole.manager.value,
    )


@pytest.fixture
async def hr_officer(db) -> User:
    return await _seed_user(
        db, email="hr@acme-hr.com", name="Hana HR", role=PredefinedRole.hr_officer.value,
    )


@pytest.fixture
async def payroll_officer(db) -> User:
    return await _seed_user(
        db, email="payroll@acme-hr.com", name="Pat Payroll",
        role=PredefinedRole.payroll_officer.value,
    )


@pytest.fixture
async def employee(db) -> User:
    return await _seed_user(db, email="emp@acme-hr.com", name="Eve Employee")


@pytest.fixture
async def other_employee(db) -> User:
    return await _seed_user(db, email="other@acme-hr.com", name="Omar Other")
