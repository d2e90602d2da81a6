"""
Shared test fixtures for the attendance & leave accounting test suite.

Each test gets its own in-memory aiosqlite database; the app's ``get_db``
and ``get_now`` dependencies are overridden so requests hit that database
with a fixed "now".
"""

import os
import sys
from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-use-0123456789abcdef"
os.environ["ADMIN_API_KEY"] = "test-admin-key"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from worktrack.api.v1.deps import get_db, get_now
from worktrack.core.security import create_access_token
from worktrack.db.base import Base
from worktrack.main import app
from worktrack.models.user import User
from worktrack.store.attendance_store import AttendanceStore
from worktrack.store.user_store import UserStore

ADMIN_KEY = "test-admin-key"

# Wednesday 15 January 2025
FIXED_NOW = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


class FrozenClock:
    """Stand-in for ``get_now``; tests move it by assigning ``now``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session) -> AttendanceStore:
    return AttendanceStore(db_session)


@pytest.fixture
def user_store(db_session) -> UserStore:
    return UserStore(db_session)


# ── Seed data ───────────────────────────────────────────────────────
def make_user(user_id: str, email: str, **kwargs) -> User:
    return User(id=user_id, email=email, name=kwargs.pop("name", email.split("@")[0]), **kwargs)


@pytest.fixture
async def alice(session_factory) -> User:
    """Regular user working from home on Thursdays and Fridays."""
    user = make_user(
        "user-alice",
        "alice@example.com",
        default_wfh_days=["Thursday", "Friday"],
        onboarding_completed=True,
    )
    async with session_factory() as session:
        session.add(user)
        await session.commit()
    return user


@pytest.fixture
async def bob(session_factory) -> User:
    """Admin user with no settings stored (default quotas)."""
    user = make_user("user-bob", "bob@example.com", is_admin=True)
    async with session_factory() as session:
        session.add(user)
        await session.commit()
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, email=user.email)}"}


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a token for the given user."""
    return bearer


# ── HTTP client ─────────────────────────────────────────────────────
@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FIXED_NOW)


@pytest.fixture
async def async_client(session_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
