"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own transaction that rolls back after the test.
- The test database `staykasa_test` must exist before running tests.
"""

import uuid
from collections.abc import AsyncGenerator, Iterable
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from staykasa.api.deps import get_notifier
from staykasa.auth.jwt import create_token_pair
from staykasa.auth.passwords import hash_password
from staykasa.config import settings
from staykasa.database import Base, get_db
from staykasa.main import app
from staykasa.models.property import Property
from staykasa.models.user import User

# ---------------------------------------------------------------------------
# Test database engine: uses the same PG instance but `staykasa_test` DB.
# Replace the last path segment of the configured URL with the test DB name.
# ---------------------------------------------------------------------------

_base_url = settings.async_database_url
_test_db_url = _base_url.rsplit("/", 1)[0] + "/staykasa_test"


def _make_engine():
    return create_async_engine(
        _test_db_url,
        echo=False,
        pool_pre_ping=True,
    )


class RecordingNotifier:
    """Notifier that keeps every event in memory instead of delivering it."""

    def __init__(self) -> None:
        self.events: list[tuple[list[uuid.UUID], str, dict]] = []

    def notify(self, recipient_ids: Iterable[uuid.UUID], event_type: str, payload: dict) -> None:
        self.events.append((list(recipient_ids), event_type, payload))

    def of_type(self, event_type: str) -> list[tuple[list[uuid.UUID], str, dict]]:
        return [e for e in self.events if e[1] == event_type]


# ---------------------------------------------------------------------------
# Session-scoped: create / drop all tables once per test session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def test_engine():
    """Create a session-scoped engine tied to the session event loop."""
    engine = _make_engine()
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def setup_test_db(test_engine):
    """Create all tables (and the btree_gist extension) at the start of the session, drop them at the end."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine, setup_test_db) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, notifier: RecordingNotifier) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session and the recording notifier."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: users per role
# ---------------------------------------------------------------------------


async def _make_user(db: AsyncSession, role: str, first_name: str) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        first_name=first_name,
        last_name="Tester",
        is_active=True,
        role=role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A guest account."""
    return await _make_user(db_session, "guest", "Ama")


@pytest_asyncio.fixture
async def other_guest(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "guest", "Kofi")


@pytest_asyncio.fixture
async def host_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "host", "Esi")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin", "Yaw")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Return Authorization headers for the guest user."""
    return _headers_for(test_user)


@pytest_asyncio.fixture
async def other_guest_headers(other_guest: User) -> dict[str, str]:
    return _headers_for(other_guest)


@pytest_asyncio.fixture
async def host_headers(host_user: User) -> dict[str, str]:
    return _headers_for(host_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict[str, str]:
    return _headers_for(admin_user)


# ---------------------------------------------------------------------------
# Convenience fixtures: property
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession, host_user: User) -> Property:
    """An active property for 4 guests at 1000 a night, owned by ``host_user``."""
    prop = Property(
        owner_id=host_user.id,
        title="Labadi Beach House",
        location="Accra, Ghana",
        price=Decimal("1000.00"),
        max_guests=4,
        is_active=True,
    )
    db_session.add(prop)
    await db_session.flush()
    await db_session.refresh(prop)
    return prop
