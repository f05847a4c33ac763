"""Service test fixtures - in-memory repository, controllable clock, FastAPI test client.

Invariants:
    - Service tests run against InMemoryUserRepository (same contract as the SQL backend)
    - The clock only moves when a test advances it
    - HTTP tests get a fresh in-memory SQLite database; get_db is overridden to use it
    - db_manager patched so the readiness probe sees the test engine
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

import ministry.infrastructure.database as db_module
from ministry.infrastructure.database import DatabaseSessionManager, get_db
from ministry.infrastructure.memory_repository import InMemoryUserRepository
from ministry.main import app
from ministry.services.user_service import UserService


class FakeClock:
    """Callable clock returning a fixed UTC instant until advanced."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def repo():
    return InMemoryUserRepository()


@pytest.fixture
def service(repo, clock):
    return UserService(repo, default_timeout=5.0, clock=clock)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory

    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
