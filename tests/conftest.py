"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Settings never point at a real database file during tests
    - Every test using the DB gets a fresh in-memory SQLite database with the schema created
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from ministry.db.base import Base  # noqa: E402
from ministry.db.session import build_engine, create_session_factory  # noqa: E402
import ministry.models  # noqa: F401,E402


@pytest.fixture
async def test_engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
