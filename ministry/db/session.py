"""Async Engine & Session Factory - shared by DatabaseSessionManager, scripts, and tests.

Invariants:
    - SQLite engines never receive pool sizing arguments
    - In-memory SQLite shares one connection (StaticPool) so every session sees the same tables
    - Sessions never expire attributes on commit

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures need a raw engine and factory
      without the singleton manager
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool


def is_sqlite_url(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(
    database_url: str,
    pool_size: int = 20,
    max_overflow: int = 10,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async engine with backend-appropriate pool settings."""
    options: dict[str, Any] = {"echo": echo}
    if _is_memory_sqlite(database_url):
        options["poolclass"] = StaticPool
    elif not is_sqlite_url(database_url):
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
