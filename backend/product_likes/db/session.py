"""Async Engine & Session Factory — shared construction for app, scripts and tests.

Invariants:
    - Every session factory uses expire_on_commit=False (objects outlive their session)
    - SQLite engines never receive pool sizing arguments

Design Decisions:
    - Separate from infrastructure/database.py: alembic, scripts and test fixtures
      need the raw factory without the error-mapping session manager
    - SQLite gets a busy timeout so concurrent writers wait instead of failing fast
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def is_sqlite_url(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def build_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    """Create an async engine with backend-appropriate pool settings."""
    if is_sqlite_url(database_url):
        return create_async_engine(
            database_url,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
        )
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
