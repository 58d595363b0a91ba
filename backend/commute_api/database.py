"""
Commute Match Backend — Database Engine & Session Factory
==========================================================

What:  Async SQLAlchemy engine, session factory, and declarative base.
How:   Creates an async engine with connection pooling and an
       `async_sessionmaker`. Repositories receive the session factory at
       construction and open one short-lived session per operation.
Who:   Used by `commute_api.dependencies` to build repositories, by Alembic
       for metadata, and by the health check.
When:  Engine is created at module import; sessions per repository call.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (used by the test-suite) skip the pool arguments.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from commute_api.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine, applying pool options only where supported."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory shared by every repository.

    expire_on_commit=False keeps attributes readable after the owning session
    has closed, which is how repositories hand rows back to services.
    """
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# ── Engine & Factory ──────────────────────────────────────────────────────
engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with one metadata object, which Alembic and the
    test fixtures use to create the schema.
    """
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_all(bind: AsyncEngine) -> None:
    """Create every table known to `Base.metadata` (tests and local dev)."""
    # Importing the models registers them with Base.metadata
    import commute_api.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
