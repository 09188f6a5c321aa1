"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, FastAPI dependency
for database session injection and table creation.

Dependencies: sqlalchemy, aiosqlite (default) or asyncpg, audit_assistant.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from audit_assistant.boundary.db.base import Base
from audit_assistant.configs import get_settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE and FK checks unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_async_engine(url: str, echo: bool = False, **pool_options: Any) -> AsyncEngine:
    """
    Create an async engine for a URL.

    SQLite engines get foreign-key enforcement on every connection; other
    backends receive the pool options and pre-ping.

    Args:
        url: Async SQLAlchemy URL (sqlite+aiosqlite://..., postgresql+asyncpg://...)
        echo: Echo SQL statements
        **pool_options: pool_size/max_overflow/pool_timeout/poolclass/connect_args

    Returns:
        AsyncEngine: Configured engine
    """
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo, **pool_options)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(url, echo=echo, pool_pre_ping=True, **pool_options)


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Get the process-wide async engine.

    Created once from settings and reused by every request so the
    connection pool is shared.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        return build_async_engine(db_config.url, echo=db_config.echo_sql)

    return build_async_engine(
        db_config.url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    autoflush=False and expire_on_commit=False give explicit transaction
    control; the service layer decides when to commit.

    Args:
        engine: Engine to bind, defaults to the process-wide engine

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and closes it
    after the route completes, even if exceptions occur. Uncommitted work
    is rolled back on close.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Usage:
        @router.get("/sessions/{id}")
        async def get_session(id: str, db: AsyncSession = Depends(get_async_db)):
            return await session_crud.get_by_id(db, id)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register with Base.metadata
    from audit_assistant.boundary.db import models  # noqa: F401

    target = engine or get_async_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the cached engine and forget it."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
        get_async_engine.cache_clear()
