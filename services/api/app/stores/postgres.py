"""PostgreSQL store with async SQLAlchemy.

Handles:
- Database session management
- Idempotent schema bootstrap (single-flight per engine)
- Connection pooling

The store is optional: with no DATABASE_URL configured, init_db() is a no-op
and is_db_ready() stays False, so callers fall back to bundled data.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
import logging

from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.settings import get_settings
from app.stores.redis import acquire_lock, release_lock

logger = logging.getLogger("uvicorn.error")

SCHEMA_LOCK_KEY = "schema-init"
TTL_SCHEMA_LOCK = 30  # seconds


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


SeedFn = Callable[[AsyncSession], Awaitable[None]]


class SchemaInitializer:
    """Create tables once per engine.

    An asyncio.Lock makes concurrent first requests wait for one DDL run
    instead of racing. When Redis is available, a short distributed lock
    keeps several processes from issuing the same DDL at once. The optional
    seed runs in the same critical section, right after the tables exist.
    """

    def __init__(self, engine: AsyncEngine, seed: SeedFn | None = None):
        self._engine = engine
        self._seed = seed
        self._lock = asyncio.Lock()
        self._done = False

    async def ensure(self) -> None:
        if self._done:
            return
        async with self._lock:
            if self._done:
                return
            try:
                locked = await acquire_lock(SCHEMA_LOCK_KEY, ttl=TTL_SCHEMA_LOCK)
            except RuntimeError:
                # Redis not configured: the in-process lock is all we have.
                locked = None
            except RedisError as e:
                logger.warning(f"Schema lock unavailable, continuing without it: {e!r}")
                locked = None
            if locked is False:
                # Another process is creating the schema right now.
                logger.info("Schema init in progress elsewhere, skipping DDL for now")
                return
            try:
                # Import models so their tables are registered on Base.metadata.
                import app.models  # noqa: F401

                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                if self._seed is not None:
                    async with AsyncSession(self._engine, expire_on_commit=False) as session:
                        await self._seed(session)
                        await session.commit()
                self._done = True
                logger.info("Database schema ready")
            finally:
                if locked:
                    await self._release()

    async def _release(self) -> None:
        try:
            await release_lock(SCHEMA_LOCK_KEY)
        except RedisError as e:
            # The lock expires on its own after TTL_SCHEMA_LOCK.
            logger.warning(f"Failed to release schema lock: {e!r}")


# Engine, session factory and schema initializer (initialized on startup)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None
_schema: SchemaInitializer | None = None


async def init_db(seed: SeedFn | None = None) -> None:
    """Initialize database connection pool (no-op when no database is configured).

    Args:
        seed: Optional callback run once, right after the tables are created.
    """
    global _engine, _session_factory, _schema

    settings = get_settings()
    if not settings.has_database:
        logger.info("DATABASE_URL not set, running without a store")
        return

    _engine = create_async_engine(
        settings.async_database_url,
        echo=settings.debug,
        connect_args=settings.asyncpg_connect_args,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    _schema = SchemaInitializer(_engine, seed=seed)


async def close_db() -> None:
    """Close database connection pool."""
    global _engine, _session_factory, _schema
    if _engine:
        await _engine.dispose()
    _engine = None
    _session_factory = None
    _schema = None


def is_db_ready() -> bool:
    """True when a database is configured and init_db() has run."""
    return _session_factory is not None


async def ping_db() -> None:
    """Run a trivial query to validate connectivity."""
    async with get_session() as session:
        await session.execute(text("SELECT 1"))


async def ensure_schema() -> None:
    """Create tables on first use. Safe to call on every request."""
    if _schema is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    await _schema.ensure()


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session context manager.

    Usage:
        async with get_session() as session:
            result = await session.execute(query)
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
