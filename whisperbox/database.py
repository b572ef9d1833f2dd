"""
Database Connection and Session Management

This module owns the process-wide SQLAlchemy async engine and provides
a dependency injection function for FastAPI routes to access database sessions.

The engine is not built at import time. The first caller creates it under a
lock and every later caller reuses the cached reference, so concurrent first
requests never open duplicate connection pools.
"""

import logging
import threading

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from whisperbox.config import settings


logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """
    Return the shared async engine, creating it on first use.

    create_async_engine() does not connect, so building it under a plain
    threading lock is safe from inside the event loop.
    """
    global _engine, _session_factory

    if _engine is None:
        with _engine_lock:
            # Another caller may have won the race while we waited
            if _engine is None:
                logger.info("Creating database engine")
                engine = create_async_engine(settings.DATABASE_URL, echo=False)
                # expire_on_commit=False: objects stay readable after commit,
                # async code can't lazily refresh them
                _session_factory = async_sessionmaker(
                    engine,
                    class_=AsyncSession,
                    expire_on_commit=False
                )
                _engine = engine
    return _engine


def get_session_factory() -> async_sessionmaker:
    get_engine()
    return _session_factory


async def dispose_engine():
    """Close all pooled connections and forget the cached engine."""
    global _engine, _session_factory

    with _engine_lock:
        engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Usage in FastAPI routes:
        @router.get("/endpoint")
        async def route(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Account))

    The async context manager ensures the session is properly closed
    even if an exception occurs during request handling.
    """
    async with get_session_factory()() as session:
        yield session
