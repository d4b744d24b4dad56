"""
Database Session

Async SQLAlchemy engine and session factory lifecycle.

The session factory is the database handle shared with security realms.
It is created at application startup and disposed at shutdown; realms only
borrow it between those two points.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from realmgate.config.settings import settings
from realmgate.core.logging import logger


class _DatabaseState:
    """Container for database engine state."""

    engine: Optional[AsyncEngine] = None
    sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


_state = _DatabaseState()


def _engine_options(url: str) -> dict:
    # SQLite uses a static/singleton pool and rejects pool sizing arguments
    if url.startswith("sqlite"):
        return {"echo": settings.DATABASE_ECHO}
    return {
        "echo": settings.DATABASE_ECHO,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


async def init_db(database_url: Optional[str] = None) -> async_sessionmaker[AsyncSession]:
    """Create the engine and session factory.

    Args:
        database_url: Override for settings.DATABASE_URL

    Returns:
        The session factory to hand to realms
    """
    url = database_url or settings.DATABASE_URL
    logger.info("Initializing database engine")
    _state.engine = create_async_engine(url, **_engine_options(url))
    _state.sessionmaker = async_sessionmaker(
        bind=_state.engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database engine initialized", pool_size=settings.DATABASE_POOL_SIZE)
    return _state.sessionmaker


async def close_db() -> None:
    """Dispose the engine and forget the session factory."""
    if _state.engine:
        logger.info("Closing database engine")
        await _state.engine.dispose()
        _state.engine = None
        _state.sessionmaker = None
        logger.info("Database engine closed")


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the session factory.

    Returns:
        Session factory created by init_db

    Raises:
        RuntimeError: If the database is not initialized
    """
    if _state.sessionmaker is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _state.sessionmaker
