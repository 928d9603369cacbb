"""
Async engine and per-request sessions.

The engine is built on first use so importing the app never needs a
database or config/.env. A request gets one session and one transaction:
get_db_session commits after the endpoint returns and rolls back if it
raised, so ownership checks and the mutations that follow stay atomic.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from notekeep.backend.core.config_schema import DatabaseSchema
from notekeep.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(db: DatabaseSchema, backend: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": db.echo, "echo_pool": db.echo_pool}
    # aiosqlite runs on a pool that rejects sizing arguments
    if backend != "sqlite":
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        from notekeep.backend.core.config import get_app_config, get_database_url

        url = make_url(get_database_url())
        _engine = create_async_engine(url, **_engine_options(get_app_config().database, url.get_backend_name()))
        logger.debug("Database engine created", extra={"url": url.render_as_string(hide_password=True)})
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)
    return _session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: the request's session, committed on success."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections during shutdown; the next use builds a new engine."""
    global _engine, _session_factory
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
