"""Async SQLAlchemy engine and sessions for the catalog database.

The engine is built lazily from ``settings.database_url`` so that importing
this module never opens a connection. Pool sizing only applies to server
databases; SQLite URLs (local runs, scripts) get SQLAlchemy's defaults.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from showroom.config import settings
from showroom.infra.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.debug}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
    return options


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first call."""
    global _engine

    if _engine is None:
        url = settings.database_url
        options = _engine_options(url)
        logger.info(
            "Creating database engine",
            backend=make_url(url).get_backend_name(),
            pool_size=options.get("pool_size"),
        )
        _engine = create_async_engine(url, **options)

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory

    if _session_factory is None:
        # Objects stay readable after commit; routes serialize them afterwards.
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a unit of work against the catalog database.

    Everything done inside the block is committed together on a clean exit.
    Any exception rolls the whole unit back and is re-raised unchanged, so a
    failed admin write leaves no partial product or category behind.

    Example:
        async with get_db_session() as session:
            await CategoryService(session).create(payload)
    """
    session = get_session_factory()()
    try:
        yield session
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.warning("Rolled back database session", error_type=type(exc).__name__)
        raise
    finally:
        await session.close()


async def create_tables() -> None:
    """Create any missing catalog tables.

    Used by the seed and import scripts against fresh local databases.
    """
    from showroom.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Catalog tables ensured", tables=sorted(Base.metadata.tables))


async def close_db_engine() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is None:
        return
    logger.info("Closing database engine")
    await _engine.dispose()
    _engine = None
    _session_factory = None


async def verify_db_connection(session: AsyncSession | None = None) -> bool:
    """Run ``SELECT 1`` and report whether the database answered.

    Args:
        session: Session to probe with. When omitted a short-lived one is
            opened, which is what the startup check does.
    """
    try:
        if session is None:
            async with get_db_session() as probe:
                await probe.execute(text("SELECT 1"))
        else:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        logger.error("Database unreachable", error=str(exc))
        return False
    return True
