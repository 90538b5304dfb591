"""Database configuration and session management.

This module constructs an asynchronous SQLAlchemy engine and session
factory for the application from ``settings.DATABASE_URL``.  Plain
``sqlite://`` URLs are upgraded to the ``aiosqlite`` driver so the same
value works for synchronous tooling and the async runtime.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from tablemate.core.config import settings

logger = logging.getLogger(__name__)


def normalise_database_url(url: str) -> str:
    """Return ``url`` with an async driver selected for SQLite."""
    url_obj = make_url(url)
    if url_obj.drivername == "sqlite":
        url_obj = url_obj.set(drivername="sqlite+aiosqlite")
    return url_obj.render_as_string(hide_password=False)


db_url = normalise_database_url(settings.DATABASE_URL)

engine_kwargs: dict[str, Any] = dict(echo=False, pool_pre_ping=True)
connect_args: dict[str, Any] = {}
if db_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_async_engine(db_url, connect_args=connect_args, **engine_kwargs)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Declarative base
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a database session.

    Each session is scoped to the request and closed after use.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create all database tables defined on the declarative ``Base``."""
    async with engine.begin() as conn:
        # Import all models to ensure metadata is populated
        from tablemate.models import tables  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready (%s)", make_url(db_url).render_as_string(hide_password=True))


def get_db_debug_info() -> Dict[str, Any]:
    """Return non-sensitive information about the current DB engine for debugging."""
    url_obj = make_url(db_url)
    return {
        "environment": settings.ENVIRONMENT,
        "storage_backend": settings.STORAGE_BACKEND,
        "drivername": url_obj.drivername,
        "host": url_obj.host,
        "database": url_obj.database,
        "url": url_obj.render_as_string(hide_password=True),
    }
