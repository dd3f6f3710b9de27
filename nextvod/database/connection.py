"""
Database connection and session management.

Builds the async engine and session factory used by the SQL channel store.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from nextvod.config import DatabaseConfig
from nextvod.database.models import Base

logger = logging.getLogger(__name__)

_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
    "mysql": "mysql+aiomysql",
}


def _get_async_url(url: str) -> str:
    """
    Convert a sync database URL to its async driver form.

    URLs that already name a driver (``scheme+driver://``) are returned as-is.
    """
    scheme, sep, rest = url.partition("://")
    if not sep or "+" in scheme:
        return url
    driver = _ASYNC_DRIVERS.get(scheme)
    if driver is None:
        return url
    return f"{driver}://{rest}"


def _is_memory_sqlite(url: str) -> bool:
    path = url.partition("://")[2].lstrip("/")
    return path in ("", ":memory:") or "mode=memory" in url


def _build_engine_kwargs(url: str, echo: bool) -> dict[str, Any]:
    """Build engine keyword arguments based on database type."""
    kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            # One shared connection keeps in-memory databases alive
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


async def init_db(config: DatabaseConfig) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create the async engine, ensure tables exist and return a session factory.

    Args:
        config: Database settings

    Returns:
        Engine and session factory
    """
    async_url = _get_async_url(config.url)
    engine = create_async_engine(async_url, **_build_engine_kwargs(async_url, config.echo))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")
    return engine, session_factory
