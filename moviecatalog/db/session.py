# moviecatalog/db/session.py
from __future__ import annotations

"""
MovieCatalog · Database Engine & Session Dependencies

- One async engine/session factory for FastAPI, the seeder and Alembic.
- `get_async_db()` yields a request-scoped session and rolls back on error.
- Creating the engine never connects; the first query does.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from moviecatalog.core.config import settings

logger = logging.getLogger(__name__)

ASYNC_DATABASE_URL: str = settings.ASYNC_DATABASE_URL

# Pool knobs
_POOL_PRE_PING = True
_POOL_RECYCLE = 1800
_POOL_TIMEOUT = 30

# ─────────────────────────────────────────────────────────────
# ⚡ ASYNC ENGINE
# ─────────────────────────────────────────────────────────────

async_engine: AsyncEngine = create_async_engine(
    ASYNC_DATABASE_URL,
    pool_pre_ping=_POOL_PRE_PING,
    pool_recycle=_POOL_RECYCLE,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=_POOL_TIMEOUT,
    echo=settings.DB_ECHO,
)

async_session_maker = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async SQLAlchemy session."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Standalone session for code running outside a request (seeding, scripts)."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def db_healthcheck() -> bool:
    """Quick SELECT 1 to verify DB connectivity (used by /readyz)."""
    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("DB healthcheck failed")
        return False


__all__ = [
    "async_engine",
    "async_session_maker",
    "get_async_db",
    "session_scope",
    "db_healthcheck",
]
