# tests/fixtures/db.py
"""
Storage fixtures for tests:
- asyncio as the only anyio backend
- A fresh in-memory catalog per test (never the process-wide shared one)
- A real async engine for the SQL repository: SQLite file per test by
  default, or `TEST_DATABASE_URL` (e.g. postgresql+asyncpg://...) when set
- NullPool (no lingering connections between tests)
"""

from typing import AsyncGenerator
import os

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from moviecatalog.db import base
from moviecatalog.repositories.memory import MemoryCatalogRepository
from moviecatalog.repositories.sql import SqlCatalogRepository


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def repo() -> MemoryCatalogRepository:
    """Isolated, empty catalog."""
    return MemoryCatalogRepository()


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture()
async def sql_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with the catalog tables created fresh for this test."""
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    engine = create_async_engine(url, echo=False, poolclass=NullPool)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(base.Base.metadata.drop_all)
        await conn.run_sync(base.Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(base.Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def sql_session_factory(sql_engine: AsyncEngine) -> async_sessionmaker:
    """Same session settings as the app: objects stay readable after commit."""
    return async_sessionmaker(bind=sql_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def sql_repo(sql_session_factory) -> AsyncGenerator[SqlCatalogRepository, None]:
    """SQL repository over one session, like a single request."""
    async with sql_session_factory() as session:
        yield SqlCatalogRepository(session)


__all__ = ["anyio_backend", "repo", "sql_engine", "sql_session_factory", "sql_repo"]
