# tests/fixtures/app.py

"""
🧩 App Fixture:
- Builds the production app via `create_app()`
- Swaps the repository dependency for the per-test in-memory catalog
- Returns sync (TestClient) and async (httpx) clients for integration tests
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from moviecatalog.api.deps import get_repository
from moviecatalog.main import create_app
from moviecatalog.repositories.memory import MemoryCatalogRepository


@pytest.fixture()
def app(repo: MemoryCatalogRepository) -> FastAPI:
    """
    🧪 Full application wired to the test repository.
    """
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: repo
    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # Not entered as a context manager: lifespan (seeding, engine dispose) stays off.
    return TestClient(app)


@pytest.fixture()
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    🌐 Async HTTP client bound to the test app.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


__all__ = ["app", "client", "async_client"]
