from __future__ import annotations

"""
FastAPI dependencies wiring the services to a request-scoped repository.

Tests swap storage by overriding `get_repository` in
`app.dependency_overrides` (e.g. with a `MemoryCatalogRepository`).
"""

from fastapi import Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from moviecatalog.db.session import get_async_db
from moviecatalog.repositories import get_catalog_repository
from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.services.movies import MovieService
from moviecatalog.services.reviews import ReviewService


async def get_repository(db: AsyncSession = Depends(get_async_db)) -> CatalogRepositoryProtocol:
    return get_catalog_repository(db)


def get_movie_service(repo: CatalogRepositoryProtocol = Depends(get_repository)) -> MovieService:
    return MovieService(repo)


def get_review_service(repo: CatalogRepositoryProtocol = Depends(get_repository)) -> ReviewService:
    return ReviewService(repo)


def set_total_count_header(response: Response, count: int) -> None:
    """Expose the total element count for paged and list responses."""
    response.headers["X-Total-Count"] = str(int(count))
