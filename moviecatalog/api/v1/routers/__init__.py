"""
🧭 MovieCatalog • API v1 Router Aggregator
=========================================

Exports the combined `router` and each sub-router so callers can mount them
as needed.

Quick usage
-----------
    from moviecatalog.api.v1.routers import router as v1_router
    app.include_router(v1_router, prefix="/api/v1")
"""

from fastapi import APIRouter

from .movies import router as movies_router
from .reviews import router as reviews_router


def build_v1_router() -> APIRouter:
    """Compose the API v1 surface into a single `APIRouter`."""
    r = APIRouter()
    # reviews first: its /movies/{id}/reviews paths are more specific
    r.include_router(reviews_router)
    r.include_router(movies_router)
    return r


router = build_v1_router()

__all__ = ["router", "build_v1_router", "movies_router", "reviews_router"]
