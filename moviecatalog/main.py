# moviecatalog/main.py
from __future__ import annotations

"""
# MovieCatalog API · Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the movie catalog backend.

## Middleware order
1) request id → 2) CORS → 3) gzip

## Probes
- `/healthz` : liveness (process up).
- `/readyz` : readiness (quick DB check when the SQL repository is active).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.responses import JSONResponse

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
from moviecatalog.core import logger as _logsetup  # noqa: F401

from moviecatalog.api.v1.routers import router as api_v1_router
from moviecatalog.core.config import settings
from moviecatalog.core.exception_handlers import (
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from moviecatalog.core.exceptions import AppException
from moviecatalog.db.session import async_engine, db_healthcheck, session_scope
from moviecatalog.middleware.request_id import RequestIDMiddleware
from moviecatalog.repositories import get_catalog_repository
from moviecatalog.services.seed import seed_demo_catalog

logger = logging.getLogger("moviecatalog")


def _uses_sql_repository() -> bool:
    return settings.CATALOG_REPOSITORY_IMPL.endswith(":SqlCatalogRepository")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifecycle manager.

    Startup:
        - Log a startup banner.
        - Seed the demo catalog when `SEED_ON_STARTUP` is set.

    Shutdown:
        - Dispose the async DB engine.
    """
    logger.info("✅ %s starting up (env=%s)", settings.PROJECT_NAME, settings.ENV)

    if settings.SEED_ON_STARTUP:
        async with session_scope() as session:
            movies, reviews = await seed_demo_catalog(get_catalog_repository(session))
        logger.info("🌱 Startup seeding added %s movies, %s reviews", movies, reviews)

    try:
        yield
    finally:
        await async_engine.dispose()
        logger.info("🛑 Database engine disposed")
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: fully wired application with middleware, exception handlers,
        routers, and health/readiness endpoints.
    """
    enable_docs = settings.ENABLE_DOCS
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    # ── Middlewares (last added runs first) ─────────────────────────────────
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Location"],
    )
    app.add_middleware(RequestIDMiddleware)

    # ── Exception handlers ──────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)  # type: ignore[arg-type]

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """
        Liveness probe.

        Returns:
            {"ok": True} when the process is responsive. No external checks.
        """
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    async def readyz() -> JSONResponse:
        """
        Readiness probe.

        Returns:
            `ready` plus per-dependency booleans; 503 while the DB is unreachable.
        """
        db_ok = await db_healthcheck() if _uses_sql_repository() else True
        body = {"ready": db_ok, "checks": {"db": db_ok}}
        return JSONResponse(body, status_code=200 if db_ok else 503)

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Minimal root that points to docs (when enabled)."""
        body = {
            "name": settings.PROJECT_NAME,
            "docs": app.docs_url or "",
            "version": settings.VERSION,
            "api": settings.API_V1_STR,
        }
        return JSONResponse(body)

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn moviecatalog.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moviecatalog.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
