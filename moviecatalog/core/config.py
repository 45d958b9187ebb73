# moviecatalog/core/config.py
from __future__ import annotations

"""
# MovieCatalog · Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; an explicit `DATABASE_URL` wins over parts.
- CSV → list helpers for CORS origins.
- Repository implementation is pluggable (`module:Class`) so tests and demos
  can run without PostgreSQL.

## Usage
    from moviecatalog.core.config import settings
"""

import logging
from typing import Annotated, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Notes:
        - `DATABASE_URL` may be given verbatim; otherwise it is assembled from
          the `POSTGRES_*` parts.
        - `CATALOG_REPOSITORY_IMPL` selects the storage backend used by the
          services (SQL by default, in-memory for tests/demos).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "MovieCatalog API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "test", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── Database (PostgreSQL) ─────────────────────────────────
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = SecretStr("postgres")
    POSTGRES_DB: str = "moviecatalog"
    DATABASE_URL_OVERRIDE: Optional[str] = Field(None, alias="DATABASE_URL")

    DB_POOL_SIZE: int = Field(10, ge=1, le=100)
    DB_MAX_OVERFLOW: int = Field(20, ge=0, le=200)
    DB_ECHO: bool = False

    # ── Catalog behaviour ─────────────────────────────────────
    CATALOG_REPOSITORY_IMPL: str = "moviecatalog.repositories.sql:SqlCatalogRepository"
    SEED_ON_STARTUP: bool = False
    DEFAULT_PAGE_SIZE: int = Field(20, ge=1, le=100)
    MAX_PAGE_SIZE: int = Field(100, ge=1, le=1000)

    # ── CORS ─────────────────────────────────────────────────
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://localhost:5173"]
    )

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _assemble_cors_origins(cls, v: str | List[str]):
        if isinstance(v, str):
            return _split_csv(v)
        return v

    @field_validator("DATABASE_URL_OVERRIDE", mode="before")
    @classmethod
    def _blank_url_is_none(cls, v):
        s = (v or "").strip() if isinstance(v, str) else v
        return s or None

    # ── Derived / convenience properties ─────────────────────
    @property
    def DATABASE_URL(self) -> str:
        """Sync DSN."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE.replace("postgresql+asyncpg://", "postgresql://")
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async SQLAlchemy DSN."""
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


# Singleton instance
settings = Settings()
