# moviecatalog/db/base_class.py
from __future__ import annotations

"""
# MovieCatalog · SQLAlchemy Base & Mixins

SQLAlchemy 2.0 declarative **Base** with:
- Global **naming conventions** (Alembic-friendly)
- Explicit plural table names on the models (`movies`, `reviews`)
- Common mixins:
  - `PKMixin` : BIGINT surrogate primary key
  - `TimestampMixin` : `created_at` / `updated_at` (UTC)

Usage:
    from moviecatalog.db.base_class import Base, PKMixin, TimestampMixin

    class Movie(PKMixin, Base):
        __tablename__ = "movies"
        title: Mapped[str] = mapped_column(String(255))
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# ──────────────────────────────────────────────────────────────────────────────
# 🏷️ Naming conventions (stable constraint names for Alembic)
# ──────────────────────────────────────────────────────────────────────────────

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
# 🧱 Declarative Base
# ──────────────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """Global declarative base for catalog models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    def __repr__(self) -> str:  # pragma: no cover (repr convenience)
        attrs = [
            f"{key}={getattr(self, key)!r}"
            for key in ("id", "movie_id", "title", "rating")
            if key in self.__dict__
        ]
        return f"{self.__class__.__name__}({', '.join(attrs)})"


# ──────────────────────────────────────────────────────────────────────────────
# 🧩 Common mixins
# ──────────────────────────────────────────────────────────────────────────────

class PKMixin:
    """Surrogate BIGINT primary key (auto-increment; INTEGER rowid on SQLite)."""
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )


class TimestampMixin:
    """
    Timestamps (UTC), always system-assigned.
    - `created_at`: set once at insert
    - `updated_at`: set at insert and refreshed on every update
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


__all__ = [
    "Base",
    "PKMixin",
    "TimestampMixin",
    "NAMING_CONVENTION",
    "utcnow",
]
