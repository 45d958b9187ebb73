# moviecatalog/db/base.py
"""
MovieCatalog · SQLAlchemy Base registry
=======================================

Import all ORM models so their tables are registered on `Base.metadata`.
Used by Alembic autogeneration and anything calling `create_all`.

Keep this file import-only; no runtime logic.
"""

from moviecatalog.db.base_class import Base
from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import Review

__all__ = ["Base", "Movie", "Review"]
