# moviecatalog/db/models/__init__.py
from .movie import Movie
from .review import Review

__all__ = ["Movie", "Review"]
