from __future__ import annotations

"""Catalog repository interface.

The services talk to storage only through this protocol. Implementations
return ORM instances (`Movie`, `Review`); the in-memory one returns detached
copies so callers must `save_*` to persist changes, exactly as with the SQL
one.
"""

from decimal import Decimal
from typing import AsyncContextManager, List, Optional, Sequence, Tuple

from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import Review
from moviecatalog.services.predicates import Predicate, SortSpec


class CatalogRepositoryProtocol:
    # ── Unit of work ─────────────────────────────────────────
    def transaction(self) -> AsyncContextManager["CatalogRepositoryProtocol"]:
        """Commit on clean exit, roll back on any exception. Re-entrant."""
        raise NotImplementedError

    # ── Movies ───────────────────────────────────────────────
    async def get_movie(self, movie_id: int, *, for_update: bool = False) -> Optional[Movie]:
        raise NotImplementedError

    async def movie_exists(self, title: str, director: str, *, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    async def add_movie(self, movie: Movie) -> Movie:
        raise NotImplementedError

    async def save_movie(self, movie: Movie) -> Movie:
        raise NotImplementedError

    async def delete_movie(self, movie: Movie) -> None:
        """Delete the movie and, with it, every review it owns."""
        raise NotImplementedError

    async def list_movies(self) -> List[Movie]:
        raise NotImplementedError

    async def count_movies(self, predicates: Sequence[Predicate] = ()) -> int:
        raise NotImplementedError

    async def query_movies(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Movie], int]:
        """One page of matching movies plus the total match count."""
        raise NotImplementedError

    async def top_rated_movies(self, limit: int) -> List[Movie]:
        raise NotImplementedError

    async def movie_rating_stats(self) -> Tuple[Optional[Decimal], int]:
        """(unrounded mean of non-null movie ratings, number of rated movies)."""
        raise NotImplementedError

    # ── Reviews ──────────────────────────────────────────────
    async def get_review(self, review_id: int, *, for_update: bool = False) -> Optional[Review]:
        """`for_update` locks the row and refreshes any copy already loaded."""
        raise NotImplementedError

    async def add_review(self, review: Review) -> Review:
        raise NotImplementedError

    async def save_review(self, review: Review) -> Review:
        raise NotImplementedError

    async def delete_review(self, review: Review) -> None:
        raise NotImplementedError

    async def list_reviews_for_movie(self, movie_id: int) -> List[Review]:
        raise NotImplementedError

    async def review_ratings_for_movie(self, movie_id: int) -> List[float]:
        raise NotImplementedError

    async def list_reviews(self) -> List[Review]:
        raise NotImplementedError

    async def query_reviews(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Review], int]:
        raise NotImplementedError
