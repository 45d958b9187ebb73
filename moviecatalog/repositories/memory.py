from __future__ import annotations

"""In-memory catalog repository.

Process-local storage for tests and demos. Rows are kept as plain dicts and
handed out as fresh, detached `Movie` / `Review` instances.

`transaction()` snapshots every table on entry and restores the snapshot if
the block raises, so a failed rating write also undoes the review write.
"""

import copy
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple

from moviecatalog.db.base_class import utcnow
from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import Review
from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.services.predicates import Predicate, SortSpec, matches_all, sort_rows

_MOVIE_FIELDS = ("id", "title", "director", "genre", "release_year", "rating", "created_at", "updated_at")
_REVIEW_FIELDS = ("id", "movie_id", "user_name", "review_text", "rating", "created_at", "updated_at")


class MemoryCatalogRepository(CatalogRepositoryProtocol):
    _shared: Optional["MemoryCatalogRepository"] = None

    def __init__(self) -> None:
        self._movies: Dict[int, Dict[str, Any]] = {}
        self._reviews: Dict[int, Dict[str, Any]] = {}
        self._next_movie_id = 1
        self._next_review_id = 1
        self._depth = 0

    @classmethod
    def for_session(cls, session=None) -> "MemoryCatalogRepository":
        """Process-wide instance; the session is irrelevant here."""
        if cls._shared is None:
            cls._shared = cls()
        return cls._shared

    # ── Unit of work ─────────────────────────────────────────
    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["MemoryCatalogRepository"]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = (
            copy.deepcopy(self._movies),
            copy.deepcopy(self._reviews),
            self._next_movie_id,
            self._next_review_id,
        )
        self._depth = 1
        try:
            yield self
        except BaseException:
            self._movies, self._reviews, self._next_movie_id, self._next_review_id = snapshot
            raise
        finally:
            self._depth = 0

    # ── Helpers ──────────────────────────────────────────────
    @staticmethod
    def _movie(row: Dict[str, Any]) -> Movie:
        return Movie(**row)

    @staticmethod
    def _review(row: Dict[str, Any]) -> Review:
        return Review(**row)

    def _movie_rows(self, predicates: Sequence[Predicate] = ()) -> List[Movie]:
        movies = [self._movie(r) for r in self._movies.values()]
        return [m for m in movies if matches_all(predicates, m)]

    # ── Movies ───────────────────────────────────────────────
    async def get_movie(self, movie_id: int, *, for_update: bool = False) -> Optional[Movie]:
        row = self._movies.get(movie_id)
        return self._movie(row) if row is not None else None

    async def movie_exists(self, title: str, director: str, *, exclude_id: Optional[int] = None) -> bool:
        return any(
            r["title"] == title and r["director"] == director and r["id"] != exclude_id
            for r in self._movies.values()
        )

    async def add_movie(self, movie: Movie) -> Movie:
        now = utcnow()
        movie.id = self._next_movie_id
        self._next_movie_id += 1
        movie.created_at = now
        movie.updated_at = now
        self._movies[movie.id] = {f: getattr(movie, f) for f in _MOVIE_FIELDS}
        return movie

    async def save_movie(self, movie: Movie) -> Movie:
        movie.updated_at = utcnow()
        self._movies[movie.id] = {f: getattr(movie, f) for f in _MOVIE_FIELDS}
        return movie

    async def delete_movie(self, movie: Movie) -> None:
        self._movies.pop(movie.id, None)
        self._reviews = {rid: r for rid, r in self._reviews.items() if r["movie_id"] != movie.id}

    async def list_movies(self) -> List[Movie]:
        return sorted(self._movie_rows(), key=lambda m: m.id)

    async def count_movies(self, predicates: Sequence[Predicate] = ()) -> int:
        return len(self._movie_rows(predicates))

    async def query_movies(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Movie], int]:
        matched = sort_rows(self._movie_rows(predicates), sort)
        return matched[offset: offset + limit], len(matched)

    async def top_rated_movies(self, limit: int) -> List[Movie]:
        rated = [m for m in self._movie_rows() if m.rating is not None]
        rated.sort(key=lambda m: m.id)
        rated.sort(key=lambda m: m.rating, reverse=True)
        return rated[:limit]

    async def movie_rating_stats(self) -> Tuple[Optional[Decimal], int]:
        ratings = [Decimal(str(r["rating"])) for r in self._movies.values() if r["rating"] is not None]
        if not ratings:
            return None, 0
        return sum(ratings, Decimal(0)) / len(ratings), len(ratings)

    # ── Reviews ──────────────────────────────────────────────
    async def get_review(self, review_id: int, *, for_update: bool = False) -> Optional[Review]:
        row = self._reviews.get(review_id)
        return self._review(row) if row is not None else None

    async def add_review(self, review: Review) -> Review:
        now = utcnow()
        review.id = self._next_review_id
        self._next_review_id += 1
        review.created_at = now
        review.updated_at = now
        self._reviews[review.id] = {f: getattr(review, f) for f in _REVIEW_FIELDS}
        return review

    async def save_review(self, review: Review) -> Review:
        stored = self._reviews[review.id]
        review.updated_at = utcnow()
        row = {f: getattr(review, f) for f in _REVIEW_FIELDS}
        # Owning movie and creation time are fixed once stored.
        row["movie_id"] = stored["movie_id"]
        row["created_at"] = stored["created_at"]
        self._reviews[review.id] = row
        return review

    async def delete_review(self, review: Review) -> None:
        self._reviews.pop(review.id, None)

    async def list_reviews_for_movie(self, movie_id: int) -> List[Review]:
        rows = sorted((r for r in self._reviews.values() if r["movie_id"] == movie_id), key=lambda r: r["id"])
        return [self._review(r) for r in rows]

    async def review_ratings_for_movie(self, movie_id: int) -> List[float]:
        return [r["rating"] for r in self._reviews.values() if r["movie_id"] == movie_id]

    async def list_reviews(self) -> List[Review]:
        return [self._review(r) for r in sorted(self._reviews.values(), key=lambda r: r["id"])]

    async def query_reviews(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Review], int]:
        reviews = [self._review(r) for r in self._reviews.values()]
        matched = sort_rows([r for r in reviews if matches_all(predicates, r)], sort)
        return matched[offset: offset + limit], len(matched)
