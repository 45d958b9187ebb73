from __future__ import annotations

"""SQLAlchemy (async) catalog repository.

Wraps one request-scoped `AsyncSession`. `transaction()` follows the same
flush → commit / rollback → re-raise shape used across the write routes; the
outermost block owns the commit so nested blocks join it.

Review mutations lock the owning movie row with `SELECT ... FOR UPDATE`
(`get_movie(..., for_update=True)`), which serializes concurrent
read-recompute-write cycles on the same movie's aggregate. The review being
changed is re-read under that lock (`get_review(..., for_update=True)`), so a
delete that committed first turns into `ReviewNotFound` instead of a stale write.
"""

import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moviecatalog.core.exceptions import DuplicateMovie
from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import Review
from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.services.predicates import Predicate, SortSpec, conjoin, order_by_clauses

log = logging.getLogger(__name__)

# Postgres names the constraint; SQLite names the columns
_UNIQUE_MARKERS = ("uq_movies_title_director", "movies.title, movies.director")


def _is_title_director_clash(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _UNIQUE_MARKERS)


class SqlCatalogRepository(CatalogRepositoryProtocol):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._depth = 0

    @classmethod
    def for_session(cls, session: AsyncSession) -> "SqlCatalogRepository":
        return cls(session)

    # ── Unit of work ─────────────────────────────────────────
    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlCatalogRepository"]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self
            await self.session.flush()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        finally:
            self._depth = 0

    # ── Movies ───────────────────────────────────────────────
    async def get_movie(self, movie_id: int, *, for_update: bool = False) -> Optional[Movie]:
        stmt = select(Movie).where(Movie.id == movie_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def movie_exists(self, title: str, director: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(Movie.id).where(Movie.title == title, Movie.director == director)
        if exclude_id is not None:
            stmt = stmt.where(Movie.id != exclude_id)
        return (await self.session.execute(stmt.limit(1))).first() is not None

    async def _flush_movie(self, movie: Movie) -> Movie:
        self.session.add(movie)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if _is_title_director_clash(exc):
                log.warning("Concurrent insert of %r by %r hit the unique constraint", movie.title, movie.director)
                raise DuplicateMovie(movie.title, movie.director) from exc
            raise
        return movie

    async def add_movie(self, movie: Movie) -> Movie:
        return await self._flush_movie(movie)

    async def save_movie(self, movie: Movie) -> Movie:
        return await self._flush_movie(movie)

    async def delete_movie(self, movie: Movie) -> None:
        # reviews go with it via ON DELETE CASCADE
        await self.session.execute(delete(Movie).where(Movie.id == movie.id))

    async def list_movies(self) -> List[Movie]:
        rows = await self.session.execute(select(Movie).order_by(Movie.id.asc()))
        return list(rows.scalars().all())

    async def count_movies(self, predicates: Sequence[Predicate] = ()) -> int:
        stmt = select(func.count()).select_from(Movie).where(conjoin(predicates))
        return int((await self.session.execute(stmt)).scalar_one())

    async def query_movies(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Movie], int]:
        where = conjoin(predicates)
        total = int((await self.session.execute(
            select(func.count()).select_from(Movie).where(where)
        )).scalar_one())
        stmt = (
            select(Movie)
            .where(where)
            .order_by(*order_by_clauses(Movie, sort))
            .offset(offset)
            .limit(limit)
        )
        items = list((await self.session.execute(stmt)).scalars().all())
        return items, total

    async def top_rated_movies(self, limit: int) -> List[Movie]:
        stmt = (
            select(Movie)
            .where(Movie.rating.is_not(None))
            .order_by(Movie.rating.desc(), Movie.id.asc())
            .limit(limit)
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def movie_rating_stats(self) -> Tuple[Optional[Decimal], int]:
        row = (await self.session.execute(
            select(func.avg(Movie.rating), func.count(Movie.rating))
        )).one()
        avg, count = row
        return (Decimal(str(avg)) if avg is not None else None), int(count or 0)

    # ── Reviews ──────────────────────────────────────────────
    async def get_review(self, review_id: int, *, for_update: bool = False) -> Optional[Review]:
        if not for_update:
            return await self.session.get(Review, review_id)
        stmt = (
            select(Review)
            .where(Review.id == review_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def add_review(self, review: Review) -> Review:
        self.session.add(review)
        await self.session.flush()
        return review

    async def save_review(self, review: Review) -> Review:
        self.session.add(review)
        await self.session.flush()
        return review

    async def delete_review(self, review: Review) -> None:
        await self.session.execute(delete(Review).where(Review.id == review.id))

    async def list_reviews_for_movie(self, movie_id: int) -> List[Review]:
        stmt = select(Review).where(Review.movie_id == movie_id).order_by(Review.id.asc())
        return list((await self.session.execute(stmt)).scalars().all())

    async def review_ratings_for_movie(self, movie_id: int) -> List[float]:
        stmt = select(Review.rating).where(Review.movie_id == movie_id)
        return list((await self.session.execute(stmt)).scalars().all())

    async def list_reviews(self) -> List[Review]:
        rows = await self.session.execute(select(Review).order_by(Review.id.asc()))
        return list(rows.scalars().all())

    async def query_reviews(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[List[Review], int]:
        where = conjoin(predicates)
        total = int((await self.session.execute(
            select(func.count()).select_from(Review).where(where)
        )).scalar_one())
        stmt = (
            select(Review)
            .where(where)
            .order_by(*order_by_clauses(Review, sort))
            .offset(offset)
            .limit(limit)
        )
        return list((await self.session.execute(stmt)).scalars().all()), total
