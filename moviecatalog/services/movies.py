"""
🎬 Movie catalog service
=======================

CRUD over movies plus the paged multi-criteria search.

Search pipeline
---------------
raw page/size → `normalize()`            (clamp size, reject negative page)
criteria      → `MovieSearchCriteria.check()`
sort string   → `parse_sort()`           (allow-list, asc/desc)
criteria      → `build_movie_predicates()` → repository query
results       → `build_page()`           (envelope with consistent flags)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from moviecatalog.core.config import settings
from moviecatalog.core.exceptions import (
    DuplicateMovie,
    InvalidMovieData,
    InvalidSearchParameter,
    MovieNotFound,
    field_error,
)
from moviecatalog.db.models.movie import (
    DIRECTOR_MAX,
    EARLIEST_RELEASE_YEAR,
    GENRE_MAX,
    TITLE_MAX,
    Movie,
)
from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.schemas.movies import MovieIn, MovieOut
from moviecatalog.schemas.pagination import Page
from moviecatalog.schemas.search import SEARCH_YEAR_AHEAD, MovieSearchCriteria
from moviecatalog.services.pagination import build_page, normalize, offset_of
from moviecatalog.services.predicates import (
    MOVIE_SORT_FIELDS,
    build_movie_predicates,
    genre_predicate,
    parse_sort,
)
from moviecatalog.services.rating import round_rating

log = logging.getLogger(__name__)

DEFAULT_MOVIE_SORT = "title,asc"
DEFAULT_TOP_RATED = 10
MAX_TOP_RATED = 100

MovieData = Union[MovieIn, Mapping[str, Any]]


# ─────────────────────────────────────────────────────────────
# 🧾 Validation
# ─────────────────────────────────────────────────────────────
def _get(data: MovieData, name: str, alias: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(name, data.get(alias))
    return getattr(data, name, None)


def _required_text(errors: List[Dict[str, Any]], field: str, value: Any, limit: int) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        errors.append(field_error(field, "must not be blank", value))
        return None
    if len(value.strip()) > limit:
        errors.append(field_error(field, f"must not exceed {limit} characters"))
        return None
    return value.strip()


def validate_movie_data(data: MovieData, *, today: Optional[datetime] = None) -> Dict[str, Any]:
    """Check a create/replace payload; raises `InvalidMovieData` listing every bad field."""
    errors: List[Dict[str, Any]] = []
    title = _required_text(errors, "title", _get(data, "title", "title"), TITLE_MAX)
    director = _required_text(errors, "director", _get(data, "director", "director"), DIRECTOR_MAX)
    genre = _required_text(errors, "genre", _get(data, "genre", "genre"), GENRE_MAX)

    latest = (today or datetime.now(timezone.utc)).year + SEARCH_YEAR_AHEAD
    year = _get(data, "release_year", "releaseYear")
    if year is None:
        errors.append(field_error("releaseYear", "is required"))
    elif isinstance(year, bool) or not isinstance(year, int):
        errors.append(field_error("releaseYear", "must be an integer", year))
    elif not (EARLIEST_RELEASE_YEAR <= year <= latest):
        errors.append(field_error("releaseYear", f"must be between {EARLIEST_RELEASE_YEAR} and {latest}", year))

    if errors:
        raise InvalidMovieData.from_field_errors(errors)
    return {"title": title, "director": director, "genre": genre, "release_year": year}


# ─────────────────────────────────────────────────────────────
# 🧠 Service
# ─────────────────────────────────────────────────────────────
class MovieService:
    def __init__(self, repo: CatalogRepositoryProtocol) -> None:
        self.repo = repo

    async def get_movie(self, movie_id: int) -> Movie:
        movie = await self.repo.get_movie(movie_id)
        if movie is None:
            raise MovieNotFound(movie_id)
        return movie

    async def list_movies(self) -> List[Movie]:
        return await self.repo.list_movies()

    async def create_movie(self, data: MovieData) -> Movie:
        fields = validate_movie_data(data)
        async with self.repo.transaction():
            if await self.repo.movie_exists(fields["title"], fields["director"]):
                raise DuplicateMovie(fields["title"], fields["director"])
            movie = await self.repo.add_movie(Movie(rating=None, **fields))
        log.info("Movie %s created: %r by %r", movie.id, movie.title, movie.director)
        return movie

    async def update_movie(self, movie_id: int, data: MovieData) -> Movie:
        async with self.repo.transaction():
            movie = await self.repo.get_movie(movie_id, for_update=True)
            if movie is None:
                raise MovieNotFound(movie_id)
            fields = validate_movie_data(data)
            if await self.repo.movie_exists(fields["title"], fields["director"], exclude_id=movie_id):
                raise DuplicateMovie(fields["title"], fields["director"])
            for key, value in fields.items():
                setattr(movie, key, value)
            movie = await self.repo.save_movie(movie)
        log.info("Movie %s updated", movie_id)
        return movie

    async def delete_movie(self, movie_id: int) -> None:
        async with self.repo.transaction():
            movie = await self.repo.get_movie(movie_id, for_update=True)
            if movie is None:
                raise MovieNotFound(movie_id)
            await self.repo.delete_movie(movie)
        log.info("Movie %s deleted (reviews cascaded)", movie_id)

    # ── Search ───────────────────────────────────────────────
    async def search(
        self,
        criteria: Optional[MovieSearchCriteria] = None,
        *,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> Page:
        page, size = normalize(
            page, size, default_size=settings.DEFAULT_PAGE_SIZE, max_size=settings.MAX_PAGE_SIZE
        )
        checked = (criteria or MovieSearchCriteria()).check()
        spec = parse_sort(sort, MOVIE_SORT_FIELDS, default=DEFAULT_MOVIE_SORT)

        items, total = await self.repo.query_movies(
            build_movie_predicates(checked), spec, offset=offset_of(page, size), limit=size
        )
        log.debug("Movie search %s page=%s size=%s sort=%s -> %s hits", checked, page, size, spec, total)
        return build_page(
            [MovieOut.model_validate(m) for m in items],
            page=page,
            size=size,
            total=total,
            sort=str(spec),
        )

    # ── Catalog stats ────────────────────────────────────────
    async def top_rated(self, limit: Optional[int] = None) -> List[Movie]:
        limit = DEFAULT_TOP_RATED if limit is None else min(max(int(limit), 1), MAX_TOP_RATED)
        return await self.repo.top_rated_movies(limit)

    async def average_rating(self) -> Tuple[Optional[float], int]:
        """Mean of all movie ratings (one decimal, half-up) and how many were rated."""
        mean, count = await self.repo.movie_rating_stats()
        if mean is None:
            return None, 0
        return float(round_rating(mean)), count

    async def count_by_genre(self, genre: Optional[str]) -> int:
        if genre is None or not genre.strip():
            raise InvalidSearchParameter("genre", "must not be empty or whitespace", value=genre)
        return await self.repo.count_movies([genre_predicate(genre.strip())])


__all__ = ["MovieService", "validate_movie_data", "DEFAULT_MOVIE_SORT"]
