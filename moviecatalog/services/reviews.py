"""
⭐ Review lifecycle
==================

Adds, updates and deletes reviews while keeping each movie's aggregate rating
equal to `compute_aggregate()` of its current reviews.

Every mutation runs inside one `repo.transaction()`:

    1) lock the owning movie row
    2) write the review change
    3) re-read the movie's full set of ratings
    4) recompute and persist `movie.rating`

If any step fails the whole unit rolls back, so a review never exists without
its effect on the aggregate (and vice versa).

Review lookups are always scoped by the movie the caller claims: a review
that exists but belongs to another movie is reported as not found.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from moviecatalog.core.config import settings
from moviecatalog.core.exceptions import (
    InvalidReviewData,
    MovieNotFound,
    ReviewNotFound,
    field_error,
)
from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import (
    MAX_RATING,
    MIN_RATING,
    REVIEW_TEXT_MAX,
    USER_NAME_MAX,
    Review,
)
from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.schemas.pagination import Page
from moviecatalog.schemas.reviews import ReviewIn, ReviewOut
from moviecatalog.schemas.search import ReviewSearchCriteria
from moviecatalog.services.pagination import build_page, normalize, offset_of
from moviecatalog.services.predicates import REVIEW_SORT_FIELDS, build_review_predicates, parse_sort
from moviecatalog.services.rating import compute_aggregate

log = logging.getLogger(__name__)

DEFAULT_REVIEW_SORT = "createdAt,desc"

ReviewData = Union[ReviewIn, Mapping[str, Any]]


# ─────────────────────────────────────────────────────────────
# 🧾 Validation (the only place review content is checked)
# ─────────────────────────────────────────────────────────────
def _get(data: ReviewData, name: str, alias: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(name, data.get(alias))
    return getattr(data, name, None)


def validate_review_data(data: ReviewData) -> Dict[str, Any]:
    """
    Check user-mutable review fields and return them ready to persist.

    Raises `InvalidReviewData` listing every offending field.
    """
    errors: List[Dict[str, Any]] = []

    user_name = _get(data, "user_name", "userName")
    if not isinstance(user_name, str) or not user_name.strip():
        errors.append(field_error("userName", "must not be blank", user_name))
    elif len(user_name.strip()) > USER_NAME_MAX:
        errors.append(field_error("userName", f"must not exceed {USER_NAME_MAX} characters"))

    review_text = _get(data, "review_text", "reviewText")
    if review_text is not None and not isinstance(review_text, str):
        errors.append(field_error("reviewText", "must be text"))
    elif review_text is not None and len(review_text) > REVIEW_TEXT_MAX:
        errors.append(field_error("reviewText", f"must not exceed {REVIEW_TEXT_MAX} characters"))

    rating = _get(data, "rating", "rating")
    if rating is None:
        errors.append(field_error("rating", "is required"))
    elif isinstance(rating, bool) or not isinstance(rating, (int, float, Decimal)):
        errors.append(field_error("rating", "must be a number", rating))
    elif not math.isfinite(float(rating)) or not (MIN_RATING <= float(rating) <= MAX_RATING):
        errors.append(field_error("rating", f"must be between {MIN_RATING} and {MAX_RATING}", rating))

    if errors:
        raise InvalidReviewData.from_field_errors(errors)

    return {
        "user_name": user_name.strip(),
        "review_text": review_text,
        "rating": float(rating),
    }


# ─────────────────────────────────────────────────────────────
# 🧠 Service
# ─────────────────────────────────────────────────────────────
class ReviewService:
    def __init__(self, repo: CatalogRepositoryProtocol) -> None:
        self.repo = repo

    # ── Internals ────────────────────────────────────────────
    async def _require_movie(self, movie_id: int, *, for_update: bool = False) -> Movie:
        movie = await self.repo.get_movie(movie_id, for_update=for_update)
        if movie is None:
            raise MovieNotFound(movie_id)
        return movie

    async def _scoped_review(self, review_id: int, movie_id: Optional[int], *, for_update: bool = False) -> Review:
        review = await self.repo.get_review(review_id, for_update=for_update)
        if review is None or (movie_id is not None and review.movie_id != movie_id):
            raise ReviewNotFound(review_id, movie_id=movie_id)
        return review

    async def recompute_rating(self, movie: Movie) -> Optional[Decimal]:
        """Re-read every rating of `movie` and persist the new aggregate.

        Must run inside the caller's transaction, after the review write.
        """
        ratings = await self.repo.review_ratings_for_movie(movie.id)
        movie.rating = compute_aggregate(ratings)
        await self.repo.save_movie(movie)
        return movie.rating

    # ── Mutations ────────────────────────────────────────────
    async def add_review(self, movie_id: int, data: ReviewData) -> Review:
        async with self.repo.transaction():
            movie = await self._require_movie(movie_id, for_update=True)
            fields = validate_review_data(data)
            review = await self.repo.add_review(Review(movie_id=movie.id, **fields))
            rating = await self.recompute_rating(movie)
        log.info("Review %s added to movie %s; movie rating now %s", review.id, movie_id, rating)
        return review

    async def update_review(self, review_id: int, data: ReviewData, *, movie_id: Optional[int] = None) -> Review:
        async with self.repo.transaction():
            if movie_id is not None:
                await self._require_movie(movie_id)
            review = await self._scoped_review(review_id, movie_id)
            fields = validate_review_data(data)
            movie = await self._require_movie(review.movie_id, for_update=True)
            # re-read under the movie lock; a concurrent delete may have won
            review = await self._scoped_review(review_id, movie.id, for_update=True)

            review.user_name = fields["user_name"]
            review.review_text = fields["review_text"]
            review.rating = fields["rating"]
            review = await self.repo.save_review(review)
            rating = await self.recompute_rating(movie)
        log.info("Review %s updated; movie %s rating now %s", review_id, review.movie_id, rating)
        return review

    async def delete_review(self, review_id: int, *, movie_id: Optional[int] = None) -> None:
        async with self.repo.transaction():
            if movie_id is not None:
                await self._require_movie(movie_id)
            owner_id = (await self._scoped_review(review_id, movie_id)).movie_id
            movie = await self._require_movie(owner_id, for_update=True)
            review = await self._scoped_review(review_id, owner_id, for_update=True)
            await self.repo.delete_review(review)
            rating = await self.recompute_rating(movie)
        log.info("Review %s deleted; movie %s rating now %s", review_id, owner_id, rating)

    # ── Reads ────────────────────────────────────────────────
    async def get_reviews_for_movie(self, movie_id: int) -> List[Review]:
        await self._require_movie(movie_id)
        return await self.repo.list_reviews_for_movie(movie_id)

    async def get_review(self, movie_id: int, review_id: int) -> Review:
        await self._require_movie(movie_id)
        return await self._scoped_review(review_id, movie_id)

    async def list_all_reviews(self) -> List[Review]:
        return await self.repo.list_reviews()

    async def search_reviews(
        self,
        criteria: ReviewSearchCriteria,
        *,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> Page:
        page, size = normalize(
            page, size, default_size=settings.DEFAULT_PAGE_SIZE, max_size=settings.MAX_PAGE_SIZE
        )
        checked = criteria.check()
        spec = parse_sort(sort, REVIEW_SORT_FIELDS, default=DEFAULT_REVIEW_SORT)
        items, total = await self.repo.query_reviews(
            build_review_predicates(checked), spec, offset=offset_of(page, size), limit=size
        )
        log.debug("Review search %s page=%s size=%s sort=%s -> %s hits", checked, page, size, spec, total)
        return build_page(
            [ReviewOut.model_validate(r) for r in items],
            page=page,
            size=size,
            total=total,
            sort=str(spec),
        )


__all__ = ["ReviewService", "validate_review_data", "DEFAULT_REVIEW_SORT"]
