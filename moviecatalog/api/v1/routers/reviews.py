"""
⭐ MovieCatalog · Reviews
========================

Endpoints
---------
- POST   /movies/{movie_id}/reviews               : Add review (recomputes movie rating)
- GET    /movies/{movie_id}/reviews               : Reviews of one movie
- GET    /movies/{movie_id}/reviews/{review_id}   : One review, scoped to its movie
- PUT    /movies/{movie_id}/reviews/{review_id}   : Update review (recomputes rating)
- DELETE /movies/{movie_id}/reviews/{review_id}   : Delete review (recomputes rating)
- GET    /reviews                                 : Every review
- GET    /reviews/search                          : Filtered, sorted, paginated reviews

A review id that exists under a different movie answers 404, exactly like a
missing one.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from moviecatalog.api.deps import get_review_service, set_total_count_header
from moviecatalog.core.config import settings
from moviecatalog.schemas.pagination import Page
from moviecatalog.schemas.reviews import ReviewIn, ReviewOut
from moviecatalog.schemas.search import ReviewSearchCriteria
from moviecatalog.services.reviews import DEFAULT_REVIEW_SORT, ReviewService

router = APIRouter(tags=["Reviews"])


# ─────────────────────────────────────────────────────────────────────────────
# 🎬 Reviews of a movie
# ─────────────────────────────────────────────────────────────────────────────
@router.post(
    "/movies/{movie_id}/reviews",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a review to a movie",
)
async def add_review(
    payload: ReviewIn,
    response: Response,
    movie_id: int = Path(..., ge=1),
    svc: ReviewService = Depends(get_review_service),
):
    """
    Add a **review** and refresh the movie's aggregate rating in the same
    transaction.
    """
    review = await svc.add_review(movie_id, payload)
    response.headers["Location"] = f"{settings.API_V1_STR}/movies/{movie_id}/reviews/{review.id}"
    return ReviewOut.model_validate(review)


@router.get("/movies/{movie_id}/reviews", response_model=List[ReviewOut], summary="List reviews of a movie")
async def list_movie_reviews(
    response: Response,
    movie_id: int = Path(..., ge=1),
    svc: ReviewService = Depends(get_review_service),
):
    reviews = await svc.get_reviews_for_movie(movie_id)
    set_total_count_header(response, len(reviews))
    return [ReviewOut.model_validate(r) for r in reviews]


@router.get("/movies/{movie_id}/reviews/{review_id}", response_model=ReviewOut, summary="Get one review")
async def get_review(
    movie_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
    svc: ReviewService = Depends(get_review_service),
):
    return ReviewOut.model_validate(await svc.get_review(movie_id, review_id))


@router.put("/movies/{movie_id}/reviews/{review_id}", response_model=ReviewOut, summary="Update a review")
async def update_review(
    payload: ReviewIn,
    movie_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
    svc: ReviewService = Depends(get_review_service),
):
    review = await svc.update_review(review_id, payload, movie_id=movie_id)
    return ReviewOut.model_validate(review)


@router.delete(
    "/movies/{movie_id}/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
)
async def delete_review(
    movie_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
    svc: ReviewService = Depends(get_review_service),
):
    await svc.delete_review(review_id, movie_id=movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─────────────────────────────────────────────────────────────────────────────
# 🔎 All reviews
# ─────────────────────────────────────────────────────────────────────────────
@router.get("/reviews", response_model=List[ReviewOut], summary="List all reviews")
async def list_reviews(
    response: Response,
    svc: ReviewService = Depends(get_review_service),
):
    reviews = await svc.list_all_reviews()
    set_total_count_header(response, len(reviews))
    return [ReviewOut.model_validate(r) for r in reviews]


@router.get("/reviews/search", response_model=Page[ReviewOut], summary="Search reviews")
async def search_reviews(
    response: Response,
    min_rating: Optional[float] = Query(None, alias="minRating"),
    max_rating: Optional[float] = Query(None, alias="maxRating"),
    user_name: Optional[str] = Query(None, alias="userName", description="Substring, case-insensitive"),
    start_date: Optional[str] = Query(None, alias="startDate", description="ISO date or datetime"),
    end_date: Optional[str] = Query(None, alias="endDate", description="ISO date or datetime"),
    page: int = Query(0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE),
    sort: str = Query(DEFAULT_REVIEW_SORT, description="rating | createdAt | userName | id, then asc/desc"),
    svc: ReviewService = Depends(get_review_service),
):
    criteria = ReviewSearchCriteria(
        min_rating=min_rating,
        max_rating=max_rating,
        user_name=user_name,
        start_date=start_date,
        end_date=end_date,
    )
    result = await svc.search_reviews(criteria, page=page, size=size, sort=sort)
    set_total_count_header(response, result.total_elements)
    return result
