"""
🎬 MovieCatalog · Movies
=======================

Endpoints
---------
- GET    /movies                              : List every movie (by id)
- POST   /movies                              : Create movie (409 on title+director clash)
- GET    /movies/search                       : Filtered, sorted, paginated search
- GET    /movies/top-rated                    : Highest aggregate ratings first
- GET    /movies/stats/average-rating         : Mean rating across rated movies
- GET    /movies/stats/genre-count            : Movies in a genre (case-insensitive)
- GET    /movies/{movie_id}                   : Fetch one movie
- PUT    /movies/{movie_id}                   : Replace editable fields (rating is derived)
- DELETE /movies/{movie_id}                   : Delete movie and its reviews

Search parameters
-----------------
genre, title, director, releaseYear, yearMin, yearMax, minRating, maxRating,
page (default 0), size (default 20, clamped to 1..100), sort ("field,dir";
fields: title, director, genre, releaseYear, rating, id).
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from moviecatalog.api.deps import get_movie_service, set_total_count_header
from moviecatalog.core.config import settings
from moviecatalog.schemas.movies import AverageRatingOut, GenreCountOut, MovieIn, MovieOut
from moviecatalog.schemas.pagination import Page
from moviecatalog.schemas.search import MovieSearchCriteria
from moviecatalog.services.movies import DEFAULT_MOVIE_SORT, MovieService

router = APIRouter(prefix="/movies", tags=["Movies"])


# ─────────────────────────────────────────────────────────────────────────────
# 📚 Collection
# ─────────────────────────────────────────────────────────────────────────────
@router.get("", response_model=List[MovieOut], summary="List all movies")
async def list_movies(
    response: Response,
    svc: MovieService = Depends(get_movie_service),
):
    movies = await svc.list_movies()
    set_total_count_header(response, len(movies))
    return [MovieOut.model_validate(m) for m in movies]


@router.post("", response_model=MovieOut, status_code=status.HTTP_201_CREATED, summary="Create a movie")
async def create_movie(
    payload: MovieIn,
    response: Response,
    svc: MovieService = Depends(get_movie_service),
):
    """
    Create a **movie**. The rating starts empty and is only ever derived from
    reviews.
    """
    movie = await svc.create_movie(payload)
    response.headers["Location"] = f"{settings.API_V1_STR}/movies/{movie.id}"
    return MovieOut.model_validate(movie)


# ─────────────────────────────────────────────────────────────────────────────
# 🔎 Search
# ─────────────────────────────────────────────────────────────────────────────
@router.get("/search", response_model=Page[MovieOut], summary="Search movies")
async def search_movies(
    response: Response,
    genre: Optional[str] = Query(None, description="Exact genre, case-insensitive"),
    title: Optional[str] = Query(None, description="Title substring, case-insensitive"),
    director: Optional[str] = Query(None, description="Director substring, case-insensitive"),
    release_year: Optional[int] = Query(None, alias="releaseYear"),
    year_min: Optional[int] = Query(None, alias="yearMin"),
    year_max: Optional[int] = Query(None, alias="yearMax"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    max_rating: Optional[float] = Query(None, alias="maxRating"),
    page: int = Query(0, description="Zero-based page index"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, description="Page size (clamped to 1..100)"),
    sort: str = Query(DEFAULT_MOVIE_SORT, description="field,direction"),
    svc: MovieService = Depends(get_movie_service),
):
    """
    Multi-criteria movie search.

    Steps
    -----
    1) Collect the optional filters into `MovieSearchCriteria`.
    2) Delegate validation, querying and paging to the service.
    3) Expose the total as `X-Total-Count`.
    """
    # ── [Step 1] Criteria ───────────────────────────────────────────────────
    criteria = MovieSearchCriteria(
        genre=genre,
        title=title,
        director=director,
        release_year=release_year,
        year_min=year_min,
        year_max=year_max,
        min_rating=min_rating,
        max_rating=max_rating,
    )

    # ── [Step 2] Query ──────────────────────────────────────────────────────
    result = await svc.search(criteria, page=page, size=size, sort=sort)

    # ── [Step 3] Headers ────────────────────────────────────────────────────
    set_total_count_header(response, result.total_elements)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 📈 Stats
# ─────────────────────────────────────────────────────────────────────────────
@router.get("/top-rated", response_model=List[MovieOut], summary="Top rated movies")
async def top_rated_movies(
    limit: int = Query(10, description="How many movies (clamped to 1..100)"),
    svc: MovieService = Depends(get_movie_service),
):
    return [MovieOut.model_validate(m) for m in await svc.top_rated(limit)]


@router.get("/stats/average-rating", response_model=AverageRatingOut, summary="Average rating of rated movies")
async def average_rating(svc: MovieService = Depends(get_movie_service)):
    avg, count = await svc.average_rating()
    return AverageRatingOut(average_rating=avg, rated_movies=count)


@router.get("/stats/genre-count", response_model=GenreCountOut, summary="Count movies in a genre")
async def genre_count(
    genre: Optional[str] = Query(None),
    svc: MovieService = Depends(get_movie_service),
):
    count = await svc.count_by_genre(genre)
    return GenreCountOut(genre=genre.strip(), count=count)


# ─────────────────────────────────────────────────────────────────────────────
# 🎞️ Single movie
# ─────────────────────────────────────────────────────────────────────────────
@router.get("/{movie_id}", response_model=MovieOut, summary="Get movie by id")
async def get_movie(
    movie_id: int = Path(..., ge=1),
    svc: MovieService = Depends(get_movie_service),
):
    return MovieOut.model_validate(await svc.get_movie(movie_id))


@router.put("/{movie_id}", response_model=MovieOut, summary="Update movie")
async def update_movie(
    payload: MovieIn,
    movie_id: int = Path(..., ge=1),
    svc: MovieService = Depends(get_movie_service),
):
    """
    Replace title, director, genre and release year. Identity and the
    derived rating are preserved.
    """
    return MovieOut.model_validate(await svc.update_movie(movie_id, payload))


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete movie")
async def delete_movie(
    movie_id: int = Path(..., ge=1),
    svc: MovieService = Depends(get_movie_service),
):
    await svc.delete_movie(movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
