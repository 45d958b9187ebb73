# tests/test_repositories/test_sql_repository.py
"""
The review lifecycle and search against a real database through
`SqlCatalogRepository` (SQLite by default, `TEST_DATABASE_URL` when set).
"""

from decimal import Decimal

import pytest

from moviecatalog.core.exceptions import DuplicateMovie, ReviewNotFound
from moviecatalog.db.models.movie import Movie
from moviecatalog.repositories.sql import SqlCatalogRepository
from moviecatalog.schemas.search import MovieSearchCriteria
from moviecatalog.services.movies import MovieService
from moviecatalog.services.rating import compute_aggregate
from moviecatalog.services.reviews import ReviewService
from tests.fixtures.catalog import make_movie, rate


async def _assert_consistent(repo, movie_id):
    ratings = await repo.review_ratings_for_movie(movie_id)
    assert (await repo.get_movie(movie_id)).rating == compute_aggregate(ratings)


async def _fresh_view(session_factory, movie_id):
    """(rating, review ratings) as a new request would see them."""
    async with session_factory() as session:
        repo = SqlCatalogRepository(session)
        movie = await repo.get_movie(movie_id)
        ratings = sorted(await repo.review_ratings_for_movie(movie_id))
        return (movie.rating if movie is not None else None), ratings


# ─────────────────────────────────────────────────────────────
# Aggregate maintenance
# ─────────────────────────────────────────────────────────────

@pytest.mark.anyio
async def test_three_reviews_give_expected_aggregate(sql_repo, sql_session_factory):
    movie = await make_movie(sql_repo)
    await rate(sql_repo, movie.id, [8.8, 8.6, 9.0])

    rating, ratings = await _fresh_view(sql_session_factory, movie.id)
    assert rating == Decimal("8.8")
    assert ratings == [8.6, 8.8, 9.0]


@pytest.mark.anyio
async def test_add_then_delete_returns_to_absent(sql_repo, sql_session_factory):
    movie = await make_movie(sql_repo)
    (review,) = await rate(sql_repo, movie.id, [10.0])
    assert (await _fresh_view(sql_session_factory, movie.id))[0] == Decimal("10.0")

    await ReviewService(sql_repo).delete_review(review.id, movie_id=movie.id)
    assert await _fresh_view(sql_session_factory, movie.id) == (None, [])


@pytest.mark.anyio
async def test_aggregate_tracks_every_mutation(sql_repo, sql_session_factory):
    svc = ReviewService(sql_repo)
    movie = await make_movie(sql_repo)
    other = await make_movie(sql_repo)
    reviews = await rate(sql_repo, movie.id, [1, 10, 5.5, 7.25])
    await rate(sql_repo, other.id, [3])
    await _assert_consistent(sql_repo, movie.id)

    await svc.update_review(reviews[1].id, {"user_name": "x", "rating": 2}, movie_id=movie.id)
    await _assert_consistent(sql_repo, movie.id)

    await svc.delete_review(reviews[0].id, movie_id=movie.id)
    await _assert_consistent(sql_repo, movie.id)

    await svc.add_review(movie.id, {"user_name": "late", "rating": 9.9})
    await _assert_consistent(sql_repo, movie.id)

    assert await _fresh_view(sql_session_factory, movie.id) == (Decimal("6.2"), [2.0, 5.5, 7.25, 9.9])
    assert (await _fresh_view(sql_session_factory, other.id))[0] == Decimal("3.0")


@pytest.mark.anyio
async def test_failed_rating_write_rolls_back_review(sql_repo, sql_session_factory, monkeypatch):
    movie = await make_movie(sql_repo)
    movie_id = movie.id
    await rate(sql_repo, movie_id, [8])

    async def _boom(_movie):
        raise RuntimeError("storage down")

    monkeypatch.setattr(sql_repo, "save_movie", _boom)
    with pytest.raises(RuntimeError):
        await ReviewService(sql_repo).add_review(movie_id, {"user_name": "x", "rating": 2})
    monkeypatch.undo()

    assert await _fresh_view(sql_session_factory, movie_id) == (Decimal("8.0"), [8.0])
    # the same session is usable again after the rollback
    assert [r.rating for r in await sql_repo.list_reviews_for_movie(movie_id)] == [8.0]


@pytest.mark.anyio
async def test_deleting_movie_cascades_to_reviews(sql_repo, sql_session_factory):
    movie = await make_movie(sql_repo)
    keep = await make_movie(sql_repo)
    movie_id, keep_id = movie.id, keep.id
    (review,) = await rate(sql_repo, movie_id, [8])
    review_id = review.id
    await rate(sql_repo, keep_id, [4])

    await MovieService(sql_repo).delete_movie(movie_id)

    async with sql_session_factory() as session:
        repo = SqlCatalogRepository(session)
        assert await repo.get_movie(movie_id) is None
        assert await repo.get_review(review_id) is None
        assert [r.movie_id for r in await repo.list_reviews()] == [keep_id]


# ─────────────────────────────────────────────────────────────
# Review removed by another request while waiting for the lock
# ─────────────────────────────────────────────────────────────

def _delete_elsewhere_when_locking(sql_repo, sql_session_factory, monkeypatch, movie_id, review_id):
    original = sql_repo.get_movie

    async def _get_movie(mid, *, for_update=False):
        if for_update:
            async with sql_session_factory() as other:
                await ReviewService(SqlCatalogRepository(other)).delete_review(review_id, movie_id=movie_id)
        return await original(mid, for_update=for_update)

    monkeypatch.setattr(sql_repo, "get_movie", _get_movie)


@pytest.mark.anyio
async def test_update_after_concurrent_delete_is_not_found(sql_repo, sql_session_factory, monkeypatch):
    movie = await make_movie(sql_repo)
    movie_id = movie.id
    first, _second = await rate(sql_repo, movie_id, [7, 8])
    review_id = first.id
    _delete_elsewhere_when_locking(sql_repo, sql_session_factory, monkeypatch, movie_id, review_id)

    with pytest.raises(ReviewNotFound):
        await ReviewService(sql_repo).update_review(review_id, {"user_name": "x", "rating": 2}, movie_id=movie_id)
    monkeypatch.undo()

    assert await _fresh_view(sql_session_factory, movie_id) == (Decimal("8.0"), [8.0])


@pytest.mark.anyio
async def test_delete_after_concurrent_delete_is_not_found(sql_repo, sql_session_factory, monkeypatch):
    movie = await make_movie(sql_repo)
    movie_id = movie.id
    first, _second = await rate(sql_repo, movie_id, [7, 8])
    review_id = first.id
    _delete_elsewhere_when_locking(sql_repo, sql_session_factory, monkeypatch, movie_id, review_id)

    with pytest.raises(ReviewNotFound):
        await ReviewService(sql_repo).delete_review(review_id, movie_id=movie_id)
    monkeypatch.undo()

    assert await _fresh_view(sql_session_factory, movie_id) == (Decimal("8.0"), [8.0])


# ─────────────────────────────────────────────────────────────
# Movies
# ─────────────────────────────────────────────────────────────

@pytest.mark.anyio
async def test_unique_constraint_maps_to_duplicate_movie(sql_repo):
    def _heat():
        return Movie(title="Heat", director="Michael Mann", genre="Crime", release_year=1995)

    async with sql_repo.transaction():
        await sql_repo.add_movie(_heat())

    # straight to the repository, past the service's existence check
    with pytest.raises(DuplicateMovie):
        async with sql_repo.transaction():
            await sql_repo.add_movie(_heat())

    assert [m.title for m in await sql_repo.list_movies()] == ["Heat"]


@pytest.mark.anyio
async def test_genre_and_min_rating_first_page(sql_repo):
    for i in range(12):
        movie = await make_movie(sql_repo, title=f"Space {i:02d}", genre="Sci-Fi")
        await rate(sql_repo, movie.id, [8.5 + (i % 3) * 0.5])
    for i in range(8):
        await make_movie(sql_repo, title=f"Drama {i}", genre="Drama")
    low = await make_movie(sql_repo, title="Space Low", genre="Sci-Fi")
    await rate(sql_repo, low.id, [6])
    for i in range(4):
        await make_movie(sql_repo, title=f"Space Unrated {i}", genre="sci-fi")

    page = await MovieService(sql_repo).search(MovieSearchCriteria(genre="Sci-Fi", min_rating=8.5), page=0, size=10)

    assert await sql_repo.count_movies() == 25
    assert page.number_of_elements == 10
    assert page.total_elements == 12
    assert page.total_pages == 2
    assert page.first is True and page.last is False
    assert [m.title for m in page.content] == [f"Space {i:02d}" for i in range(10)]


@pytest.mark.anyio
async def test_unrated_sort_last_with_id_tiebreak(sql_repo):
    svc = MovieService(sql_repo)
    unrated_a = await make_movie(sql_repo, title="Unrated A")
    high = await make_movie(sql_repo, title="High")
    unrated_b = await make_movie(sql_repo, title="Unrated B")
    low = await make_movie(sql_repo, title="Low")
    twin = await make_movie(sql_repo, title="Twin")
    await rate(sql_repo, high.id, [9])
    await rate(sql_repo, low.id, [3])
    await rate(sql_repo, twin.id, [3])

    desc = await svc.search(sort="rating,desc")
    assert [m.id for m in desc.content] == [high.id, low.id, twin.id, unrated_a.id, unrated_b.id]

    asc = await svc.search(sort="rating,asc")
    assert [m.id for m in asc.content] == [low.id, twin.id, high.id, unrated_a.id, unrated_b.id]


@pytest.mark.anyio
async def test_average_and_top_rated_skip_unrated(sql_repo):
    svc = MovieService(sql_repo)
    await make_movie(sql_repo, title="Nobody watched")
    best = await make_movie(sql_repo, title="Best")
    good = await make_movie(sql_repo, title="Good")
    await rate(sql_repo, best.id, [9, 10])
    await rate(sql_repo, good.id, [7])

    assert [m.id for m in await svc.top_rated()] == [best.id, good.id]
    avg, count = await svc.average_rating()
    assert count == 2
    assert avg == 8.3
