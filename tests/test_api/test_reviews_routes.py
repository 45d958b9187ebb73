# tests/test_api/test_reviews_routes.py

import pytest

from tests.fixtures.catalog import API, api_movie, api_review


def _rating(client, movie_id):
    return client.get(f"{API}/movies/{movie_id}").json()["rating"]


# ─────────────────────────────────────────────────────────────
# Lifecycle through HTTP
# ─────────────────────────────────────────────────────────────

def test_add_review_updates_movie_rating(client):
    movie = api_movie(client)
    for score in (8.8, 8.6, 9.0):
        api_review(client, movie["id"], score)
    assert _rating(client, movie["id"]) == 8.8


def test_add_review_201_shape(client):
    movie = api_movie(client)
    r = client.post(
        f"{API}/movies/{movie['id']}/reviews",
        json={"userName": "John Doe", "reviewText": "Great movie!", "rating": 8.5},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["movieId"] == movie["id"]
    assert body["userName"] == "John Doe"
    assert body["reviewText"] == "Great movie!"
    assert r.headers["location"].endswith(f"/movies/{movie['id']}/reviews/{body['id']}")


def test_update_and_delete_review(client):
    movie = api_movie(client)
    first = api_review(client, movie["id"], 7)
    api_review(client, movie["id"], 8)
    assert _rating(client, movie["id"]) == 7.5

    r = client.put(
        f"{API}/movies/{movie['id']}/reviews/{first['id']}",
        json={"userName": "critic", "reviewText": "better on rewatch", "rating": 9},
    )
    assert r.status_code == 200
    assert r.json()["rating"] == 9.0
    assert _rating(client, movie["id"]) == 8.5

    r = client.delete(f"{API}/movies/{movie['id']}/reviews/{first['id']}")
    assert r.status_code == 204
    assert _rating(client, movie["id"]) == 8.0


def test_single_review_add_then_delete(client):
    movie = api_movie(client)
    review = api_review(client, movie["id"], 10.0)
    assert _rating(client, movie["id"]) == 10.0
    client.delete(f"{API}/movies/{movie['id']}/reviews/{review['id']}")
    assert _rating(client, movie["id"]) is None


def test_list_reviews_of_movie(client):
    movie = api_movie(client)
    other = api_movie(client)
    api_review(client, movie["id"], 5)
    api_review(client, movie["id"], 6)
    api_review(client, other["id"], 7)

    r = client.get(f"{API}/movies/{movie['id']}/reviews")
    assert [x["rating"] for x in r.json()] == [5.0, 6.0]
    assert r.headers["x-total-count"] == "2"

    r = client.get(f"{API}/reviews")
    assert len(r.json()) == 3


# ─────────────────────────────────────────────────────────────
# Scoping
# ─────────────────────────────────────────────────────────────

def test_review_scoped_to_its_movie(client):
    movie_a = api_movie(client)
    movie_b = api_movie(client)
    review = api_review(client, movie_b["id"], 6)

    r = client.get(f"{API}/movies/{movie_a['id']}/reviews/{review['id']}")
    assert r.status_code == 404
    assert r.json()["code"] == 40402

    ok = client.get(f"{API}/movies/{movie_b['id']}/reviews/{review['id']}")
    assert ok.status_code == 200

    payload = {"userName": "x", "rating": 1}
    assert client.put(f"{API}/movies/{movie_a['id']}/reviews/{review['id']}", json=payload).status_code == 404
    assert client.delete(f"{API}/movies/{movie_a['id']}/reviews/{review['id']}").status_code == 404
    assert _rating(client, movie_b["id"]) == 6.0


def test_review_on_missing_movie_404(client):
    r = client.post(f"{API}/movies/999/reviews", json={"userName": "x", "rating": 5})
    assert r.status_code == 404
    assert r.json()["code"] == 40401
    assert client.get(f"{API}/movies/999/reviews").status_code == 404


# ─────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "payload, field",
    [
        ({"userName": "   ", "rating": 5}, "userName"),
        ({"userName": "u" * 101, "rating": 5}, "userName"),
        ({"userName": "ok", "reviewText": "t" * 2001, "rating": 5}, "reviewText"),
        ({"userName": "ok", "rating": 0}, "rating"),
        ({"userName": "ok", "rating": 11}, "rating"),
    ],
)
def test_invalid_review_400(client, payload, field):
    movie = api_movie(client)
    r = client.post(f"{API}/movies/{movie['id']}/reviews", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == 40001
    assert body["fieldErrors"][0]["field"] == field
    assert client.get(f"{API}/movies/{movie['id']}/reviews").json() == []
    assert _rating(client, movie["id"]) is None


def test_missing_fields_are_422(client):
    movie = api_movie(client)
    r = client.post(f"{API}/movies/{movie['id']}/reviews", json={"reviewText": "no name, no rating"})
    assert r.status_code == 422


# ─────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────

def test_search_reviews(client):
    movie = api_movie(client)
    api_review(client, movie["id"], 3, user="alice")
    api_review(client, movie["id"], 7, user="Alicia")
    api_review(client, movie["id"], 9, user="bob")

    body = client.get(f"{API}/reviews/search", params={"userName": "ALI", "sort": "rating,desc"}).json()
    assert [x["userName"] for x in body["content"]] == ["Alicia", "alice"]
    assert body["totalElements"] == 2
    assert body["sort"] == "rating,desc"

    body = client.get(f"{API}/reviews/search", params={"minRating": 5, "maxRating": 8}).json()
    assert [x["rating"] for x in body["content"]] == [7.0]

    body = client.get(f"{API}/reviews/search", params={"startDate": "2000-01-01"}).json()
    assert body["totalElements"] == 3
    body = client.get(f"{API}/reviews/search", params={"endDate": "2000-01-01"}).json()
    assert body["totalElements"] == 0 and body["empty"] is True


def test_search_reviews_default_sort_is_newest_first(client):
    movie = api_movie(client)
    api_review(client, movie["id"], 3)
    api_review(client, movie["id"], 4)
    body = client.get(f"{API}/reviews/search").json()
    assert body["sort"] == "createdAt,desc"
    assert body["totalElements"] == 2


def test_search_reviews_bad_params(client):
    assert client.get(f"{API}/reviews/search", params={"sort": "title"}).status_code == 400
    assert client.get(f"{API}/reviews/search", params={"startDate": "soon"}).status_code == 400
    assert client.get(f"{API}/reviews/search", params={"minRating": 0}).status_code == 400
