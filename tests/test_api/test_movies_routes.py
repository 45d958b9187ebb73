# tests/test_api/test_movies_routes.py

from tests.fixtures.catalog import API, api_movie, api_review


# ─────────────────────────────────────────────────────────────
# CRUD
# ─────────────────────────────────────────────────────────────

def test_create_movie_201_location_camel_case(client):
    r = client.post(
        f"{API}/movies",
        json={"title": "Inception", "director": "Christopher Nolan", "genre": "Sci-Fi", "releaseYear": 2010},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["releaseYear"] == 2010
    assert body["rating"] is None
    assert "createdAt" in body and "updatedAt" in body
    assert r.headers["location"] == f"{API}/movies/{body['id']}"
    assert r.headers.get("x-request-id")


def test_client_supplied_rating_is_ignored(client):
    movie = api_movie(client, rating=9.9)
    assert movie["rating"] is None


def test_get_update_delete_movie(client):
    movie = api_movie(client, title="Heat")
    mid = movie["id"]

    assert client.get(f"{API}/movies/{mid}").json()["title"] == "Heat"

    r = client.put(
        f"{API}/movies/{mid}",
        json={"title": "Heat", "director": "Michael Mann", "genre": "Crime", "releaseYear": 1995},
    )
    assert r.status_code == 200
    assert r.json()["director"] == "Michael Mann"

    assert client.delete(f"{API}/movies/{mid}").status_code == 204
    assert client.get(f"{API}/movies/{mid}").status_code == 404


def test_list_movies_sets_total_count(client):
    api_movie(client)
    api_movie(client)
    r = client.get(f"{API}/movies")
    assert r.status_code == 200
    assert len(r.json()) == 2
    assert r.headers["x-total-count"] == "2"


def test_duplicate_movie_409(client):
    api_movie(client, title="Dune", director="Denis Villeneuve")
    r = client.post(
        f"{API}/movies",
        json={"title": "Dune", "director": "Denis Villeneuve", "genre": "Sci-Fi", "releaseYear": 2021},
    )
    assert r.status_code == 409
    assert r.json()["code"] == 40901


def test_invalid_movie_400_with_field_errors(client):
    r = client.post(
        f"{API}/movies",
        json={"title": " ", "director": "d", "genre": "g", "releaseYear": 1700},
    )
    assert r.status_code == 400
    fields = [e["field"] for e in r.json()["fieldErrors"]]
    assert fields == ["title", "releaseYear"]


# ─────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────

def _scifi(client):
    for i in range(12):
        m = api_movie(client, title=f"Space {i:02d}", genre="Sci-Fi")
        api_review(client, m["id"], 9.0)
    low = api_movie(client, title="Space Low", genre="Sci-Fi")
    api_review(client, low["id"], 5.0)
    api_movie(client, title="Elsewhere", genre="Drama")


def test_search_first_page_envelope(client):
    _scifi(client)
    r = client.get(f"{API}/movies/search", params={"genre": "Sci-Fi", "minRating": 8.5, "page": 0, "size": 10})
    assert r.status_code == 200
    body = r.json()
    assert len(body["content"]) == 10
    assert body["numberOfElements"] == 10
    assert body["totalElements"] == 12
    assert body["totalPages"] == 2
    assert body["first"] is True and body["last"] is False
    assert body["hasNext"] is True and body["hasPrevious"] is False
    assert body["page"] == 0 and body["size"] == 10
    assert body["sort"] == "title,asc"
    assert r.headers["x-total-count"] == "12"
    assert body["content"][0]["releaseYear"] == 2010


def test_search_second_page(client):
    _scifi(client)
    body = client.get(
        f"{API}/movies/search", params={"genre": "sci-fi", "minRating": 8.5, "page": 1, "size": 10}
    ).json()
    assert body["numberOfElements"] == 2
    assert body["last"] is True and body["hasPrevious"] is True


def test_search_sort_and_size_clamp(client):
    _scifi(client)
    body = client.get(f"{API}/movies/search", params={"sort": "rating,asc", "size": 1000}).json()
    assert body["size"] == 100
    titles = [m["title"] for m in body["content"]]
    assert titles[0] == "Space Low"
    assert titles[-1] == "Elsewhere"  # unrated sorts last


def test_search_rejections_are_400(client):
    for params, field in [
        ({"genre": " "}, "genre"),
        ({"minRating": 9, "maxRating": 8}, "minRating"),
        ({"releaseYear": 1850}, "releaseYear"),
        ({"page": -1}, "page"),
        ({"sort": "budget,asc"}, "sort"),
        ({"sort": "title,up"}, "sort"),
    ]:
        r = client.get(f"{API}/movies/search", params=params)
        assert r.status_code == 400, params
        assert r.headers["content-type"].startswith("application/problem+json")
        assert r.json()["fieldErrors"][0]["field"] == field


def test_search_type_errors_are_422(client):
    r = client.get(f"{API}/movies/search", params={"minRating": "high"})
    assert r.status_code == 422
    assert r.json()["errors"]


# ─────────────────────────────────────────────────────────────
# Stats
# ─────────────────────────────────────────────────────────────

def test_top_rated_and_average(client):
    a = api_movie(client, title="A")
    b = api_movie(client, title="B")
    api_movie(client, title="C")
    api_review(client, a["id"], 7)
    api_review(client, b["id"], 8)

    top = client.get(f"{API}/movies/top-rated", params={"limit": 5}).json()
    assert [m["title"] for m in top] == ["B", "A"]

    avg = client.get(f"{API}/movies/stats/average-rating").json()
    assert avg == {"averageRating": 7.5, "ratedMovies": 2}


def test_genre_count(client):
    api_movie(client, genre="Sci-Fi")
    api_movie(client, genre="Drama")
    r = client.get(f"{API}/movies/stats/genre-count", params={"genre": "sci-fi"})
    assert r.json() == {"genre": "sci-fi", "count": 1}
    assert client.get(f"{API}/movies/stats/genre-count").status_code == 400
