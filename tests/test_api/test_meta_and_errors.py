# tests/test_api/test_meta_and_errors.py

import uuid

import pytest

from moviecatalog.api.deps import get_repository
from tests.fixtures.catalog import API


def test_healthz_and_root(client):
    assert client.get("/healthz").json() == {"ok": True}
    root = client.get("/").json()
    assert root["api"] == API


def test_readyz_with_memory_repository(client):
    r = client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["ready"] is True


def test_request_id_is_echoed_when_valid(client):
    rid = str(uuid.uuid4())
    r = client.get(f"{API}/movies/12345", headers={"X-Request-ID": rid})
    assert r.headers["x-request-id"] == rid
    assert r.json()["request_id"] == rid


def test_not_found_problem_json(client):
    r = client.get(f"{API}/movies/12345")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("application/problem+json")
    body = r.json()
    assert body["title"] == "Movie Not Found"
    assert body["detail"] == "Movie not found with id: 12345"
    assert body["instance"] == f"{API}/movies/12345"
    assert body["timestamp"]


def test_unknown_route_is_problem_json(client):
    r = client.get(f"{API}/nope")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("application/problem+json")


def test_non_positive_id_is_422(client):
    assert client.get(f"{API}/movies/0").status_code == 422


def test_unexpected_error_is_generic_500(app, repo):
    from fastapi.testclient import TestClient

    class _Broken:
        async def list_movies(self):
            raise RuntimeError("secret internals")

    app.dependency_overrides[get_repository] = lambda: _Broken()
    client = TestClient(app, raise_server_exceptions=False)
    r = client.get(f"{API}/movies")
    assert r.status_code == 500
    assert "secret" not in r.text
    assert r.json()["title"] == "Internal Server Error"


@pytest.mark.anyio
async def test_async_client_roundtrip(async_client):
    r = await async_client.post(
        f"{API}/movies",
        json={"title": "Arrival", "director": "Denis Villeneuve", "genre": "Sci-Fi", "releaseYear": 2016},
    )
    assert r.status_code == 201
    mid = r.json()["id"]
    r = await async_client.post(f"{API}/movies/{mid}/reviews", json={"userName": "x", "rating": 8.0})
    assert r.status_code == 201
    r = await async_client.get(f"{API}/movies/{mid}")
    assert r.json()["rating"] == 8.0
