"""
Tests for the FastAPI endpoints.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from reelsearch import sessions


@pytest.fixture
def client(fake_omdb):
    from reelsearch.main import app
    return TestClient(app)


def test_health_degraded(client, monkeypatch):
    async def _down():
        raise RuntimeError("Invalid API key!")

    monkeypatch.setattr("reelsearch.clients.omdb.check_health", _down)
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "degraded"
    assert "Invalid API key" in data["omdb"]


def test_fallback_search(client, fake_omdb):
    fake_omdb.add_page("the godfther", [("tt0068646", "The Godfather")])

    resp = client.post("/api/search", json={"query": "godfther"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["error_message"] == ""
    assert data["results"][0]["imdb_id"] == "tt0068646"


def test_fallback_search_no_match(client):
    resp = client.post("/api/search", json={"query": "qwxz"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["results"] == []
    assert data["error_message"] == "No movies found matching: qwxz"


def test_search_blank_query(client, fake_omdb):
    resp = client.post("/api/search", json={"query": "   "})
    assert resp.status_code == 422
    assert fake_omdb.search_calls == []


def test_title_search_and_load_more(client, fake_omdb):
    fake_omdb.add_page("alien", [("a0", "Alien")], page=1, total=2)
    fake_omdb.add_page("alien", [("a1", "Aliens")], page=2, total=2)

    first = client.post("/api/search/title", json={"query": "alien"}).json()
    assert first["has_more"] is True
    session_id = first["session_id"]

    resp = client.post(f"/api/search/title/{session_id}/more")
    assert resp.status_code == 200
    data = resp.json()
    assert [m["imdb_id"] for m in data["items"]] == ["a0", "a1"]
    assert data["has_more"] is False


def test_load_more_unknown_session(client):
    resp = client.post("/api/search/title/nope/more")
    assert resp.status_code == 404


def test_load_more_busy_session(client):
    session = sessions.get_or_create_session("s1")
    session.query = "alien"
    session.busy = True
    resp = client.post("/api/search/title/s1/more")
    assert resp.status_code == 409


def test_delete_title_search(client, fake_omdb):
    fake_omdb.add_page("alien", [("a0", "Alien")])
    session_id = client.post("/api/search/title", json={"query": "alien"}).json()["session_id"]
    assert client.delete(f"/api/search/title/{session_id}").status_code == 200
    assert client.delete(f"/api/search/title/{session_id}").status_code == 404


def test_save_and_query_movies(client, fake_omdb):
    fake_omdb.add_page("matrix", [("tt0133093", "The Matrix")])

    resp = client.post("/api/movies", json={"imdb_ids": ["tt0133093", "tt404"]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["saved"] == 1
    assert data["skipped"] == ["tt404"]

    movie = client.get("/api/movies/tt0133093").json()
    assert movie["title"] == "The Matrix"

    by_actor = client.get("/api/movies/actor", params={"name": "keanu"}).json()
    assert by_actor["error_message"] == ""
    assert [m["imdb_id"] for m in by_actor["results"]] == ["tt0133093"]

    assert client.get("/api/movies/tt404").status_code == 404


def test_seed_then_list_movies(client):
    resp = client.post("/api/movies/seed")
    assert resp.status_code == 200
    assert resp.json() == {"saved": 3, "skipped": [], "message": "Movies added to database"}

    titles = {m["title"] for m in client.get("/api/movies").json()}
    assert titles == {"The Shawshank Redemption", "The Godfather", "The Dark Knight"}


def test_actor_lookup_messages(client):
    client.post("/api/movies/seed")

    blank = client.get("/api/movies/actor", params={"name": " "}).json()
    assert blank == {"results": [], "error_message": "Please enter an actor name"}

    missing = client.get("/api/movies/actor", params={"name": "Keanu"}).json()
    assert missing["error_message"] == "No movies found with actor matching: Keanu"

    found = client.get("/api/movies/actor", params={"name": "heath"}).json()
    assert [m["imdb_id"] for m in found["results"]] == ["tt0468569"]
