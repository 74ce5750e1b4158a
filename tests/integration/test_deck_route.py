from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.core.errors import UpstreamFetchError
from api.main import app
from tests.helpers import HORROR, make_candidate, make_pool


class _StubCatalog:
    def __init__(self, slices=None, error=None):
        self.slices = slices if slices is not None else [make_pool(40)]
        self.error = error
        self.calls = 0

    async def fetch_all(self, plan):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.slices


@pytest.fixture
def catalog():
    previous = getattr(app.state, "catalog", None)
    stub = _StubCatalog()
    app.state.catalog = stub
    try:
        yield stub
    finally:
        app.state.catalog = previous


def test_health():
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_deck_returns_ten_cards(catalog):
    client = TestClient(app)
    resp = client.post(
        "/deck",
        json={"q": "", "reroll": 0, "likes": [], "passes": []},
        headers={"X-Session-Id": "sess-1"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["interpretation"]["mode"] == "mixed"
    assert len(data["cards"]) == 10
    card = data["cards"][0]
    assert set(card) == {"id", "title", "year", "kind", "reason", "poster_path"}
    assert card["kind"] == "movie"
    assert card["reason"] == "Curated pick"


def test_deck_is_reproducible_per_session_and_reroll(catalog):
    client = TestClient(app)
    body = {"q": "something", "reroll": 1}
    first = client.post("/deck", json=body, headers={"X-Session-Id": "abc"}).json()
    again = client.post("/deck", json=body, headers={"X-Session-Id": "abc"}).json()
    assert first == again


def test_session_cookie_is_used_when_header_missing(catalog):
    client = TestClient(app)
    client.cookies.set("wtw_session", "abc")
    via_cookie = client.post("/deck", json={"reroll": 2}).json()
    client.cookies.clear()
    via_header = client.post(
        "/deck", json={"reroll": 2}, headers={"X-Session-Id": "abc"}
    ).json()
    assert via_cookie == via_header


def test_malformed_body_degrades_to_defaults(catalog):
    client = TestClient(app)
    resp = client.post(
        "/deck", content=b"{oops", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 200
    assert len(resp.json()["cards"]) == 10


def test_feedback_ids_are_not_repeated(catalog):
    client = TestClient(app)
    kept = [str(i) for i in range(1, 20)]
    passed = [str(i) for i in range(20, 30)]
    resp = client.post("/deck", json={"likes": kept, "passes": passed})
    ids = {card["id"] for card in resp.json()["cards"]}
    assert ids
    assert not ids & (set(kept) | set(passed))


def test_genre_query_returns_genre_cards(catalog):
    catalog.slices = [
        make_pool(30, start=1, genres=(HORROR,)),
        make_pool(30, start=100),
    ]
    client = TestClient(app)
    resp = client.post("/deck", json={"q": "Horror night"})
    data = resp.json()
    assert data["interpretation"]["horror"] is True
    assert all(int(card["id"]) < 100 for card in data["cards"])
    assert all(card["reason"] == "Horror pick" for card in data["cards"])


def test_upstream_failure_returns_502(catalog):
    catalog.error = UpstreamFetchError("tmdb:trending:movie:week:v1")
    client = TestClient(app)
    resp = client.post("/deck", json={})
    assert resp.status_code == 502
    assert resp.json() == {"detail": "Catalog unavailable"}


def test_missing_catalog_returns_503():
    previous = getattr(app.state, "catalog", None)
    app.state.catalog = None
    try:
        resp = TestClient(app).post("/deck", json={})
    finally:
        app.state.catalog = previous
    assert resp.status_code == 503


def test_small_catalog_returns_short_deck(catalog):
    catalog.slices = [[make_candidate(i) for i in range(1, 8)]]
    resp = TestClient(app).post("/deck", json={})
    ids = [card["id"] for card in resp.json()["cards"]]
    assert len(ids) == 7
    assert len(set(ids)) == 7
