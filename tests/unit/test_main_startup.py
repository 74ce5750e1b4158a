from __future__ import annotations

from types import SimpleNamespace

from api import main
from etl.cache import MemoryCache
from etl.catalog import CatalogSource


def _fresh_app():
    return SimpleNamespace(state=SimpleNamespace())


def test_initialise_without_credentials_leaves_catalog_unset(monkeypatch):
    monkeypatch.setattr(main, "TMDB_API_KEY", "")
    monkeypatch.setattr(main, "TMDB_READ_TOKEN", "")
    app = _fresh_app()

    main._initialise_application(app)

    assert app.state.catalog is None
    assert app.state.tmdb_client is None


def test_initialise_builds_catalog_with_memory_cache(monkeypatch):
    created = {}

    class FakeClient:
        def __init__(self, **kwargs):
            created.update(kwargs)

    monkeypatch.setattr(main, "TMDB_API_KEY", "key")
    monkeypatch.setattr(main, "REDIS_URL", "")
    monkeypatch.setattr(main, "TMDBClient", FakeClient)
    app = _fresh_app()

    main._initialise_application(app)

    assert isinstance(app.state.catalog, CatalogSource)
    assert isinstance(app.state.cache, MemoryCache)
    assert created["api_key"] == "key"


def test_initialise_keeps_existing_catalog(monkeypatch):
    sentinel = object()
    app = _fresh_app()
    app.state.catalog = sentinel
    monkeypatch.setattr(main, "TMDB_API_KEY", "key")

    main._initialise_application(app)

    assert app.state.catalog is sentinel
