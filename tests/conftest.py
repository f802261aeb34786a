"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite connection info under tmp_path, connected film models,
fake application cache and request objects
Dependencies: pytest, sqlalchemy
System role: Test infrastructure and fixture management
"""

from types import SimpleNamespace

import pytest

from film_schema import DictCache, FilmDB


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep SCHEMA_MODEL_* variables from the developer shell out of tests."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("SCHEMA_MODEL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sqlite_dsn(tmp_path) -> str:
    """SQLite database file unique to the test."""
    return f"sqlite:///{tmp_path / 'film.db'}"


@pytest.fixture
def replica_dsn(tmp_path) -> str:
    """Second SQLite database file used as a read replica."""
    return f"sqlite:///{tmp_path / 'replica.db'}"


@pytest.fixture
def film_model(sqlite_dsn):
    """
    Connected FilmDB model with tables created.

    Yields:
        FilmDB: Model with caching left at its default
    """
    model = FilmDB(connect_info=sqlite_dsn)
    model.deploy()
    yield model
    model.dispose()


@pytest.fixture
def dict_cache() -> DictCache:
    return DictCache()


@pytest.fixture
def request_with_cache(dict_cache):
    """Minimal request object exposing app.state.cache."""
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(cache=dict_cache)))


@pytest.fixture
def request_without_cache():
    """Minimal request object whose application has no cache."""
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
