"""
Integration tests for cursor caching through a model.

Tests that result sets with cache_for are served from the application
cache once the model has accepted a request carrying one.

Dependencies: pytest, sqlalchemy, schema_model
System role: Cached cursor behavior verification
"""

from sqlalchemy.orm import Session

from film_schema import Actor
from schema_model.boundary.db import CachedCursor


class TestCachedResultSets:
    """Result set fetches through CachedCursor."""

    def test_cache_for_serves_cached_rows(self, film_model, request_with_cache, dict_cache):
        """Test a second fetch is answered from the cache."""
        # Arrange
        film_model.accept_context(request_with_cache)
        actors = film_model.resultset("Actor")
        actors.create(name="Sophia")
        cached = actors.search(order_by=Actor.name, cache_for=60)

        # Act
        first = cached.all()
        actors.create(name="Marcello")
        second = cached.all()

        # Assert
        assert [a.name for a in first] == ["Sophia"]
        assert [a.name for a in second] == ["Sophia"]
        assert list(dict_cache.expires.values()) == [60]
        assert actors.count() == 2

    def test_clear_cache_forces_refetch(self, film_model, request_with_cache, dict_cache):
        # Arrange
        film_model.accept_context(request_with_cache)
        actors = film_model.resultset("Actor")
        actors.create(name="Anna")
        cached = actors.search(order_by=Actor.name, cache_for=60)
        cached.all()
        actors.create(name="Vittorio")

        # Act
        with film_model.storage.session_scope() as session:
            cached.cursor(session).clear_cache()
        refreshed = cached.all()

        # Assert
        assert [a.name for a in refreshed] == ["Anna", "Vittorio"]

    def test_without_cache_for_always_queries(self, film_model, request_with_cache, dict_cache):
        # Arrange
        film_model.accept_context(request_with_cache)
        actors = film_model.resultset("Actor")
        actors.create(name="Giulietta")

        # Act
        actors.all()
        actors.create(name="Federico")
        rows = actors.all()

        # Assert
        assert len(rows) == 2
        assert dict_cache.data == {}

    def test_cached_rows_attached_to_current_session(self, film_model, request_with_cache):
        """Test cache hits are merged into the caller's session."""
        # Arrange
        film_model.accept_context(request_with_cache)
        film_model.resultset("Actor").create(name="Monica")
        film_model.resultset("Actor").search(cache_for=30).all()

        # Act
        with film_model.storage.session_scope() as session:
            rows = film_model.resultset("Actor", session=session).search(cache_for=30).all()

            # Assert
            assert rows[0] in session
            assert rows[0].name == "Monica"

    def test_different_criteria_use_different_keys(self, film_model, request_with_cache):
        # Arrange
        film_model.accept_context(request_with_cache)
        actors = film_model.resultset("Actor")
        statement_a = actors.search(Actor.name == "A").statement
        statement_b = actors.search(Actor.name == "B").statement

        # Act
        with Session(film_model.storage.engine) as session:
            key_a = CachedCursor(session, statement_a).cache_key
            key_b = CachedCursor(session, statement_b).cache_key

        # Assert
        assert key_a != key_b
        assert key_a.startswith("schema_model:")

    def test_changing_returned_rows_leaves_cache_intact(self, film_model, request_with_cache, dict_cache):
        """Test callers get instances separate from what the cache holds."""
        # Arrange
        film_model.accept_context(request_with_cache)
        actors = film_model.resultset("Actor")
        actors.create(name="Sophia")
        cached = actors.search(cache_for=60)

        # Act
        missed = cached.all()
        missed[0].name = "Changed"
        hit = cached.all()
        hit_names = [a.name for a in hit]
        hit[0].name = "Changed again"
        second_hit = cached.all()

        # Assert
        assert hit_names == ["Sophia"]
        assert [a.name for a in second_hit] == ["Sophia"]
        (entry,) = dict_cache.data.values()
        assert entry == [{"id": missed[0].id, "name": "Sophia"}]
