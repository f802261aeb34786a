"""
Tests for the model registry and its FastAPI dependencies.

Tests name resolution for models and result set accessors, and the
Model()/model_session() dependencies inside a running application.

Dependencies: pytest, fastapi, httpx, schema_model.api
System role: Registry and dependency injection verification
"""

from unittest.mock import patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from film_schema import Actor, FilmDB
from schema_model import SchemaModel
from schema_model.api import Model, ModelRegistry, create_app, install_models, model_session
from schema_model.boundary.db import ResultSet
from schema_model.core.exceptions import ConfigurationError, UnknownModelError


class TestModelRegistry:
    """Tests for ModelRegistry."""

    def test_names_cover_models_and_accessors(self, film_model):
        # Act
        registry = ModelRegistry(film_model)

        # Assert
        assert registry.names() == ["FilmDB", "FilmDB.Actor", "FilmDB.Role"]
        assert "FilmDB.Role" in registry
        assert "FilmDB.Director" not in registry

    def test_model_lookup_runs_request_hook(self, film_model, request_with_cache, dict_cache):
        registry = ModelRegistry(film_model)

        model = registry.model("FilmDB", request_with_cache)

        assert model is film_model
        assert film_model.schema.default_resultset_attributes["cache_object"] is dict_cache

    def test_accessor_lookup_returns_resultset(self, film_model):
        registry = ModelRegistry(film_model)

        actors = registry.model("FilmDB.Actor")

        assert isinstance(actors, ResultSet)
        assert actors.moniker == "Actor"

    def test_unknown_name(self, film_model):
        """Test lookup failure is reported as UnknownModelError."""
        # Arrange
        registry = ModelRegistry(film_model)

        # Act
        with pytest.raises(UnknownModelError) as exc_info:
            registry.model("Nope")

        # Assert
        assert str(exc_info.value).startswith("Model not found: Nope")

    def test_duplicate_registration(self, film_model):
        registry = ModelRegistry(film_model)

        with pytest.raises(ConfigurationError):
            registry.register(film_model)

    def test_dispose_disposes_every_model(self, film_model):
        registry = ModelRegistry(film_model)

        with patch.object(SchemaModel, "dispose") as dispose:
            registry.dispose()

        dispose.assert_called_once_with()


class TestDependencies:
    """Model() and model_session() inside an application."""

    @pytest.fixture
    def app(self, film_model, dict_cache):
        app = create_app([film_model], cache=dict_cache)

        @app.get("/actors")
        def list_actors(actors: ResultSet = Depends(Model("FilmDB.Actor"))):
            return [actor.name for actor in actors.search(order_by=Actor.name).all()]

        @app.post("/actors/{name}", status_code=201)
        def add_actor(name: str, db: Session = Depends(model_session("FilmDB"))):
            actor = Actor(name=name)
            db.add(actor)
            db.commit()
            return {"id": actor.id, "name": actor.name}

        @app.get("/caching")
        def caching_state(model: FilmDB = Depends(Model("FilmDB"))):
            return {"caching": model.caching}

        @app.get("/missing")
        def missing(model=Depends(Model("Nope"))):
            return {}

        return app

    def test_session_dependency_writes(self, app):
        """Test a write through model_session is visible to result sets."""
        # Arrange
        client = TestClient(app)

        # Act
        created = client.post("/actors/Toshiro")
        listed = client.get("/actors")

        # Assert
        assert created.status_code == 201
        assert created.json()["name"] == "Toshiro"
        assert listed.json() == ["Toshiro"]

    def test_model_dependency_sees_app_cache(self, app):
        client = TestClient(app)

        response = client.get("/caching")

        assert response.json() == {"caching": True}

    def test_unknown_model_returns_404(self, app):
        client = TestClient(app)

        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"detail": "Model not found: Nope"}

    def test_session_dependency_rejects_accessor_names(self, film_model):
        # Arrange
        app = create_app([film_model])

        @app.get("/bad")
        def bad(db: Session = Depends(model_session("FilmDB.Actor"))):
            return {}

        # Act & Assert
        with pytest.raises(TypeError):
            TestClient(app).get("/bad")

    def test_app_without_cache_disables_caching(self, film_model):
        # Arrange
        app = create_app([film_model])

        @app.get("/caching")
        def caching_state(model: FilmDB = Depends(Model("FilmDB"))):
            return {"caching": model.caching}

        # Act
        response = TestClient(app).get("/caching")

        # Assert
        assert response.json() == {"caching": False}

    def test_missing_registry(self):
        app = FastAPI()

        @app.get("/actors")
        def list_actors(actors=Depends(Model("FilmDB.Actor"))):
            return []

        with pytest.raises(RuntimeError):
            TestClient(app).get("/actors")

    def test_install_models_reuses_registry(self, film_model, sqlite_dsn):
        # Arrange
        app = FastAPI()
        other = FilmDB(connect_info=sqlite_dsn, model_name="Archive", caching=False)

        # Act
        first = install_models(app, film_model)
        second = install_models(app, other)

        # Assert
        assert first is second
        assert "Archive.Actor" in app.state.models
        other.dispose()

    def test_shutdown_disposes_models(self, film_model):
        app = create_app([film_model])

        with patch.object(ModelRegistry, "dispose") as dispose:
            with TestClient(app):
                pass

        dispose.assert_called_once_with()
