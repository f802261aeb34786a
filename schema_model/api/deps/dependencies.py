"""
Dependency injection helpers.

Factory functions for FastAPI dependencies resolving registered models,
result sets and storage sessions.

Dependencies: fastapi, sqlalchemy, schema_model.api.registry
System role: DI glue between request handlers and models
"""

from typing import Any, Callable, Generator

from fastapi import Depends, FastAPI, Request
from sqlalchemy.orm import Session

from schema_model.api.registry import ModelRegistry
from schema_model.boundary.db.cursors import CacheBackend
from schema_model.boundary.db.resultset import ResultSet
from schema_model.model import SchemaModel


def install_models(app: FastAPI, *models: SchemaModel, cache: CacheBackend | None = None) -> ModelRegistry:
    """
    Attach a model registry (and optional cache) to an application.

    Args:
        app: FastAPI application
        *models: Constructed models to register
        cache: Cache used by cursor caching; left untouched when None

    Returns:
        ModelRegistry: The registry stored on app.state.models
    """
    registry = getattr(app.state, "models", None)
    if registry is None:
        registry = ModelRegistry()
        app.state.models = registry
    for model in models:
        registry.register(model)
    if cache is not None:
        app.state.cache = cache
    return registry


def get_model_registry(request: Request) -> ModelRegistry:
    """
    FastAPI dependency returning the application's model registry.

    Raises:
        RuntimeError: If install_models() was never called for the app
    """
    registry = getattr(request.app.state, "models", None)
    if registry is None:
        raise RuntimeError("No model registry installed; call install_models(app, ...) first")
    return registry


def Model(name: str) -> Callable[..., SchemaModel | ResultSet]:
    """
    Build a dependency resolving a model or result set by name.

    Usage:
        @app.get("/actors")
        def list_actors(actors: ResultSet = Depends(Model("FilmDB.Actor"))):
            return [actor.name for actor in actors.all()]
    """

    def dependency(
        request: Request,
        registry: ModelRegistry = Depends(get_model_registry),
    ) -> SchemaModel | ResultSet:
        return registry.model(name, request)

    dependency.__name__ = f"model_{name.replace('.', '_')}"
    return dependency


def model_session(name: str) -> Callable[..., Generator[Session, Any, None]]:
    """
    Build a dependency yielding a session on a model's storage.

    The session is closed after the request completes, even if the route
    raises.

    Usage:
        @app.post("/actors")
        def add_actor(db: Session = Depends(model_session("FilmDB"))):
            ...
    """

    def dependency(
        request: Request,
        registry: ModelRegistry = Depends(get_model_registry),
    ) -> Generator[Session, Any, None]:
        model = registry.model(name, request)
        if not isinstance(model, SchemaModel):
            raise TypeError(f"'{name}' names a result set, not a model")
        with model.storage.session_scope() as session:
            yield session

    dependency.__name__ = f"session_{name.replace('.', '_')}"
    return dependency
