"""
Model registry.

Resolves names to models and to result sets: ``"FilmDB"`` returns the
FilmDB model (after its per-request hook) and ``"FilmDB.Actor"`` returns
the Actor result set of that model.

Dependencies: fastapi, schema_model.model
System role: Application-wide lookup of model components
"""

import logging

from fastapi import Request

from schema_model.boundary.db.resultset import ResultSet
from schema_model.core.exceptions import ConfigurationError, UnknownModelError
from schema_model.model import ResultSetAccessor, SchemaModel

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Container for registered models and their result set accessors."""

    def __init__(self, *models: SchemaModel) -> None:
        self._models: dict[str, SchemaModel] = {}
        self._accessors: dict[str, ResultSetAccessor] = {}
        for model in models:
            self.register(model)

    def register(self, model: SchemaModel) -> SchemaModel:
        """
        Register a model and one accessor per source.

        Raises:
            ConfigurationError: If the model name is already registered
        """
        name = model.model_name
        if name in self._models:
            raise ConfigurationError(f"Model '{name}' is already registered", model=name)

        self._models[name] = model
        for moniker, accessor in model.resultset_accessors.items():
            self._accessors[f"{name}.{moniker}"] = accessor

        logger.info(
            "Model registered",
            extra={"model": name, "accessors": len(model.resultset_accessors)},
        )
        return model

    def names(self) -> list[str]:
        """Every resolvable name: models first, then accessors."""
        return sorted(self._models) + sorted(self._accessors)

    def models(self) -> list[SchemaModel]:
        return list(self._models.values())

    def __contains__(self, name: str) -> bool:
        return name in self._models or name in self._accessors

    def model(self, name: str, request: Request | None = None) -> SchemaModel | ResultSet:
        """
        Resolve a model or result set by name.

        Args:
            name: Model name or "<model>.<moniker>"
            request: Current request, passed to the model's per-request hook

        Returns:
            The model, or a result set for accessor names

        Raises:
            UnknownModelError: If nothing is registered under the name
        """
        if name in self._models:
            return self._models[name].accept_context(request)
        if name in self._accessors:
            return self._accessors[name](self, request)
        raise UnknownModelError(name)

    def dispose(self) -> None:
        """Release pooled connections of every model."""
        for model in self._models.values():
            model.dispose()
