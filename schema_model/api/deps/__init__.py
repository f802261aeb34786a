"""
Dependency injection for request handlers.
"""

from schema_model.api.deps.dependencies import (
    Model,
    get_model_registry,
    install_models,
    model_session,
)

__all__ = ["Model", "get_model_registry", "install_models", "model_session"]
