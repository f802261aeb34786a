"""
Framework binding: model registry, dependencies and application factory.
"""

from schema_model.api.deps import Model, get_model_registry, install_models, model_session
from schema_model.api.main import create_app
from schema_model.api.registry import ModelRegistry

__all__ = [
    "Model",
    "ModelRegistry",
    "create_app",
    "get_model_registry",
    "install_models",
    "model_session",
]
