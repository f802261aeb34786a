"""
Model roles: optional capabilities composed into a model at construction.

Dependencies: schema_model.configs
System role: Extension hooks around model construction
"""

from typing import TYPE_CHECKING

from schema_model.configs.model import SchemaModelSettings

if TYPE_CHECKING:
    from schema_model.model import SchemaModel


class ModelRole:
    """
    Base class for model roles.

    ``setup`` runs before the schema is connected, ``finalize`` after.
    """

    name: str = ""

    @classmethod
    def from_settings(cls, settings: SchemaModelSettings) -> "ModelRole":
        """Build the role from the model's settings."""
        return cls()

    def setup(self, model: "SchemaModel") -> None:
        pass

    def finalize(self, model: "SchemaModel") -> None:
        pass
