"""
Replicated storage support.

Switches the model to replicated storage and connects the configured read
replicas once the primary is connected:

    class FilmDB(SchemaModel):
        config = {
            "schema_class": "myapp.schema:FilmBase",
            "roles": ["replicated"],
            "connect_info": ["postgresql://primary/film", "user", "pass"],
            "replicants": [
                ["postgresql://replica1/film", "user", "pass"],
                ["postgresql://replica2/film", "user", "pass"],
            ],
        }

Dependencies: schema_model.boundary.db, schema_model.core
System role: Read replica role for schema models
"""

import logging
from typing import TYPE_CHECKING, Any, Sequence

from schema_model.boundary.db.connect_info import ConnectionSpec, normalize_connect_info
from schema_model.boundary.db.storage import ReplicatedStorage, resolve_storage_type
from schema_model.configs.model import SchemaModelSettings
from schema_model.core.exceptions import ConfigurationError, StorageTypeError
from schema_model.roles.base import ModelRole

if TYPE_CHECKING:
    from schema_model.model import SchemaModel

logger = logging.getLogger(__name__)

REPLICATED_STORAGE_TYPE = "replicated"


class ReplicationPolicy(ModelRole):
    """
    Replication role.

    Attributes:
        replicants: Normalized connect_info of every replica
    """

    name = "replicated"

    def __init__(self, replicants: Sequence[Any]) -> None:
        if not replicants:
            raise ConfigurationError("replicants must be configured for the replicated role")
        self.replicants: list[ConnectionSpec] = [normalize_connect_info(raw) for raw in replicants]

    @classmethod
    def from_settings(cls, settings: SchemaModelSettings) -> "ReplicationPolicy":
        return cls(settings.replicants or [])

    def setup(self, model: "SchemaModel") -> None:
        """Check or select a storage type that supports replication."""
        storage_type = model.storage_type
        if storage_type is None:
            model.storage_type = REPLICATED_STORAGE_TYPE
            return

        if not issubclass(resolve_storage_type(storage_type), ReplicatedStorage):
            raise StorageTypeError(
                "This storage_type cannot be used with replication",
                model=model.model_name,
                details={"storage_type": str(storage_type)},
            )

    def finalize(self, model: "SchemaModel") -> None:
        """Connect the replicas on the model's storage."""
        model.storage.connect_replicants(*self.replicants)
        logger.info(
            "Replicants connected",
            extra={"model": model.model_name, "count": len(self.replicants)},
        )
