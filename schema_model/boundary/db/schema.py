"""
Schema wrapper around a SQLAlchemy declarative base.

A Schema names the sources (mapped classes) of a declarative base and,
once connected, owns the storage used to query them. Models keep an
unconnected "composed" schema around to create further connections.

Dependencies: sqlalchemy, schema_model.core, schema_model.boundary.db
System role: Source lookup and connection entry point for models
"""

import logging
from typing import Any, ClassVar

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, Mapper, Session

from schema_model.boundary.db.connect_info import normalize_connect_info
from schema_model.boundary.db.resultset import ResultSet
from schema_model.boundary.db.storage import Storage, resolve_storage_type
from schema_model.core.exceptions import SchemaClassError, SchemaNotConnectedError, UnknownSourceError
from schema_model.core.loading import load_object

logger = logging.getLogger(__name__)


class Schema:
    """
    Schema over a declarative base.

    Subclass and set ``base`` (and optionally ``connect_info`` and
    ``storage_type``) to describe an application schema:

        class FilmSchema(Schema):
            base = FilmBase
            connect_info = "sqlite:///film.db"

    Attributes:
        base: Declarative base whose mapped classes are the sources
        namespace: Model namespace this schema was composed for
        storage_type: Storage type used by connection()
        default_resultset_attributes: Attributes seeded into every result set
    """

    base: ClassVar[type[DeclarativeBase] | None] = None
    connect_info: ClassVar[Any] = None
    storage_type: Any = None

    def __init__(self, namespace: str | None = None) -> None:
        if type(self).base is None:
            raise SchemaClassError(f"{type(self).__name__} does not define a declarative base")
        self.namespace = namespace
        self.storage_type = type(self).storage_type
        self.default_resultset_attributes: dict[str, Any] = {}
        self._storage: Storage | None = None

    def __repr__(self) -> str:
        state = "connected" if self.connected else "unconnected"
        return f"<{type(self).__name__} namespace={self.namespace!r} {state}>"

    @classmethod
    def compose(cls, namespace: str | None = None) -> "Schema":
        """Create an unconnected schema bound to a model namespace."""
        return cls(namespace=namespace)

    def clone(self) -> "Schema":
        """Create an unconnected copy sharing base, storage type and namespace."""
        clone = type(self)(namespace=self.namespace)
        clone.storage_type = self.storage_type
        clone.default_resultset_attributes = dict(self.default_resultset_attributes)
        return clone

    def connection(self, connect_info: Any) -> "Schema":
        """
        Attach storage built from connect_info.

        Args:
            connect_info: connect_info in any accepted shape

        Returns:
            Schema: self, now connected
        """
        info = normalize_connect_info(connect_info)
        storage_class = resolve_storage_type(self.storage_type)
        self._storage = storage_class(info)
        logger.debug(
            "Schema connected",
            extra={"schema": type(self).__name__, "storage": storage_class.__name__},
        )
        return self

    def connect(self, connect_info: Any) -> "Schema":
        """Clone this schema and connect the clone."""
        return self.clone().connection(connect_info)

    @property
    def connected(self) -> bool:
        return self._storage is not None

    @property
    def storage(self) -> Storage:
        if self._storage is None:
            raise SchemaNotConnectedError(f"{type(self).__name__} has no storage; call connection() first")
        return self._storage

    @property
    def sources(self) -> list[str]:
        """Sorted monikers of every mapped class."""
        return sorted(mapper.class_.__name__ for mapper in self.base.registry.mappers)

    def class_(self, moniker: str) -> type:
        """Return the mapped class for a moniker."""
        for mapper in self.base.registry.mappers:
            if mapper.class_.__name__ == moniker:
                return mapper.class_
        raise UnknownSourceError(moniker, type(self).__name__)

    def source(self, moniker: str) -> Mapper:
        """Return the mapper for a moniker."""
        return inspect(self.class_(moniker))

    def resultset(self, moniker: str, session: Session | None = None) -> ResultSet:
        """Return a result set for a moniker, seeded with the default attributes."""
        return ResultSet(self, moniker, attrs=self.default_resultset_attributes, session=session)

    def deploy(self) -> None:
        """Create every table of the schema in the connected database."""
        self.base.metadata.create_all(self.storage.engine)


def load_schema_class(schema_class: Any) -> type[Schema]:
    """
    Resolve a schema class from configuration.

    Accepts a Schema subclass, a DeclarativeBase subclass (wrapped in a
    generated Schema subclass), or an import path to either.

    Raises:
        SchemaClassError: If it cannot be loaded or is not a schema
    """
    if schema_class is None:
        raise SchemaClassError("schema_class must be defined for this model")

    if isinstance(schema_class, str):
        try:
            schema_class = load_object(schema_class)
        except ImportError as e:
            raise SchemaClassError(
                f"Cannot load schema class '{schema_class}'", details={"error": str(e)}
            ) from e

    if isinstance(schema_class, type) and issubclass(schema_class, Schema):
        return schema_class

    # mapped classes subclass the base too; only the unmapped base qualifies
    if (
        isinstance(schema_class, type)
        and issubclass(schema_class, DeclarativeBase)
        and inspect(schema_class, raiseerr=False) is None
    ):
        return type(f"{schema_class.__name__}Schema", (Schema,), {"base": schema_class})

    raise SchemaClassError(f"{schema_class!r} is neither a Schema nor a declarative base")
