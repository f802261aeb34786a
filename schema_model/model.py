"""
Schema model: a framework-managed model component over a SQLAlchemy schema.

The model is a thin wrapper, not itself a schema or result set. It loads
the configured schema class, normalizes connect_info, sets up cursor
caching and optional roles, connects, and exposes shortcuts plus one
result set accessor per source:

    class FilmDB(SchemaModel):
        config = {
            "schema_class": "myapp.schema:FilmBase",
            "connect_info": {"dsn": "postgresql://db/film", "user": "film", "password": "..."},
        }

    film_db = FilmDB()
    film_db.resultset("Actor").search(Actor.name == "Kim").all()

Dependencies: fastapi, schema_model.boundary.db, schema_model.configs, schema_model.roles
System role: Model component registered with the application
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping

from fastapi import Request
from sqlalchemy.orm import Mapper, Session

from schema_model.boundary.db.connect_info import ConnectionSpec, normalize_connect_info
from schema_model.boundary.db.cursors import (
    CACHED_CURSOR,
    CacheBackend,
    Cursor,
    cursor_registry,
    load_cursor_class,
)
from schema_model.boundary.db.resultset import ResultSet
from schema_model.boundary.db.schema import Schema, load_schema_class
from schema_model.boundary.db.storage import Storage
from schema_model.configs.model import SchemaModelSettings
from schema_model.core.exceptions import CursorCapabilityError, CursorClassLoadError, MissingConnectInfo
from schema_model.observability.log_utils import log_with_context, redact_connect_info
from schema_model.roles import ModelRole, resolve_role

logger = logging.getLogger(__name__)

ResultSetAccessor = Callable[..., ResultSet]


def _make_accessor(model_name: str, moniker: str) -> ResultSetAccessor:
    def accessor(registry, request: Request | None = None) -> ResultSet:
        return registry.model(model_name, request).resultset(moniker)

    accessor.__name__ = f"{model_name}.{moniker}"
    return accessor


def _cache_from(request: Request | None) -> CacheBackend | None:
    if request is None:
        return None
    state = getattr(request.app, "state", None)
    return getattr(state, "cache", None)


class SchemaModel:
    """
    Model component wrapping a connected schema.

    Configure subclasses through the class-level ``config`` dict; keyword
    arguments to the constructor override it.

    Attributes:
        settings: Validated model settings
        model_name: Registry name of the model
        schema_class: Schema class loaded from schema_class
        composed_schema: Unconnected schema, used for new connections
        schema: Connected schema used by this model
        caching: Whether cursor caching is active
        storage_type: Storage type applied to the schema
        roles: Capability objects composed into this model
        resultset_accessors: Moniker to accessor function
    """

    config: ClassVar[dict[str, Any]] = {}
    settings_class: ClassVar[type[SchemaModelSettings]] = SchemaModelSettings

    def __init__(self, settings: SchemaModelSettings | None = None, **overrides: Any) -> None:
        """
        Construct and connect the model.

        Args:
            settings: Pre-built settings; built from ``config`` when omitted
            **overrides: Settings overriding ``config``

        Raises:
            ConfigurationError: If the configuration cannot produce a
                connected model (fatal; abort application startup)
        """
        if settings is None:
            settings = self.settings_class(**{**type(self).config, **overrides})
        elif overrides:
            settings = type(settings)(**{**settings.model_dump(), **overrides})
        self.settings = settings

        self.model_name: str = settings.model_name or type(self).__name__
        self.caching: bool | None = settings.caching
        self.storage_type: Any = settings.storage_type

        self.schema_class: type[Schema] = load_schema_class(settings.schema_class)

        connect_info = settings.connect_info
        if connect_info is None:
            connect_info = self.schema_class.connect_info
        if connect_info is None:
            raise MissingConnectInfo(
                f"Either connect_info must be configured for {self.model_name} or "
                f"{self.schema_class.__name__} must have connect_info defined on it",
                model=self.model_name,
            )

        self.composed_schema: Schema = self.schema_class.compose(self.model_name)
        self.schema: Schema = self.composed_schema.clone()

        self.roles: list[ModelRole] = [resolve_role(name).from_settings(settings) for name in settings.roles]
        for role in self.roles:
            role.setup(self)

        if self.storage_type is not None:
            self.schema.storage_type = self.storage_type

        self._connect_info: ConnectionSpec = normalize_connect_info(connect_info)

        self._setup_caching()

        self.schema.connection(self._connect_info)

        for role in self.roles:
            role.finalize(self)

        self.resultset_accessors: dict[str, ResultSetAccessor] = {
            moniker: _make_accessor(self.model_name, moniker) for moniker in self.schema.sources
        }

        log_with_context(
            logger,
            logging.INFO,
            f"Model {self.model_name} ready",
            model=self.model_name,
            schema=self.schema_class.__name__,
            sources=self.schema.sources,
            caching=self.caching,
            dsn=redact_connect_info(self._connect_info)["dsn"],
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.model_name!r} caching={self.caching}>"

    @property
    def connect_info(self) -> Mapping[str, Any]:
        """Normalized connect_info (read-only)."""
        return MappingProxyType(self._connect_info)

    def _setup_caching(self) -> None:
        if self.caching is not None and not self.caching:
            return

        self.caching = False

        cursor_class = self._connect_info.get("cursor_class")
        if cursor_class is not None:
            try:
                cursor_registry.require_capability(load_cursor_class(cursor_class), "clear_cache")
            except CursorCapabilityError:
                logger.warning("Caching disabled, cursor_class %s does not support it.", cursor_class)
                return
        else:
            try:
                load_cursor_class(CACHED_CURSOR)
            except CursorClassLoadError as e:
                logger.warning("Caching disabled, cannot load %s: %s", CACHED_CURSOR, e)
                return
            self._connect_info["cursor_class"] = CACHED_CURSOR

        self.caching = True

    def _reset_cursor_class(self) -> None:
        if self._connect_info.get("cursor_class") == CACHED_CURSOR:
            self.storage.cursor_class = Cursor

    def accept_context(self, request: Request | None = None) -> "SchemaModel":
        """
        Per-request hook run whenever the model is fetched from the registry.

        Installs the application cache into the schema's default result set
        attributes. Without a cache, caching is switched off for good.

        Args:
            request: Current request (its app.state.cache is the cache)

        Returns:
            SchemaModel: self
        """
        if not self.caching:
            return self

        cache = _cache_from(request)
        if cache is None:
            logger.debug(
                "Cursor caching disabled, the application does not provide a cache on app.state.cache"
            )
            self.caching = False
            self._reset_cursor_class()
            return self

        self.schema.default_resultset_attributes["cache_object"] = cache
        return self

    @property
    def storage(self) -> Storage:
        """Storage of the connected schema."""
        return self.schema.storage

    def clone(self) -> Schema:
        """Shortcut for composed_schema.clone()."""
        return self.composed_schema.clone()

    def connect(self, connect_info: Any) -> Schema:
        """Shortcut for composed_schema.connect()."""
        return self.composed_schema.connect(connect_info)

    def source(self, moniker: str) -> Mapper:
        return self.schema.source(moniker)

    def class_(self, moniker: str) -> type:
        return self.schema.class_(moniker)

    def resultset(self, moniker: str, session: Session | None = None) -> ResultSet:
        return self.schema.resultset(moniker, session=session)

    def deploy(self) -> None:
        """Create the schema's tables."""
        self.schema.deploy()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.storage.dispose()
