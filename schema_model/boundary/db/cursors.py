"""
Cursor strategies for fetching result set rows.

A cursor class governs how the rows of a result set are fetched. The default
cursor simply executes the statement; the cached cursor consults the
application's cache object when the result set asks for it via ``cache_for``.

Cursor classes are resolved by name through a registry, or by dotted import
path for application-provided strategies.

Dependencies: sqlalchemy, schema_model.core
System role: Pluggable row-fetching strategy for result sets
"""

import hashlib
import logging
from typing import Any, Mapping, Protocol, runtime_checkable

from sqlalchemy import Select, inspect
from sqlalchemy.orm import Session, make_transient_to_detached

from schema_model.core.exceptions import CursorCapabilityError, CursorClassLoadError
from schema_model.core.loading import load_object

logger = logging.getLogger(__name__)

DEFAULT_CURSOR = "default"
CACHED_CURSOR = "cached"


@runtime_checkable
class CacheBackend(Protocol):
    """Interface of the application cache object used by the cached cursor."""

    def get(self, key: str) -> Any:
        """Return the cached value or None."""

    def set(self, key: str, value: Any, expire: int | None = None) -> None:
        """Store a value, optionally expiring after ``expire`` seconds."""

    def remove(self, key: str) -> None:
        """Drop a cached value."""


class Cursor:
    """
    Default cursor: executes the statement on every fetch.

    Attributes:
        session: Session the statement runs in
        statement: SQLAlchemy select statement
        attrs: Result set attributes in effect for this fetch
    """

    def __init__(self, session: Session, statement: Select, attrs: Mapping[str, Any] | None = None) -> None:
        self.session = session
        self.statement = statement
        self.attrs = dict(attrs or {})

    def all(self) -> list[Any]:
        """Fetch every row of the statement as ORM objects."""
        return list(self.session.scalars(self.statement).all())


class CachedCursor(Cursor):
    """
    Cursor that stores fetched rows in the application cache.

    Caching applies only when the result set attributes carry both
    ``cache_for`` (seconds) and ``cache_object`` (a CacheBackend). The cache
    holds each row's column values, never the ORM instances handed to
    callers; hits are rebuilt as detached instances and merged into the
    current session without a database round trip.
    """

    @property
    def cache_object(self) -> CacheBackend | None:
        return self.attrs.get("cache_object")

    @property
    def cache_for(self) -> int | None:
        return self.attrs.get("cache_for")

    @property
    def cache_key(self) -> str:
        """Key derived from the compiled SQL and its bound parameters."""
        bind = self.session.get_bind(clause=self.statement)
        compiled = self.statement.compile(dialect=bind.dialect)
        params = sorted((str(k), repr(v)) for k, v in compiled.params.items())
        raw = f"{compiled}|{params!r}"
        return "schema_model:" + hashlib.sha1(raw.encode("utf-8")).hexdigest()

    @property
    def entity(self) -> type:
        return self.statement.column_descriptions[0]["entity"]

    def all(self) -> list[Any]:
        cache = self.cache_object
        if cache is None or not self.cache_for:
            return super().all()

        key = self.cache_key
        cached = cache.get(key)
        if cached is not None:
            logger.debug("Cursor cache hit", extra={"cache_key": key})
            return [self._thaw(values) for values in cached]

        rows = super().all()
        cache.set(key, [_freeze(row) for row in rows], expire=self.cache_for)
        return rows

    def _thaw(self, values: Mapping[str, Any]) -> Any:
        row = inspect(self.entity).class_manager.new_instance()
        for name, value in values.items():
            setattr(row, name, value)
        make_transient_to_detached(row)
        return self.session.merge(row, load=False)

    def clear_cache(self) -> None:
        """Remove this statement's rows from the cache."""
        cache = self.cache_object
        if cache is not None:
            cache.remove(self.cache_key)


def _freeze(row: Any) -> dict[str, Any]:
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class CursorRegistry:
    """Maps cursor names to cursor classes."""

    def __init__(self) -> None:
        self._cursors: dict[str, type[Cursor]] = {}

    def register(self, name: str, cursor_class: type[Cursor]) -> None:
        """Register a cursor class under a short name."""
        if not isinstance(cursor_class, type) or not issubclass(cursor_class, Cursor):
            raise TypeError(f"Cursor '{name}' must be a Cursor subclass")
        self._cursors[name] = cursor_class

    def names(self) -> list[str]:
        return sorted(self._cursors)

    def resolve(self, cursor_class: str | type) -> type[Cursor]:
        """
        Resolve a registered name, an import path, or a class.

        Args:
            cursor_class: Cursor name, dotted path, or class

        Returns:
            The cursor class

        Raises:
            CursorClassLoadError: If the name is unregistered, the path
                cannot be imported, or the object is not a Cursor subclass
        """
        if isinstance(cursor_class, type):
            if not issubclass(cursor_class, Cursor):
                raise CursorClassLoadError(_qualified_name(cursor_class), "not a Cursor subclass")
            return cursor_class

        if not isinstance(cursor_class, str) or not cursor_class:
            raise CursorClassLoadError(repr(cursor_class), "expected a name or import path")

        if cursor_class in self._cursors:
            return self._cursors[cursor_class]

        if "." not in cursor_class and ":" not in cursor_class:
            raise CursorClassLoadError(cursor_class, "no cursor registered under this name")

        try:
            obj = load_object(cursor_class)
        except ImportError as e:
            raise CursorClassLoadError(cursor_class, str(e)) from e

        if not isinstance(obj, type) or not issubclass(obj, Cursor):
            raise CursorClassLoadError(cursor_class, "not a Cursor subclass")
        return obj

    def require_capability(self, cursor_class: type, capability: str) -> type:
        """
        Ensure a cursor class provides a capability method.

        Raises:
            CursorCapabilityError: If the method is missing
        """
        if not callable(getattr(cursor_class, capability, None)):
            raise CursorCapabilityError(_qualified_name(cursor_class), capability)
        return cursor_class


cursor_registry = CursorRegistry()
cursor_registry.register(DEFAULT_CURSOR, Cursor)
cursor_registry.register(CACHED_CURSOR, CachedCursor)


def load_cursor_class(cursor_class: str | type) -> type[Cursor]:
    """Resolve a cursor class through the module registry."""
    return cursor_registry.resolve(cursor_class)


def supports_caching(cursor_class: type) -> bool:
    """Check whether a cursor class can clear its cache."""
    try:
        cursor_registry.require_capability(cursor_class, "clear_cache")
    except CursorCapabilityError:
        return False
    return True
