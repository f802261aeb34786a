"""
Database boundary layer: connection info, storage, schemas and result sets.

Exports:
  - normalize_connect_info(), ConnectionSpec: Canonical connection info
  - Cursor, CachedCursor, cursor_registry: Row-fetching strategies
  - Storage, ReplicatedStorage, resolve_storage_type(): Engine and session management
  - Schema, load_schema_class(): Declarative base wrapper
  - ResultSet: Query builder over one source

Dependencies: sqlalchemy, schema_model.core
System role: Database adapter delegating to SQLAlchemy
"""

from schema_model.boundary.db.connect_info import ConnectionSpec, normalize_connect_info
from schema_model.boundary.db.cursors import (
    CacheBackend,
    CachedCursor,
    Cursor,
    CursorRegistry,
    cursor_registry,
    load_cursor_class,
    supports_caching,
)
from schema_model.boundary.db.resultset import ResultSet
from schema_model.boundary.db.schema import Schema, load_schema_class
from schema_model.boundary.db.storage import (
    ReplicatedStorage,
    Storage,
    build_engine,
    build_url,
    resolve_storage_type,
)

__all__ = [
    # Connection info
    "ConnectionSpec",
    "normalize_connect_info",
    # Cursors
    "CacheBackend",
    "CachedCursor",
    "Cursor",
    "CursorRegistry",
    "cursor_registry",
    "load_cursor_class",
    "supports_caching",
    # Storage
    "ReplicatedStorage",
    "Storage",
    "build_engine",
    "build_url",
    "resolve_storage_type",
    # Schema
    "ResultSet",
    "Schema",
    "load_schema_class",
]
