"""
Storage: engine and session management for a connected schema.

Builds a SQLAlchemy engine from a normalized connection spec and hands out
sessions. The replicated variant routes reads to replica engines and
writes to the primary.

Dependencies: sqlalchemy, schema_model.core, schema_model.boundary.db
System role: Database connection lifecycle management
"""

import itertools
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Generator, Iterator, Mapping

from sqlalchemy import Engine, Select, create_engine, event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from schema_model.boundary.db.connect_info import ConnectionSpec, normalize_connect_info
from schema_model.boundary.db.cursors import DEFAULT_CURSOR, Cursor, load_cursor_class
from schema_model.core.exceptions import StorageTypeError
from schema_model.core.loading import load_object
from schema_model.observability.log_utils import redact_connect_info

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset({"dsn", "user", "password", "cursor_class", "on_connect_do"})


def build_url(connect_info: Mapping[str, Any]) -> URL:
    """
    Parse the dsn, letting non-empty user/password override its credentials.

    Raises:
        ArgumentError: If the dsn is not a valid SQLAlchemy URL
    """
    url = make_url(connect_info["dsn"])
    if connect_info.get("user"):
        url = url.set(username=connect_info["user"])
    if connect_info.get("password"):
        url = url.set(password=connect_info["password"])
    return url


def build_engine(connect_info: Mapping[str, Any]) -> Engine:
    """
    Create a SQLAlchemy engine from a connection spec.

    Keys other than the reserved ones are passed to create_engine unchanged,
    so driver options belong under ``connect_args``.

    Args:
        connect_info: Normalized connection spec

    Returns:
        Engine: Configured SQLAlchemy engine

    Raises:
        ArgumentError: If the dsn is not a valid SQLAlchemy URL
    """
    url = build_url(connect_info)

    engine_kwargs = {key: value for key, value in connect_info.items() if key not in RESERVED_KEYS}
    engine = create_engine(url, **engine_kwargs)

    statements = connect_info.get("on_connect_do") or []
    if isinstance(statements, str):
        statements = [statements]
    if statements:
        _install_on_connect_do(engine, list(statements))

    return engine


def _install_on_connect_do(engine: Engine, statements: list[str]) -> None:
    @event.listens_for(engine, "connect")
    def _run_statements(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            for statement in statements:
                cursor.execute(statement)
        finally:
            cursor.close()


class Storage:
    """
    Connected storage for a schema.

    Attributes:
        engine: Primary SQLAlchemy engine
        cursor_class: Cursor strategy used by result sets
    """

    replicated = False

    def __init__(self, connect_info: Any) -> None:
        """
        Connect storage using a connection spec.

        Args:
            connect_info: Connection spec (normalized again, so raw shapes work)
        """
        self._connect_info: ConnectionSpec = normalize_connect_info(connect_info)
        self.cursor_class: type[Cursor] = load_cursor_class(
            self._connect_info.get("cursor_class", DEFAULT_CURSOR)
        )
        self.engine = build_engine(self._connect_info)
        self._session_factory = self._build_session_factory()
        logger.info(
            "Storage connected",
            extra={"connect_info": redact_connect_info(self._connect_info)},
        )

    @property
    def connect_info(self) -> Mapping[str, Any]:
        return MappingProxyType(self._connect_info)

    def _build_session_factory(self) -> sessionmaker:
        return sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def session(self) -> Session:
        """Open a new session; the caller owns closing it."""
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Yield a session that is closed afterwards, even on errors.

        Usage:
            with storage.session_scope() as session:
                session.add(obj)
                session.commit()
        """
        session = self.session()
        try:
            yield session
        finally:
            session.close()

    def ping(self) -> bool:
        """Run a trivial query against the primary engine."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def _is_replica_safe(clause: Any) -> bool:
    if clause is None:
        return True
    return isinstance(clause, Select) and clause._for_update_arg is None


class _RoutingSession(Session):
    """
    Session that sends writes to the primary and reads to replicants.

    Once a transaction has written (flush, DML, textual SQL, or SELECT ...
    FOR UPDATE), every later statement of that transaction also uses the
    primary so the session reads its own writes.
    """

    def __init__(self, storage: "ReplicatedStorage", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._storage = storage
        self._on_primary = False
        event.listen(self, "after_transaction_end", self._release_primary)

    def _release_primary(self, session: Session, transaction) -> None:
        if transaction.parent is None:
            self._on_primary = False

    def get_bind(self, mapper=None, clause=None, **kwargs):
        if self._on_primary or self._flushing or not _is_replica_safe(clause):
            self._on_primary = True
            return self._storage.engine
        return self._storage.next_replicant()


class ReplicatedStorage(Storage):
    """
    Storage with read replicas.

    Flushes and writing statements use the primary engine, as does the rest
    of a transaction that has written; other reads rotate through
    the connected replicants, falling back to the primary while none are
    connected.
    """

    replicated = True

    def __init__(self, connect_info: Any) -> None:
        self.replicants: list[Engine] = []
        self._rotation: Iterator[Engine] | None = None
        super().__init__(connect_info)

    def _build_session_factory(self) -> sessionmaker:
        return sessionmaker(
            class_=_RoutingSession,
            storage=self,
            autoflush=False,
            expire_on_commit=False,
        )

    def connect_replicants(self, *connect_infos: Any) -> list[Engine]:
        """
        Connect replica engines.

        Args:
            *connect_infos: connect_info values, one per replicant

        Returns:
            list[Engine]: Engines added by this call
        """
        added = []
        for raw in connect_infos:
            info = normalize_connect_info(raw)
            added.append(build_engine(info))
            logger.info("Replicant connected", extra={"connect_info": redact_connect_info(info)})
        self.replicants.extend(added)
        self._rotation = itertools.cycle(self.replicants) if self.replicants else None
        return added

    def next_replicant(self) -> Engine:
        """Return the engine for the next read."""
        if self._rotation is None:
            return self.engine
        return next(self._rotation)

    def dispose(self) -> None:
        super().dispose()
        for engine in self.replicants:
            engine.dispose()


STORAGE_TYPES: dict[str, type[Storage]] = {
    "dbi": Storage,
    "replicated": ReplicatedStorage,
}

DEFAULT_STORAGE_TYPE = "dbi"


def resolve_storage_type(storage_type: str | type | None) -> type[Storage]:
    """
    Resolve a storage type name, import path, or class.

    Raises:
        StorageTypeError: If it cannot be loaded or is not a Storage subclass
    """
    if storage_type is None:
        return STORAGE_TYPES[DEFAULT_STORAGE_TYPE]

    if isinstance(storage_type, str):
        if storage_type in STORAGE_TYPES:
            return STORAGE_TYPES[storage_type]
        try:
            storage_type = load_object(storage_type)
        except ImportError as e:
            raise StorageTypeError(
                f"Cannot load storage_type '{storage_type}'", details={"error": str(e)}
            ) from e

    if not isinstance(storage_type, type) or not issubclass(storage_type, Storage):
        raise StorageTypeError(f"storage_type {storage_type!r} is not a Storage subclass")
    return storage_type
