"""
Result sets over schema sources.

A result set is an immutable description of a query against one source;
each refinement returns a new result set. Rows are fetched through the
storage's cursor class, so cursor caching applies transparently.

Dependencies: sqlalchemy, schema_model.boundary.db
System role: Query entry point exposed to request handlers
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator, Mapping, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from schema_model.boundary.db.schema import Schema

QUERY_ATTRS = ("order_by", "limit", "offset")


class ResultSet:
    """
    Query builder for one schema source.

    Attributes:
        schema: Connected schema the source belongs to
        moniker: Source name
        attrs: Result set attributes (order_by, limit, offset, cache_for, cache_object)
    """

    def __init__(
        self,
        schema: "Schema",
        moniker: str,
        attrs: Mapping[str, Any] | None = None,
        criteria: Sequence[Any] = (),
        session: Session | None = None,
    ) -> None:
        self.schema = schema
        self.moniker = moniker
        self.result_class = schema.class_(moniker)
        self.attrs = dict(attrs or {})
        self.criteria = tuple(criteria)
        self._session = session

    def __repr__(self) -> str:
        return f"<ResultSet {self.moniker} criteria={len(self.criteria)} attrs={sorted(self.attrs)}>"

    def search(self, *criteria: Any, **attrs: Any) -> "ResultSet":
        """
        Return a new result set narrowed by criteria.

        Args:
            *criteria: SQLAlchemy boolean expressions
            **attrs: Result set attributes to merge (order_by, limit, offset, cache_for)

        Returns:
            ResultSet: Refined result set
        """
        merged = {**self.attrs, **attrs}
        return ResultSet(
            self.schema,
            self.moniker,
            attrs=merged,
            criteria=self.criteria + criteria,
            session=self._session,
        )

    def filter_by(self, **values: Any) -> "ResultSet":
        """Narrow by column equality."""
        criteria = [getattr(self.result_class, name) == value for name, value in values.items()]
        return self.search(*criteria)

    @property
    def statement(self):
        stmt = select(self.result_class)
        if self.criteria:
            stmt = stmt.where(*self.criteria)
        order_by = self.attrs.get("order_by")
        if order_by is not None:
            if not isinstance(order_by, (list, tuple)):
                order_by = [order_by]
            stmt = stmt.order_by(*order_by)
        if self.attrs.get("limit") is not None:
            stmt = stmt.limit(self.attrs["limit"])
        if self.attrs.get("offset") is not None:
            stmt = stmt.offset(self.attrs["offset"])
        return stmt

    @contextmanager
    def _session_scope(self) -> Generator[Session, None, None]:
        if self._session is not None:
            yield self._session
            return
        with self.schema.storage.session_scope() as session:
            yield session

    def cursor(self, session: Session):
        """Build a cursor for this result set in the given session."""
        cursor_class = self.schema.storage.cursor_class
        return cursor_class(session, self.statement, self.attrs)

    def all(self) -> list[Any]:
        """Fetch every matching row."""
        with self._session_scope() as session:
            return self.cursor(session).all()

    def first(self) -> Any | None:
        """Fetch the first matching row, or None."""
        rows = self.search(limit=1).all()
        return rows[0] if rows else None

    def count(self) -> int:
        """Count matching rows, ignoring limit and offset."""
        stmt = select(func.count()).select_from(self.result_class)
        if self.criteria:
            stmt = stmt.where(*self.criteria)
        with self._session_scope() as session:
            return session.scalar(stmt) or 0

    def find(self, ident: Any) -> Any | None:
        """Fetch a row by primary key."""
        with self._session_scope() as session:
            return session.get(self.result_class, ident)

    def create(self, **values: Any) -> Any:
        """Insert a row and commit it."""
        with self._session_scope() as session:
            row = self.result_class(**values)
            session.add(row)
            session.commit()
            return row
