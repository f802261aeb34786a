"""
Connection info normalization.

Accepts connect_info in any of the supported configuration shapes and
produces one canonical mapping:

    "sqlite:///film.db"
    ["postgresql://db/film", "user", "pass", {"pool_size": 5}, {"on_connect_do": [...]}]
    {"dsn": "postgresql://db/film", "user": "user", "pool_pre_ping": True}
    [{"dsn": "postgresql://db/film"}]

Dependencies: schema_model.core, schema_model.boundary.db.cursors
System role: Canonical connection spec for storage construction
"""

from collections.abc import Mapping
from typing import Any

from schema_model.boundary.db.cursors import load_cursor_class
from schema_model.core.exceptions import InvalidConnectInfo

ConnectionSpec = dict[str, Any]

POSITIONAL_FIELDS = ("dsn", "user", "password")
MAX_EXTRA_OPTIONS = 2


def _as_list(raw: Any) -> list[Any]:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]


def _from_positional(items: list[Any]) -> ConnectionSpec:
    info: ConnectionSpec = {}

    position = 0
    while position < len(POSITIONAL_FIELDS) and position < len(items):
        value = items[position]
        if isinstance(value, Mapping):
            break
        if value is not None and not isinstance(value, str):
            raise InvalidConnectInfo(
                "invalid connect_info",
                details={"field": POSITIONAL_FIELDS[position], "type": type(value).__name__},
            )
        info[POSITIONAL_FIELDS[position]] = value or ""
        position += 1

    for _ in range(MAX_EXTRA_OPTIONS):
        if position >= len(items):
            break
        extra = items[position]
        if not isinstance(extra, Mapping):
            raise InvalidConnectInfo(
                "invalid connect_info",
                details={"position": position, "type": type(extra).__name__},
            )
        info.update(extra)
        position += 1

    if position < len(items):
        raise InvalidConnectInfo(
            "invalid connect_info",
            details={"unconsumed": len(items) - position},
        )
    return info


def normalize_connect_info(raw: Any) -> ConnectionSpec:
    """
    Normalize connect_info into a canonical connection spec.

    Array style input fills dsn, user and password positionally and merges
    up to two option mappings (later keys win). A single mapping, bare or
    wrapped in a one-element sequence, is used directly.

    Args:
        raw: Configured connect_info value

    Returns:
        ConnectionSpec: New dict with dsn, user, password and driver options

    Raises:
        InvalidConnectInfo: If the shape is not one of the accepted forms
            or no dsn is given
        CursorClassLoadError: If cursor_class names an unloadable cursor
    """
    items = _as_list(raw)
    if not items:
        raise InvalidConnectInfo("invalid connect_info", details={"reason": "empty"})

    if not isinstance(items[0], Mapping):
        info = _from_positional(items)
    elif len(items) == 1:
        info = dict(items[0])
    else:
        raise InvalidConnectInfo(
            "invalid connect_info",
            details={"reason": "mapping followed by extra elements"},
        )

    if not info.get("dsn") or not isinstance(info["dsn"], str):
        raise InvalidConnectInfo("invalid connect_info: dsn is required")
    info.setdefault("user", "")
    info.setdefault("password", "")
    info["user"] = info["user"] or ""
    info["password"] = info["password"] or ""

    if "cursor_class" in info:
        load_cursor_class(info["cursor_class"])

    return info
