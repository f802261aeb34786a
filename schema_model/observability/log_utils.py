"""
Logging utilities for safe structured logging.

Provides helpers for logging configuration values without leaking
credentials or dumping large structures.

Dependencies: logging (stdlib), sqlalchemy
System role: Logging helper functions
"""

import logging
from typing import Any, Mapping

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

MASK = "***"


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Handles lists, dicts, None, and other types safely.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def redact_dsn(dsn: str) -> str:
    """Mask the password embedded in a database URL."""
    try:
        return make_url(dsn).render_as_string(hide_password=True)
    except ArgumentError:
        return dsn


def redact_connect_info(connect_info: Mapping[str, Any]) -> dict[str, str]:
    """
    Render a connection spec for logging with credentials masked.

    Args:
        connect_info: Connection spec

    Returns:
        dict: Key to safe string value
    """
    safe: dict[str, str] = {}
    for key, value in connect_info.items():
        if key == "password":
            safe[key] = MASK if value else ""
        elif key == "dsn" and isinstance(value, str):
            safe[key] = redact_dsn(value)
        else:
            safe[key] = safe_log_value(value)
    return safe


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    safe_context = {
        key: safe_log_value(val) for key, val in context.items()
    }
    logger.log(level, message, extra=safe_context)
