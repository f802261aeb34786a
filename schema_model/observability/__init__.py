"""
Observability module.

Provides logging configuration and credential-safe logging helpers.
"""

from schema_model.observability.log_utils import log_with_context, redact_connect_info, safe_log_value
from schema_model.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "log_with_context",
    "redact_connect_info",
    "safe_log_value",
]
