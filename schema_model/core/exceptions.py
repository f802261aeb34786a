"""
Exception hierarchy for schema models.

Provides layered exception structure for configuration and lookup errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the adapter
"""

from typing import Any


class SchemaModelException(Exception):
    """Base exception for all schema model errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(SchemaModelException):
    """Raised when model configuration is unusable. Fatal to model construction."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            model: Name of the model being constructed
            details: Additional context
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class InvalidConnectInfo(ConfigurationError):
    """Raised when connect_info does not match any accepted shape."""

    pass


class CursorClassLoadError(ConfigurationError):
    """Raised when a named cursor class cannot be loaded."""

    def __init__(
        self,
        cursor_class: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize cursor class load error.

        Args:
            cursor_class: Name or path that failed to resolve
            reason: Underlying failure description
            details: Additional context
        """
        details = details or {}
        details["cursor_class"] = cursor_class
        message = f"invalid connect_info: Cannot load your cursor_class {cursor_class}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details=details)


class SchemaClassError(ConfigurationError):
    """Raised when schema_class is missing, unloadable, or not a schema."""

    pass


class MissingConnectInfo(ConfigurationError):
    """Raised when neither the model nor its schema carries connect_info."""

    pass


class StorageTypeError(ConfigurationError):
    """Raised when a storage type cannot be loaded or used."""

    pass


class UnknownRoleError(ConfigurationError):
    """Raised when a configured role is not registered."""

    pass


class CursorCapabilityError(SchemaModelException):
    """Raised when a cursor class lacks a required capability."""

    def __init__(self, cursor_class: str, capability: str) -> None:
        """
        Initialize capability error.

        Args:
            cursor_class: Qualified name of the cursor class
            capability: Missing method name
        """
        self.cursor_class = cursor_class
        self.capability = capability
        super().__init__(
            f"cursor_class {cursor_class} does not support {capability}",
            {"cursor_class": cursor_class, "capability": capability},
        )


class UnknownSourceError(SchemaModelException, KeyError):
    """Raised when a moniker is not a source of the schema."""

    def __init__(self, moniker: str, schema: str | None = None) -> None:
        details: dict[str, Any] = {"moniker": moniker}
        if schema:
            details["schema"] = schema
        super().__init__(f"Can't find source for {moniker}", details)

    # KeyError quotes its message otherwise
    __str__ = SchemaModelException.__str__


class UnknownModelError(SchemaModelException, KeyError):
    """Raised when a name is not registered with the model registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Model not found: {name}", {"name": name})

    __str__ = SchemaModelException.__str__


class SchemaNotConnectedError(SchemaModelException):
    """Raised when storage is requested from an unconnected schema."""

    pass
