"""
Service Layer Exceptions

Custom exceptions raised while validating connections, booting the ORM
and paginating model queries.
"""

from ..domain.models import ConnectionDefect


class InvalidConnectionError(ValueError):
    """Raised when a database connection descriptor fails validation."""

    def __init__(self, field: str, defect: ConnectionDefect, message: str):
        super().__init__(message)
        self.field = field
        self.defect = defect
        self.message = message


class PageOutOfRangeError(ValueError):
    """Raised when a page number below 1 is requested."""
    pass


class ConnectionManagerError(RuntimeError):
    """Raised when the connection manager is used before it is ready."""
    pass


class ConnectionNotConfiguredError(ConnectionManagerError, LookupError):
    """Raised when a named connection was never registered with the manager."""
    pass


class EngineNotBootedError(RuntimeError):
    """Raised when the active manager is requested before the engine booted."""
    pass
