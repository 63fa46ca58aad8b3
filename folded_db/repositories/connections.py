"""
Connection Registry

Gatekeeper for database connection descriptors. Every descriptor is
validated before it is stored, so the ORM only ever sees complete
configurations. The first stored descriptor becomes the "default"
connection when the engine boots.
"""

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

from ..domain.models import (
    OPTIONAL_STRING_KEYS,
    SUPPORTED_DRIVERS,
    ConnectionDefect,
    ConnectionDescriptor,
    Driver,
)
from ..services.exceptions import InvalidConnectionError

logger = logging.getLogger(__name__)


class _ConnectionCheck:
    """
    Runs the validation rules against a single candidate descriptor.
    The first failing rule wins; later rules are not evaluated.
    """

    def __init__(self, candidate: Mapping[str, Any]):
        self.candidate = candidate

    def run(self) -> Optional[InvalidConnectionError]:
        error = self._check_driver() or self._check_required("database")
        if error:
            return error

        # SQLite is file based and needs no network credentials
        if self.candidate.get("driver") == Driver.SQLITE.value:
            return None

        for key in ("host", "username"):
            error = self._check_required(key)
            if error:
                return error

        for key in OPTIONAL_STRING_KEYS:
            error = self._check_optional_string(key)
            if error:
                return error

        return None

    def _check_driver(self) -> Optional[InvalidConnectionError]:
        error = self._check_required("driver")
        if error:
            return error

        driver = self.candidate["driver"]
        if driver not in SUPPORTED_DRIVERS:
            supported = ", ".join(SUPPORTED_DRIVERS)
            return InvalidConnectionError(
                "driver",
                ConnectionDefect.UNSUPPORTED,
                f"driver {driver} not supported (supported: {supported})",
            )
        return None

    def _check_required(self, key: str) -> Optional[InvalidConnectionError]:
        if not self._present(key):
            return InvalidConnectionError(
                key, ConnectionDefect.MISSING, f"{key} is missing from the database connection"
            )
        if not isinstance(self.candidate[key], str):
            return InvalidConnectionError(
                key, ConnectionDefect.WRONG_TYPE, f"{key} must be a string in the database connection"
            )
        if not self.candidate[key].strip():
            return InvalidConnectionError(
                key, ConnectionDefect.EMPTY, f"{key} is empty in the database connection"
            )
        return None

    def _check_optional_string(self, key: str) -> Optional[InvalidConnectionError]:
        if self._present(key) and not isinstance(self.candidate[key], str):
            return InvalidConnectionError(
                key, ConnectionDefect.WRONG_TYPE, f"{key} must be a string in the database connection"
            )
        return None

    def _present(self, key: str) -> bool:
        # A key explicitly set to None counts as missing
        return self.candidate.get(key) is not None


class ConnectionRegistry:
    """
    Ordered, append-only store of validated connection descriptors.
    """

    def __init__(self):
        self._connections: List[Dict[str, Any]] = []
        self._lock = threading.RLock()

    def validate(self, descriptor: ConnectionDescriptor) -> Optional[InvalidConnectionError]:
        """
        Checks a descriptor without storing it.
        Returns None when valid, otherwise the error describing the first defect.
        """
        if not isinstance(descriptor, Mapping):
            raise TypeError(
                f"database connection must be a mapping, got {type(descriptor).__name__}"
            )
        return _ConnectionCheck(descriptor).run()

    def add(self, descriptor: ConnectionDescriptor) -> None:
        """
        Validates and stores a descriptor.
        Raises InvalidConnectionError and stores nothing if it is invalid.

        Example:
            registry.add({
                "driver": "mysql",
                "database": "blog",
                "host": "localhost",
                "username": "root",
                "password": "root",
            })
        """
        with self._lock:
            error = self.validate(descriptor)
            if error:
                logger.warning(f"Rejected database connection: {error}")
                raise error

            self._connections.append(dict(descriptor))
            logger.info(
                f"Added {descriptor['driver']} connection #{len(self._connections)}"
            )

    def get_all(self) -> List[Dict[str, Any]]:
        """Returns a copy of the stored descriptors, in insertion order."""
        with self._lock:
            return [dict(connection) for connection in self._connections]

    def clear(self) -> None:
        """Forgets every stored descriptor. Useful for test isolation."""
        with self._lock:
            self._connections = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
