"""
Folded DB

A thin configuration and bootstrap layer for SQLModel: validates database
connection descriptors, boots the ORM from them exactly once, and wraps
table classes in lightweight repositories.
"""

from folded_db.domain import (
    SUPPORTED_DRIVERS,
    ConnectionDefect,
    ConnectionDescriptor,
    Driver,
    Page,
)
from folded_db.state import EngineState
from folded_db.repositories.connections import ConnectionRegistry
from folded_db.repositories.model import ModelRepository
from folded_db.services.bootstrap import EngineBootstrap
from folded_db.services.exceptions import (
    ConnectionManagerError,
    ConnectionNotConfiguredError,
    EngineNotBootedError,
    InvalidConnectionError,
    PageOutOfRangeError,
)
from folded_db.infrastructure.database.connection import ConnectionManager
from folded_db.infrastructure.database.events import EventDispatcher
from folded_db.helpers import (
    add_database_connection,
    disable_event_system,
    enable_event_system,
)

__all__ = [
    # Domain Layer
    "SUPPORTED_DRIVERS",
    "ConnectionDefect",
    "ConnectionDescriptor",
    "Driver",
    "Page",
    # State Layer
    "EngineState",
    # Repositories
    "ConnectionRegistry",
    "ModelRepository",
    # Services
    "EngineBootstrap",
    # Infrastructure
    "ConnectionManager",
    "EventDispatcher",
    # Errors
    "ConnectionManagerError",
    "ConnectionNotConfiguredError",
    "EngineNotBootedError",
    "InvalidConnectionError",
    "PageOutOfRangeError",
    # Helpers
    "add_database_connection",
    "disable_event_system",
    "enable_event_system",
]
