"""
Engine Bootstrap - One-Time ORM Initialization

The EngineBootstrap drains the ConnectionRegistry into a ConnectionManager
exactly once. The first stored connection becomes "default"; every later
one is registered under its driver name. After the first successful
boot, ensure_started() is a no-op until clear() resets the state.

State machine:
    NotBooted --ensure_started()--> Booted
    Booted    --clear()-----------> NotBooted
"""

import logging
import threading
import warnings
from typing import Callable, Optional

from ..infrastructure.database.connection import DEFAULT_CONNECTION, ConnectionManager
from ..infrastructure.database.events import EventDispatcher
from ..repositories.connections import ConnectionRegistry
from ..state.models import EngineState
from .exceptions import EngineNotBootedError

logger = logging.getLogger(__name__)


class EngineBootstrap:
    def __init__(
        self,
        registry: ConnectionRegistry,
        manager_factory: Callable[[], ConnectionManager] = ConnectionManager,
        events_enabled: bool = False,
    ):
        self.registry = registry
        self.manager_factory = manager_factory
        self._state = EngineState(events_enabled=events_enabled)
        self._manager: Optional[ConnectionManager] = None
        self._dispatcher = EventDispatcher()
        self._lock = threading.RLock()

    @property
    def booted(self) -> bool:
        return self._state.booted

    @property
    def events_enabled(self) -> bool:
        return self._state.events_enabled

    @property
    def state(self) -> EngineState:
        return self._state.model_copy()

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def manager(self) -> ConnectionManager:
        if self._manager is None:
            raise EngineNotBootedError("The ORM engine has not been started yet.")
        return self._manager

    def ensure_started(self) -> None:
        """
        Boots the ORM from the registered connections, once.
        Errors raised by the ORM propagate as-is and leave the engine not booted.
        """
        with self._lock:
            if self._state.booted:
                return

            connections = self.registry.get_all()
            manager = self.manager_factory()

            for index, connection in enumerate(connections):
                # Later connections sharing a driver replace the earlier one
                name = DEFAULT_CONNECTION if index == 0 else connection["driver"]
                manager.add_connection(connection, name)

            if self._state.events_enabled:
                manager.set_event_dispatcher(self._dispatcher)

            try:
                manager.set_as_global()
                manager.boot_models()
            except Exception:
                # Do not leave a half-booted manager published
                if ConnectionManager.get_global() is manager:
                    ConnectionManager.clear_global()
                raise

            self._manager = manager
            self._state.booted = True
            logger.info(
                f"ORM engine booted with {len(connections)} connection(s), "
                f"events {'enabled' if self._state.events_enabled else 'disabled'}"
            )

    def enable_events(self) -> None:
        """Attach the event dispatcher on the next boot."""
        with self._lock:
            self._state.events_enabled = True

    def enable_event(self) -> None:
        """Deprecated: use enable_events() instead."""
        warnings.warn(
            "enable_event() is deprecated, use enable_events() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        self.enable_events()

    def disable_events(self) -> None:
        """Boot without the event dispatcher next time."""
        with self._lock:
            self._state.events_enabled = False

    def clear(self) -> None:
        """Resets the boot state. Useful for test isolation."""
        with self._lock:
            if self._manager is not None:
                if ConnectionManager.get_global() is self._manager:
                    ConnectionManager.clear_global()
                self._manager.dispose()
            self._manager = None
            self._dispatcher = EventDispatcher()
            self._state = EngineState()
