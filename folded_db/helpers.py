"""
Helper entry points.

Short functions for the common setup calls. Each one acts on the
process-default registry or bootstrap unless an explicit instance is given.
"""

from typing import Optional

from .app.dependencies import get_connection_registry, get_engine_bootstrap
from .domain.models import ConnectionDescriptor
from .repositories.connections import ConnectionRegistry
from .services.bootstrap import EngineBootstrap


def add_database_connection(
    descriptor: ConnectionDescriptor,
    registry: Optional[ConnectionRegistry] = None,
) -> None:
    """
    Adds a new database connection.

    Example:
        add_database_connection({
            "driver": "sqlite",
            "database": "/var/lib/blog/database.sqlite",
        })
    """
    if registry is None:
        registry = get_connection_registry()
    registry.add(descriptor)


def enable_event_system(bootstrap: Optional[EngineBootstrap] = None) -> None:
    """Enables model events for every repository, from the next boot on."""
    if bootstrap is None:
        bootstrap = get_engine_bootstrap()
    bootstrap.enable_events()


def disable_event_system(bootstrap: Optional[EngineBootstrap] = None) -> None:
    """Disables model events for every repository, from the next boot on."""
    if bootstrap is None:
        bootstrap = get_engine_bootstrap()
    bootstrap.disable_events()
