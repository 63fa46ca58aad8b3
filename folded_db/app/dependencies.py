"""
Dependency Injection Wiring (Composition Root).

This module owns the process-default ConnectionRegistry and EngineBootstrap.
It is responsible for:
1. Instantiating them once per process using @lru_cache.
2. Seeding the registry with the connection configured in the environment, if any.
3. Exposing a FastAPI dependency that yields an ORM session.

Applications that prefer explicit wiring can construct their own
ConnectionRegistry and EngineBootstrap and pass them around instead.
"""

from functools import lru_cache
from typing import Iterator

from fastapi import Depends
from sqlmodel import Session

from ..config import settings
from ..repositories.connections import ConnectionRegistry
from ..services.bootstrap import EngineBootstrap


# Connection Registry (Singleton)
@lru_cache()
def get_connection_registry() -> ConnectionRegistry:
    registry = ConnectionRegistry()
    default_connection = settings.default_connection()
    if default_connection is not None:
        registry.add(default_connection)
    return registry


# Engine Bootstrap (Singleton)
# Note: must be a singleton, the boot flag is what keeps the ORM from booting twice!
@lru_cache()
def get_engine_bootstrap() -> EngineBootstrap:
    return EngineBootstrap(
        registry=get_connection_registry(),
        events_enabled=settings.EVENTS_ENABLED,
    )


def get_db_session(
    bootstrap: EngineBootstrap = Depends(get_engine_bootstrap),
) -> Iterator[Session]:
    """
    Boots the engine if needed and yields a session on the default connection.
    """
    bootstrap.ensure_started()
    with bootstrap.manager.session() as session:
        yield session
