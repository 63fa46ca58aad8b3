"""Shared fixtures for the test suite."""

from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import pytest
from sqlmodel import Field, SQLModel

from folded_db.app.dependencies import get_connection_registry, get_engine_bootstrap
from folded_db.infrastructure.database.connection import ConnectionManager
from folded_db.repositories.connections import ConnectionRegistry
from folded_db.services.bootstrap import EngineBootstrap


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    excerpt: str = ""


@pytest.fixture(autouse=True)
def _reset_process_defaults() -> Iterator[None]:
    get_connection_registry.cache_clear()
    get_engine_bootstrap.cache_clear()
    yield
    if get_engine_bootstrap.cache_info().currsize:
        get_engine_bootstrap().clear()
    get_connection_registry.cache_clear()
    get_engine_bootstrap.cache_clear()
    ConnectionManager.clear_global()


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def bootstrap(registry: ConnectionRegistry) -> Iterator[EngineBootstrap]:
    engine_bootstrap = EngineBootstrap(registry=registry)
    yield engine_bootstrap
    engine_bootstrap.clear()


@pytest.fixture
def sqlite_connection(tmp_path: Path) -> Dict[str, Any]:
    return {"driver": "sqlite", "database": str(tmp_path / "database.sqlite")}


@pytest.fixture
def booted_sqlite(
    registry: ConnectionRegistry,
    bootstrap: EngineBootstrap,
    sqlite_connection: Dict[str, Any],
) -> EngineBootstrap:
    """A bootstrap booted on a fresh SQLite file with every table created."""
    registry.add(sqlite_connection)
    bootstrap.ensure_started()
    bootstrap.manager.create_all()
    return bootstrap


class FakeManager:
    """Records the calls the bootstrap makes on the connection manager."""

    instances: list = []

    def __init__(self) -> None:
        self.connections: Dict[str, Dict[str, Any]] = {}
        self.added: list = []
        self.dispatcher = None
        self.global_set = False
        self.booted = False
        self.disposed = False
        FakeManager.instances.append(self)

    def add_connection(self, config: Dict[str, Any], name: str = "default") -> None:
        self.added.append((name, dict(config)))
        self.connections[name] = dict(config)

    def connection_names(self) -> list:
        return list(self.connections)

    def set_event_dispatcher(self, dispatcher: Any) -> None:
        self.dispatcher = dispatcher

    def set_as_global(self) -> None:
        self.global_set = True

    def boot_models(self) -> None:
        self.booted = True

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def fake_manager_factory() -> Iterator[type]:
    FakeManager.instances = []
    yield FakeManager
    FakeManager.instances = []
