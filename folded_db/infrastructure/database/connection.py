"""
Database Connection Manager.

This module handles the low-level details of turning validated connection
descriptors into SQLAlchemy engines. It owns the named connections, the
SQLModel session factory, and the optional event dispatcher, and can be
published as the process-wide active manager.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, SQLModel, create_engine

from ...config import settings
from ...domain.models import Driver
from ...services.exceptions import ConnectionManagerError, ConnectionNotConfiguredError
from .events import EventDispatcher

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION = "default"

# SQLAlchemy dialect+DBAPI for each supported driver
DIALECTS: Dict[str, str] = {
    Driver.MYSQL.value: "mysql+pymysql",
    Driver.PGSQL.value: "postgresql+psycopg2",
    Driver.MSSQL.value: "mssql+pyodbc",
    Driver.SQLITE.value: "sqlite",
}

_global_manager: Optional["ConnectionManager"] = None


def build_url(config: Mapping[str, Any]) -> URL:
    """
    Builds a SQLAlchemy URL from a connection descriptor.
    Uses `URL.create(...)` so credentials never need escaping by hand.
    """
    driver = config["driver"]
    if driver == Driver.SQLITE.value:
        return URL.create(DIALECTS[driver], database=config["database"])

    query: Dict[str, str] = {}
    if driver == Driver.MYSQL.value:
        if config.get("charset"):
            query["charset"] = config["charset"]
        if config.get("collation"):
            query["collation"] = config["collation"]
    elif driver == Driver.PGSQL.value and config.get("charset"):
        query["client_encoding"] = config["charset"]

    return URL.create(
        drivername=DIALECTS[driver],
        username=config.get("username"),
        password=config.get("password"),
        host=config.get("host"),
        port=config.get("port"),
        database=config.get("database"),
        query=query,
    )


class ConnectionManager:
    """
    Registry of named connections on the ORM side.
    Engines are created lazily, the first time a connection is used.
    """

    def __init__(self, echo: Optional[bool] = None):
        self.echo = settings.ECHO_SQL if echo is None else echo
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._engines: Dict[str, Engine] = {}
        self._dispatcher: Optional[EventDispatcher] = None
        self._session_factory: Optional[sessionmaker] = None

    def add_connection(self, config: Mapping[str, Any], name: str = DEFAULT_CONNECTION) -> None:
        """Registers a connection under a name, replacing any previous one."""
        if name in self._configs:
            logger.warning(f"Connection '{name}' is already registered; replacing it.")
            self._dispose_engine(name)
        self._configs[name] = dict(config)

    def connection_names(self) -> List[str]:
        return list(self._configs)

    def get_config(self, name: str = DEFAULT_CONNECTION) -> Dict[str, Any]:
        if name not in self._configs:
            raise ConnectionNotConfiguredError(f"Database connection '{name}' is not configured.")
        return dict(self._configs[name])

    def engine(self, name: Optional[str] = None) -> Engine:
        name = name or DEFAULT_CONNECTION
        if name not in self._engines:
            config = self.get_config(name)
            logger.debug(f"Creating engine for connection '{name}' ({config['driver']})")
            self._engines[name] = create_engine(build_url(config), echo=self.echo)
        return self._engines[name]

    def set_event_dispatcher(self, dispatcher: EventDispatcher) -> None:
        self._dispatcher = dispatcher

    def get_event_dispatcher(self) -> Optional[EventDispatcher]:
        return self._dispatcher

    def set_as_global(self) -> None:
        """Makes this manager the process-wide active manager."""
        global _global_manager
        _global_manager = self

    @staticmethod
    def get_global() -> Optional["ConnectionManager"]:
        return _global_manager

    @staticmethod
    def clear_global() -> None:
        global _global_manager
        _global_manager = None

    def boot_models(self) -> None:
        """
        Prepares the session factory used by model repositories.
        The event dispatcher, if any, is hooked into it here.
        """
        self._session_factory = sessionmaker(class_=Session, expire_on_commit=False)
        if self._dispatcher is not None:
            self._dispatcher.attach(self._session_factory)

    def session(self, name: Optional[str] = None) -> Session:
        if self._session_factory is None:
            raise ConnectionManagerError("Models are not booted; call boot_models() first.")
        return self._session_factory(bind=self.engine(name))

    def create_all(self, name: Optional[str] = None) -> None:
        """
        Idempotent initialization.
        Creates tables for every SQLModel table class if they do not exist.
        """
        SQLModel.metadata.create_all(self.engine(name))

    def dispose(self) -> None:
        for name in list(self._engines):
            self._dispose_engine(name)

    def _dispose_engine(self, name: str) -> None:
        engine = self._engines.pop(name, None)
        if engine is not None:
            engine.dispose()
