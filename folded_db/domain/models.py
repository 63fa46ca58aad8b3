"""
Domain Layer - Connection & Pagination Models

This module defines the vocabulary shared by the registry, the bootstrap
and the model adapter: which database drivers exist, what a connection
descriptor looks like, how a validation failure is classified, and the
shape of a paginated result.
"""

from enum import Enum
from math import ceil
from typing import Any, List, Mapping, Tuple

from pydantic import BaseModel, Field

"""
A connection descriptor is a plain mapping of connection parameters, e.g.:

    {"driver": "mysql", "database": "blog", "host": "localhost", "username": "root"}

Required keys depend on the driver (see ConnectionRegistry for the rules).
"""
ConnectionDescriptor = Mapping[str, Any]


class Driver(str, Enum):
    """Database engines a connection can target."""

    MYSQL = "mysql"
    PGSQL = "pgsql"
    MSSQL = "mssql"
    SQLITE = "sqlite"


# Order matters: it is the order listed in "not supported" messages.
SUPPORTED_DRIVERS: Tuple[str, ...] = (
    Driver.MYSQL.value,
    Driver.PGSQL.value,
    Driver.MSSQL.value,
    Driver.SQLITE.value,
)

# Keys that are checked only for their type, after the credentials.
OPTIONAL_STRING_KEYS: Tuple[str, ...] = ("password", "charset", "collation", "prefix")


class ConnectionDefect(str, Enum):
    """What exactly is wrong with a connection field."""

    MISSING = "missing"
    WRONG_TYPE = "wrong_type"
    EMPTY = "empty"
    UNSUPPORTED = "unsupported"


class Page(BaseModel):
    """
    One page of model instances.

    Attributes:
        items: The rows of the requested page, ordered by primary key.
        total: Number of rows across all pages.
        per_page: Page size used to slice the rows.
        current_page: 1-based index of this page.
    """

    items: List[Any] = Field(default_factory=list)
    total: int = 0
    per_page: int = Field(default=15, ge=1)
    current_page: int = Field(default=1, ge=1)

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def last_page(self) -> int:
        return max(1, ceil(self.total / self.per_page))

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page
