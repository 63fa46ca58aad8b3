"""
Domain Layer - Connection & Pagination Models

Defines the drivers, connection descriptors and pagination results shared
across the package.
"""

from folded_db.domain.models import (
    SUPPORTED_DRIVERS,
    ConnectionDefect,
    ConnectionDescriptor,
    Driver,
    Page,
)

__all__ = [
    "SUPPORTED_DRIVERS",
    "ConnectionDefect",
    "ConnectionDescriptor",
    "Driver",
    "Page",
]
