"""
State Layer - Runtime Engine State

This module defines the runtime flags that drive the one-time ORM boot.
"""

from pydantic import BaseModel


class EngineState(BaseModel):
    """
    The boot state of the ORM engine.

    booted: whether the connection manager has been initialized.
    events_enabled: whether the event dispatcher is attached at boot time.
    """
    booted: bool = False
    events_enabled: bool = False
