"""
State Layer - Runtime Engine State

Tracks whether the ORM has booted and whether model events are enabled.
"""

from folded_db.state.models import EngineState

__all__ = [
    "EngineState",
]
