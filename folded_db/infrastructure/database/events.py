"""
Model Event Dispatcher.

Fires model lifecycle events (creating, created, updating, ...) for
SQLModel instances flushed through a session factory the dispatcher is
attached to. Listeners can be registered at any time; they only run once
the dispatcher has been attached, which the bootstrap does only when the
event system is enabled.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Tuple, Type

from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

MODEL_EVENTS: Tuple[str, ...] = (
    "creating",
    "created",
    "updating",
    "updated",
    "saving",
    "saved",
    "deleting",
    "deleted",
)

Listener = Callable[[Any], None]


class EventDispatcher:
    def __init__(self):
        self._listeners: DefaultDict[Type, Dict[str, List[Listener]]] = defaultdict(
            lambda: defaultdict(list)
        )

    def listen(self, model: Type, event_name: str, callback: Listener) -> None:
        """Registers a callback for one event of a model class (and its subclasses)."""
        if event_name not in MODEL_EVENTS:
            raise ValueError(
                f"Unknown model event '{event_name}' (known: {', '.join(MODEL_EVENTS)})"
            )
        self._listeners[model][event_name].append(callback)

    def forget(self, model: Type) -> None:
        self._listeners.pop(model, None)

    def has_listeners(self, model: Type, event_name: str) -> bool:
        return any(
            self._listeners.get(cls, {}).get(event_name) for cls in model.__mro__
        )

    def dispatch(self, event_name: str, instance: Any) -> None:
        for cls in type(instance).__mro__:
            for callback in self._listeners.get(cls, {}).get(event_name, []):
                logger.debug(f"Dispatching '{event_name}' for {type(instance).__name__}")
                callback(instance)

    def attach(self, session_factory: sessionmaker) -> None:
        """
        Hooks the dispatcher into the flush cycle of every session the factory creates.
        'before_flush' drives the *-ing events, 'after_flush' the *-ed events;
        the session still lists its new/dirty/deleted objects at both points.
        """
        event.listen(session_factory, "before_flush", self._before_flush)
        event.listen(session_factory, "after_flush", self._after_flush)

    def _before_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        for instance in list(session.new):
            self.dispatch("saving", instance)
            self.dispatch("creating", instance)
        for instance in self._modified(session):
            self.dispatch("saving", instance)
            self.dispatch("updating", instance)
        for instance in list(session.deleted):
            self.dispatch("deleting", instance)

    def _after_flush(self, session: Session, flush_context: Any) -> None:
        for instance in list(session.new):
            self.dispatch("created", instance)
            self.dispatch("saved", instance)
        for instance in self._modified(session):
            self.dispatch("updated", instance)
            self.dispatch("saved", instance)
        for instance in list(session.deleted):
            self.dispatch("deleted", instance)

    @staticmethod
    def _modified(session: Session) -> List[Any]:
        # session.dirty also holds objects whose attributes were set to the same value
        return [
            instance for instance in session.dirty
            if session.is_modified(instance, include_collections=False)
        ]
