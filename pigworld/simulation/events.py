"""Change notifications for collaborators that display the world.

The engine publishes an ``Event`` at the point of every visible mutation.
Delivery is synchronous and in publication order: each subscribed handler
is called exactly once per event before ``publish`` returns.  A viewer
that prefers to pull can attach an ``EventQueue`` and drain it once per
frame instead.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class EventType(Enum):
    """Kinds of change the engine reports."""

    ENTITY_ADDED = auto()
    ENTITY_REMOVED = auto()
    ENTITY_CHANGED = auto()
    CELL_CHANGED = auto()
    ITEM_PUT_DOWN = auto()
    ITEM_PICKED_UP = auto()
    GAP_CHANGED = auto()
    DEBUG_FLAG_CHANGED = auto()
    SOUND_PLAYED = auto()


@dataclass(frozen=True)
class Event:
    """One published change.

    Attributes:
        type: What changed.
        data: Event-specific payload (``entity``, ``cell``, ``gap``,
            ``reason``, ``name`` ...).
    """

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], None]


class EventBus:
    """In-process publish/subscribe hub with synchronous delivery."""

    def __init__(self) -> None:
        self._subscribers: dict[EventType, list[Handler]] = {}
        self._catch_all: list[Handler] = []

    def subscribe(self, event_type: EventType | None, handler: Handler) -> None:
        """Register ``handler`` for one event type, or for all when ``None``."""
        if event_type is None:
            self._catch_all.append(handler)
        else:
            self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: EventType | None, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = (
            self._catch_all
            if event_type is None
            else self._subscribers.get(event_type, [])
        )
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        """Deliver an event to every matching handler, in subscription order."""
        event = Event(type=event_type, data=data)
        for handler in list(self._subscribers.get(event_type, ())):
            handler(event)
        for handler in list(self._catch_all):
            handler(event)


class EventQueue:
    """Buffers events from a bus until a collaborator drains them.

    Args:
        bus: The bus to listen on.
        types: Event types to keep; all types when omitted.
    """

    def __init__(
        self,
        bus: EventBus,
        types: tuple[EventType, ...] | None = None,
    ) -> None:
        self._bus = bus
        self._types = types
        self._pending: list[Event] = []
        bus.subscribe(None, self._on_event)

    def _on_event(self, event: Event) -> None:
        if self._types is None or event.type in self._types:
            self._pending.append(event)

    def drain(self) -> list[Event]:
        """Return and forget every event received since the last drain."""
        pending = self._pending
        self._pending = []
        return pending

    def close(self) -> None:
        """Stop listening to the bus."""
        self._bus.unsubscribe(None, self._on_event)

    def __len__(self) -> int:
        return len(self._pending)
