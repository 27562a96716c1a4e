"""
Typed event bus for decoupled communication.

Event types are Enum members, so publishers and subscribers never agree on
magic strings. The dialogue manager, actors and renderer-side collaborators
all talk through one bus instance owned by the application.

Usage:
    class DialogueEvent(Enum):
        STARTED = auto()

    event_bus.subscribe(DialogueEvent.STARTED, on_started)
    event_bus.publish(DialogueEvent.STARTED, actor=actor, dialogue=dialogue)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class AudioEvent(Enum):
    """Audio channel events."""
    SFX_PLAYED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)

    Events published from inside a handler are queued and dispatched once
    the current dispatch finishes, so every subscriber sees events in the
    order they were published.
    """

    def __init__(self):
        # event type -> list of (priority, handler ref, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        handlers = self._handlers.setdefault(event_type, [])

        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        # Keep sorted by priority, highest first, stable for equal priorities
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def is_subscribed(self, event_type: Enum, handler: EventHandler) -> bool:
        """Check whether a handler is currently registered for an event type."""
        return any(
            self._get_handler(h) == handler
            for _, h, _ in self._handlers.get(event_type, [])
        )

    def subscriber_count(self, event_type: Enum) -> int:
        """Number of live handlers for an event type."""
        return sum(
            1 for _, h, _ in self._handlers.get(event_type, [])
            if self._get_handler(h) is not None
        )

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """Publish a pre-created event."""
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                        If None, clear all handlers.
        """
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        self._is_publishing = True
        try:
            self._dispatch_one(event)
            while self._event_queue:
                self._dispatch_one(self._event_queue.pop(0))
        finally:
            self._is_publishing = False

    def _dispatch_one(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if not handlers:
            return

        to_remove = []

        # Iterate over a snapshot; handlers may (un)subscribe while running
        for entry in list(handlers):
            _, handler_ref, one_shot = entry
            handler = self._get_handler(handler_ref)

            if handler is None:
                to_remove.append(entry)
                continue

            try:
                handler(event)
            except Exception:
                logger.exception("Error in event handler for %s", event.type)

            if one_shot:
                to_remove.append(entry)

            if event.consumed:
                break

        if to_remove:
            current = self._handlers.get(event.type, [])
            removed = {id(e) for e in to_remove}
            self._handlers[event.type] = [e for e in current if id(e) not in removed]

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
