"""
Typed event bus for decoupled communication.

Event types are Enum members, so subscribers and publishers share
names instead of magic strings.

Usage:
    class EditorEvent(Enum):
        LEVEL_SAVED = auto()

    bus = EventBus()
    bus.subscribe(EditorEvent.LEVEL_SAVED, on_level_saved)
    bus.publish(EditorEvent.LEVEL_SAVED, name="Level1")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Keyword data given to publish()
        consumed: Set by a handler to stop propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop delivery to lower priority handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    target: Any  # handler, or a weak reference to it
    one_shot: bool = False
    weak: bool = True

    def resolve(self) -> EventHandler | None:
        if self.weak:
            return self.target()
        return self.target


class EventBus:
    """
    Publish/subscribe hub.

    Handlers run highest priority first. Weakly held handlers drop out
    once their owner is collected. Events published from inside a
    handler are queued and delivered after the current dispatch.
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._pending: list[Event] = []
        self._dispatching = False

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
            handler: Callback taking the Event
            priority: Higher priority handlers are called first
            one_shot: Remove the handler after its first call
            weak: Hold only a weak reference to the handler
        """
        if weak:
            target = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            target = handler

        subs = self._subscriptions.setdefault(event_type, [])
        index = len(subs)
        for i, existing in enumerate(subs):
            if priority > existing.priority:
                index = i
                break
        subs.insert(index, _Subscription(priority, target, one_shot, weak))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        subs = self._subscriptions.get(event_type)
        if not subs:
            return
        self._subscriptions[event_type] = [s for s in subs if s.resolve() != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        if self._dispatching:
            self._pending.append(event)
        else:
            self._dispatch(event)
        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop all handlers, or only those of one event type."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return sum(1 for s in self._subscriptions.get(event_type, []) if s.resolve() is not None)

    def _dispatch(self, event: Event) -> None:
        subs = self._subscriptions.get(event.type)
        if subs:
            self._dispatching = True
            try:
                self._deliver(event, subs)
            finally:
                self._dispatching = False

        while self._pending:
            self._dispatch(self._pending.pop(0))

    def _deliver(self, event: Event, subs: list[_Subscription]) -> None:
        finished: list[_Subscription] = []

        for sub in list(subs):
            handler = sub.resolve()
            if handler is None:
                finished.append(sub)
                continue

            try:
                handler(event)
            except Exception:
                logger.exception("Error in event handler for %s", event.type)

            if sub.one_shot:
                finished.append(sub)
            if event.consumed:
                break

        for sub in finished:
            if sub in subs:
                subs.remove(sub)
