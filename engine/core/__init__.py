"""
Core engine module.

Exports:
- EventBus, Event: Typed publish/subscribe events
"""

from engine.core.events import EventBus, Event, EventHandler

__all__ = [
    "EventBus",
    "Event",
    "EventHandler",
]
