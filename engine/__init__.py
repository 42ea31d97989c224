"""
Bubble Blast engine support.

Shared infrastructure for the game and the level designer.

Quick Start:
    from engine.core import EventBus

    bus = EventBus()
    bus.subscribe(EditorEvent.LEVEL_SAVED, lambda e: print(e["name"]))
"""

__version__ = "0.1.0"

from engine.core import EventBus, Event

__all__ = [
    "EventBus",
    "Event",
]
