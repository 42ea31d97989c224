"""
Editor-specific events.

Published on the shared EventBus when levels are saved, loaded,
deleted or scored.
"""

from __future__ import annotations

from enum import Enum, auto


class EditorEvent(Enum):
    """Level designer events."""

    # Save flow outcomes (data: name, reason)
    LEVEL_SAVED = auto()
    LEVEL_SAVE_FAILED = auto()
    LEVEL_SAVE_CANCELLED = auto()

    # Level management (data: name)
    LEVEL_LOADED = auto()
    LEVEL_DELETED = auto()
    HIGH_SCORE_RECORDED = auto()
