"""
Exceptions raised by the level designer.
"""

from __future__ import annotations


class LevelWriteError(OSError):
    """The level data file could not be written."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to save level '{name}': {reason}")
        self.name = name
        self.reason = reason


class LevelLoadError(Exception):
    """A saved level could not be read back."""


class InvalidDecisionError(ValueError):
    """A user decision was sent to the save flow in a state that has no such choice."""


class SaveFlowInProgressError(RuntimeError):
    """The save flow was started again before the running one ended."""
