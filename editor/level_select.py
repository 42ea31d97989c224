"""
Level selection list.

Builds the entries shown in the level select screen from the saved
levels, and handles the play and delete buttons of each entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from editor.events import EditorEvent
from editor.level_store import LevelFileStore
from engine.core.events import EventBus
from framework.bubbles import BubbleGridModel


@dataclass
class LevelSelectEntry:
    """Data for one level select cell."""
    index: int
    name: str
    thumbnail_path: Optional[Path] = None
    high_score: int = 0


class LevelSelectModel:
    """
    Saved levels, in name order.

    Entries are addressed by index, which is what the play and delete
    buttons of a cell carry.
    """

    def __init__(self, store: LevelFileStore, event_bus: Optional[EventBus] = None):
        self.store = store
        self.event_bus = event_bus
        self._entries: list[LevelSelectEntry] = []
        self.refresh()

    @property
    def entries(self) -> list[LevelSelectEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, index: int) -> LevelSelectEntry:
        if not 0 <= index < len(self._entries):
            raise IndexError(f"No level at index {index}")
        return self._entries[index]

    def refresh(self) -> list[LevelSelectEntry]:
        """Re-read the saved levels from the store."""
        entries = []
        for index, name in enumerate(self.store.list_levels()):
            metadata = self.store.load_metadata(name)
            entries.append(LevelSelectEntry(
                index=index,
                name=name,
                thumbnail_path=self.store.thumbnail_path(name),
                high_score=metadata.high_score if metadata else 0,
            ))
        self._entries = entries
        return self.entries

    def play(self, index: int) -> Optional[BubbleGridModel]:
        """Load the level at index for playing or editing."""
        name = self.entry(index).name
        grid = self.store.load(name)
        if grid is not None and self.event_bus:
            self.event_bus.publish(EditorEvent.LEVEL_LOADED, name=name)
        return grid

    def delete(self, index: int) -> bool:
        """Delete the level at index and refresh the list."""
        name = self.entry(index).name
        if not self.store.delete(name):
            return False

        self.refresh()
        if self.event_bus:
            self.event_bus.publish(EditorEvent.LEVEL_DELETED, name=name)
        return True

    def record_score(self, index: int, score: int) -> bool:
        """Record a finished game's score; True if it is a new high score."""
        entry = self.entry(index)
        if not self.store.record_high_score(entry.name, score):
            return False

        entry.high_score = score
        if self.event_bus:
            self.event_bus.publish(EditorEvent.HIGH_SCORE_RECORDED, name=entry.name, score=score)
        return True
