"""
Level file storage.

Every saved level is three files in the levels directory, all keyed by
the level name:
- <name>.level  the bubble grid (JSON)
- <name>.png    a thumbnail of the grid
- <name>.json   metadata (save time, high score)

Only the level data write is reported to the caller. Thumbnail and
metadata writes are best effort: failures are logged and dropped.
The three writes are independent, so an interrupted save can leave
them out of step.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional

import pygame
from pydantic import ValidationError

from editor.config import EditorConfig
from editor.errors import LevelLoadError, LevelWriteError
from editor.validation import is_valid_level_name
from framework.bubbles.model import BubbleGridModel


class LevelKind(Enum):
    """Content kinds stored per level."""
    DATA = auto()
    THUMBNAIL = auto()
    METADATA = auto()


@dataclass
class LevelMetadata:
    """Contents of a level's metadata file."""
    name: str
    saved_at: str
    high_score: int = 0

    @classmethod
    def fresh(cls, name: str) -> LevelMetadata:
        return cls(name=name, saved_at=datetime.now().isoformat(timespec="seconds"))

    @classmethod
    def from_dict(cls, data: dict) -> LevelMetadata:
        return cls(
            name=data.get("name", ""),
            saved_at=data.get("saved_at", ""),
            high_score=int(data.get("high_score", 0)),
        )


class LevelFileStore:
    """
    Reads and writes saved levels.

    Usage:
        store = LevelFileStore(EditorConfig(levels_dir=Path("levels")))
        if not store.exists("Level1"):
            store.save("Level1", grid)
        store.save_thumbnail("Level1", renderer.render(grid))
        store.save_metadata("Level1")
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()
        self.levels_dir = self.config.levels_dir
        self.levels_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(__name__)

    def path_for(self, name: str, kind: LevelKind) -> Path:
        """File location of one content kind of a level."""
        if not is_valid_level_name(name):
            raise ValueError(f"Invalid level name: {name!r}")

        extension = {
            LevelKind.DATA: self.config.level_extension,
            LevelKind.THUMBNAIL: self.config.thumbnail_extension,
            LevelKind.METADATA: self.config.metadata_extension,
        }[kind]
        return self.levels_dir / f"{name}{extension}"

    def exists(self, name: str) -> bool:
        """Check whether level data is already saved under this name."""
        return self.path_for(name, LevelKind.DATA).is_file()

    # Level data

    def write_level(self, name: str, grid: BubbleGridModel) -> Path:
        """
        Write the grid as level data, replacing any existing file.

        Returns:
            Path of the written file

        Raises:
            LevelWriteError: if the data could not be written
        """
        path = self.path_for(name, LevelKind.DATA)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            tmp_path.write_text(grid.to_json(), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.is_file():
                tmp_path.unlink()
            raise LevelWriteError(name, e.strerror or str(e)) from e

        self.logger.info(f"Saved level '{name}' to {path}")
        return path

    def save(self, name: str, grid: BubbleGridModel) -> bool:
        """
        Save level data.

        Returns:
            True if the level data was written
        """
        try:
            self.write_level(name, grid)
            return True
        except LevelWriteError as e:
            self.logger.error(str(e))
            return False

    def read_level(self, name: str) -> BubbleGridModel:
        """
        Read a saved grid. The returned grid remembers `name` as its
        loaded file name.

        Raises:
            LevelLoadError: if the file is missing or not a valid grid
        """
        path = self.path_for(name, LevelKind.DATA)
        try:
            text = path.read_text(encoding="utf-8")
            return BubbleGridModel.from_json(text, loaded_file_name=name)
        except (OSError, ValidationError) as e:
            raise LevelLoadError(f"Failed to load level '{name}' from {path}: {e}") from e

    def load(self, name: str) -> Optional[BubbleGridModel]:
        """Load a saved grid, or None if it cannot be read."""
        try:
            return self.read_level(name)
        except LevelLoadError as e:
            self.logger.error(str(e))
            return None

    # Best-effort side files

    def save_thumbnail(self, name: str, image: Optional[pygame.Surface]) -> None:
        """Write the thumbnail PNG. Failures are logged, never raised."""
        if image is None:
            self.logger.warning(f"No thumbnail image for level '{name}'")
            return

        try:
            path = self.path_for(name, LevelKind.THUMBNAIL)
            pygame.image.save(image, str(path))
        except (pygame.error, OSError, ValueError) as e:
            self.logger.warning(f"Failed to save thumbnail for '{name}': {e}")

    def save_metadata(self, name: str, metadata: Optional[LevelMetadata] = None) -> None:
        """Write the metadata file. Failures are logged, never raised."""
        metadata = metadata or LevelMetadata.fresh(name)
        try:
            path = self.path_for(name, LevelKind.METADATA)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(metadata), f, indent=2)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to save metadata for '{name}': {e}")

    def load_metadata(self, name: str) -> Optional[LevelMetadata]:
        path = self.path_for(name, LevelKind.METADATA)
        if not path.is_file():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return LevelMetadata.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            self.logger.warning(f"Unreadable metadata for '{name}': {e}")
            return None

    def record_high_score(self, name: str, score: int) -> bool:
        """
        Store a score if it beats the level's current high score.

        Returns:
            True if the stored high score changed
        """
        metadata = self.load_metadata(name) or LevelMetadata.fresh(name)
        if score <= metadata.high_score:
            return False

        metadata.high_score = score
        self.save_metadata(name, metadata)
        return True

    # Listing and deletion

    def list_levels(self) -> list[str]:
        """Names of all saved levels, sorted."""
        suffix = self.config.level_extension
        names = []
        for path in self.levels_dir.glob(f"*{suffix}"):
            name = path.name[:-len(suffix)]
            if path.is_file() and is_valid_level_name(name):
                names.append(name)
        return sorted(names)

    def thumbnail_path(self, name: str) -> Optional[Path]:
        path = self.path_for(name, LevelKind.THUMBNAIL)
        return path if path.is_file() else None

    def delete(self, name: str) -> bool:
        """Remove all files of a level."""
        try:
            for kind in LevelKind:
                self.path_for(name, kind).unlink(missing_ok=True)
        except OSError as e:
            self.logger.error(f"Failed to delete level '{name}': {e}")
            return False

        self.logger.info(f"Deleted level '{name}'")
        return True
