"""
Level designer configuration.

EditorConfig holds where levels live and how their files are named.
The text constants below are the titles, messages and button labels
used by the save prompts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class EditorConfig:
    """Storage layout for saved levels."""

    levels_dir: Path = field(default_factory=lambda: Path("game/levels"))

    # One file per content kind, keyed by level name
    level_extension: str = ".level"
    thumbnail_extension: str = ".png"
    metadata_extension: str = ".json"

    # Thumbnail bubble diameter in pixels
    thumbnail_cell_size: int = 16

    def __post_init__(self) -> None:
        self.levels_dir = Path(self.levels_dir)
        if self.thumbnail_cell_size < 2:
            raise ValueError("thumbnail_cell_size must be at least 2 pixels")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "levels_dir": str(self.levels_dir),
            "level_extension": self.level_extension,
            "thumbnail_extension": self.thumbnail_extension,
            "metadata_extension": self.metadata_extension,
            "thumbnail_cell_size": self.thumbnail_cell_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> EditorConfig:
        """Create from dictionary, using defaults for missing keys."""
        defaults = cls()
        return cls(
            levels_dir=Path(data.get("levels_dir", defaults.levels_dir)),
            level_extension=data.get("level_extension", defaults.level_extension),
            thumbnail_extension=data.get("thumbnail_extension", defaults.thumbnail_extension),
            metadata_extension=data.get("metadata_extension", defaults.metadata_extension),
            thumbnail_cell_size=data.get("thumbnail_cell_size", defaults.thumbnail_cell_size),
        )


# -----------------------------------------------------------------------------
# Prompt text
# -----------------------------------------------------------------------------

SAVE_ALERT_TITLE = "Save Level"
SAVE_ALERT_MESSAGE = "Please enter a name for this level (letters and digits only)."
SAVE_ALERT_PLACEHOLDER = "Level name"

SAVE_TITLE = "Save"
CANCEL_TITLE = "Cancel"
SAVE_AS_ANOTHER_TITLE = "Save as another file"
YES_TITLE = "Yes"
NO_TITLE = "No"
OK_TITLE = "OK"

TRY_AGAIN_MESSAGE = "Please try again."


def save_as_prior_title(name: str) -> str:
    return f"Save as {name}?"


def save_as_prior_message(name: str) -> str:
    return f"Please confirm if you would like to save as {name} or as another file."


def save_as_prior_option(name: str) -> str:
    return f"Save as {name}"


def name_exists_title(name: str) -> str:
    return f"{name} already exists."


def name_exists_message(name: str) -> str:
    return f"Overwrite the existing saved {name}?"


def save_success_title(name: str) -> str:
    return f"{name} saved successfully."


def save_failure_title(name: str) -> str:
    return f"{name} could not be saved."
