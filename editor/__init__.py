"""
Level designer module.

Saving, loading and listing bubble grid levels.

Note: TkPrompter needs tkinter, which is imported only when a dialog
is shown. Everything else works headless.
"""

from editor.config import EditorConfig
from editor.designer import LevelDesigner
from editor.errors import (
    InvalidDecisionError,
    LevelLoadError,
    LevelWriteError,
    SaveFlowInProgressError,
)
from editor.events import EditorEvent
from editor.level_select import LevelSelectEntry, LevelSelectModel
from editor.level_store import LevelFileStore, LevelKind, LevelMetadata
from editor.prompts import Prompter, TkPrompter, run_save_flow
from editor.save_flow import (
    Prompt,
    PromptChoice,
    SaveFlowController,
    SaveFlowState,
    SaveOutcome,
    SaveStatus,
    SaveTarget,
    UserDecision,
)
from editor.validation import is_valid_level_name

__all__ = [
    "EditorConfig",
    "EditorEvent",
    "LevelDesigner",
    "LevelFileStore",
    "LevelKind",
    "LevelMetadata",
    "LevelSelectEntry",
    "LevelSelectModel",
    "Prompt",
    "PromptChoice",
    "Prompter",
    "TkPrompter",
    "run_save_flow",
    "SaveFlowController",
    "SaveFlowState",
    "SaveOutcome",
    "SaveStatus",
    "SaveTarget",
    "UserDecision",
    "is_valid_level_name",
    "InvalidDecisionError",
    "LevelLoadError",
    "LevelWriteError",
    "SaveFlowInProgressError",
]
