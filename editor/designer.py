"""
Level designer session.

Owns the grid being edited and wires it to the level store, the
thumbnail renderer and the save flow. This is the caller of the save
flow: it remembers the saved name on success, so the next save offers
to overwrite it.
"""

from __future__ import annotations

import logging
from typing import Optional

from editor.config import EditorConfig
from editor.errors import SaveFlowInProgressError
from editor.events import EditorEvent
from editor.level_store import LevelFileStore
from editor.prompts import Prompter, run_save_flow
from editor.save_flow import SaveFlowController, SaveOutcome
from engine.core.events import EventBus
from framework.bubbles import BubbleGridModel, ThumbnailRenderer

logger = logging.getLogger(__name__)


class LevelDesigner:
    """
    Editing session for one bubble grid at a time.

    Usage:
        designer = LevelDesigner(EditorConfig(levels_dir=Path("levels")))
        designer.grid.set(0, 0, BubbleType.RED)
        outcome = designer.save(TkPrompter())
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        store: Optional[LevelFileStore] = None,
        event_bus: Optional[EventBus] = None,
        renderer: Optional[ThumbnailRenderer] = None,
    ):
        self.config = config or EditorConfig()
        self.store = store or LevelFileStore(self.config)
        self.event_bus = event_bus
        self.renderer = renderer or ThumbnailRenderer(self.config.thumbnail_cell_size)

        self._grid = BubbleGridModel()
        self._save_flow = self._create_save_flow()

    @property
    def grid(self) -> BubbleGridModel:
        return self._grid

    @property
    def save_flow(self) -> SaveFlowController:
        return self._save_flow

    @property
    def level_name(self) -> Optional[str]:
        return self._grid.prior_save_name()

    def new_level(self, rows: Optional[int] = None, columns: Optional[int] = None) -> BubbleGridModel:
        """Replace the grid with an empty, never saved one."""
        kwargs = {}
        if rows is not None:
            kwargs["rows"] = rows
        if columns is not None:
            kwargs["columns"] = columns
        self._replace_grid(BubbleGridModel(**kwargs))
        return self._grid

    def load_level(self, name: str) -> bool:
        """
        Load a saved level into the designer.

        Returns:
            True if the level was loaded
        """
        grid = self.store.load(name)
        if grid is None:
            return False

        self._replace_grid(grid)
        if self.event_bus:
            self.event_bus.publish(EditorEvent.LEVEL_LOADED, name=name)
        return True

    def save(self, prompter: Prompter) -> SaveOutcome:
        """Run the save flow for the current grid."""
        return run_save_flow(self._save_flow, prompter)

    def _create_save_flow(self) -> SaveFlowController:
        grid = self._grid
        return SaveFlowController(
            grid,
            self.store,
            render=lambda: self.renderer.render(grid),
            event_bus=self.event_bus,
            on_complete=self._on_save_complete,
        )

    def _replace_grid(self, grid: BubbleGridModel) -> None:
        if self._save_flow.in_progress:
            raise SaveFlowInProgressError("Cannot replace the grid while it is being saved")
        self._grid = grid
        self._save_flow = self._create_save_flow()

    def _on_save_complete(self, outcome: SaveOutcome) -> None:
        if outcome.is_success:
            self._grid.loaded_file_name = outcome.name
            logger.info(f"Level designer now editing '{outcome.name}'")
