"""
Bubble grid model - the level data edited in the level designer.

The grid is a staggered hexagonal layout: even rows hold `columns`
bubbles and odd rows hold one fewer, shifted half a bubble right.
The model is a Pydantic model so the level file is its JSON dump.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_ROWS = 9
DEFAULT_COLUMNS = 12


class BubbleType(str, Enum):
    """Contents of one grid cell."""
    EMPTY = "empty"

    # Coloured bubbles
    RED = "red"
    ORANGE = "orange"
    GREEN = "green"
    BLUE = "blue"

    # Special bubbles
    INDESTRUCTIBLE = "indestructible"
    LIGHTNING = "lightning"
    BOMB = "bomb"
    STAR = "star"

    @property
    def is_special(self) -> bool:
        return self in (
            BubbleType.INDESTRUCTIBLE,
            BubbleType.LIGHTNING,
            BubbleType.BOMB,
            BubbleType.STAR,
        )


class BubbleGridModel(BaseModel):
    """
    Editable bubble grid.

    Attributes:
        rows: Number of rows
        columns: Bubbles in an even row (odd rows have one fewer)
        cells: Row-major bubble types
        loaded_file_name: Name the grid was last loaded from or saved as.
            Not part of the level file.

    Usage:
        grid = BubbleGridModel()
        grid.set(0, 3, BubbleType.RED)
        text = grid.to_json()
        same = BubbleGridModel.from_json(text)
    """

    model_config = ConfigDict(extra='forbid')

    version: str = "1.0"
    rows: int = Field(default=DEFAULT_ROWS, ge=1)
    columns: int = Field(default=DEFAULT_COLUMNS, ge=2)
    cells: list[list[BubbleType]] = Field(default_factory=list)

    loaded_file_name: Optional[str] = Field(default=None, exclude=True)

    @model_validator(mode='after')
    def _fill_or_check_cells(self) -> BubbleGridModel:
        if not self.cells:
            self.cells = [
                [BubbleType.EMPTY] * self.row_length(row)
                for row in range(self.rows)
            ]
            return self

        if len(self.cells) != self.rows:
            raise ValueError(f"expected {self.rows} rows, got {len(self.cells)}")
        for row, cells in enumerate(self.cells):
            if len(cells) != self.row_length(row):
                raise ValueError(
                    f"row {row} should hold {self.row_length(row)} bubbles, got {len(cells)}"
                )
        return self

    def row_length(self, row: int) -> int:
        """Number of bubbles in a row."""
        return self.columns if row % 2 == 0 else self.columns - 1

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.row_length(row)

    def get(self, row: int, column: int) -> BubbleType:
        if not self.in_bounds(row, column):
            raise IndexError(f"cell ({row}, {column}) is outside the grid")
        return self.cells[row][column]

    def set(self, row: int, column: int, bubble: BubbleType) -> None:
        if not self.in_bounds(row, column):
            raise IndexError(f"cell ({row}, {column}) is outside the grid")
        self.cells[row][column] = BubbleType(bubble)

    def erase(self, row: int, column: int) -> None:
        self.set(row, column, BubbleType.EMPTY)

    def clear(self) -> None:
        """Empty every cell."""
        for cells in self.cells:
            cells[:] = [BubbleType.EMPTY] * len(cells)

    def occupied(self) -> Iterator[tuple[int, int, BubbleType]]:
        """Yield (row, column, type) for every non-empty cell."""
        for row, cells in enumerate(self.cells):
            for column, bubble in enumerate(cells):
                if bubble is not BubbleType.EMPTY:
                    yield row, column, bubble

    def count(self, bubble: BubbleType) -> int:
        return sum(cells.count(bubble) for cells in self.cells)

    @property
    def is_empty(self) -> bool:
        return next(self.occupied(), None) is None

    def prior_save_name(self) -> Optional[str]:
        """Name this grid was last saved or loaded as; None for a new grid."""
        return self.loaded_file_name or None

    # Serialization

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, text: str, loaded_file_name: Optional[str] = None) -> BubbleGridModel:
        grid = cls.model_validate_json(text)
        grid.loaded_file_name = loaded_file_name
        return grid
