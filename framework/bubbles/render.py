"""
Grid thumbnail rendering.

Draws the bubble grid into a numpy RGB buffer and wraps it in a
pygame Surface, which is what the level file store writes as the
level's PNG preview.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pygame

from framework.bubbles.model import BubbleGridModel, BubbleType

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

BACKGROUND_COLOR: Color = (24, 28, 48)

BUBBLE_COLORS: dict[BubbleType, Color] = {
    BubbleType.RED: (220, 60, 60),
    BubbleType.ORANGE: (240, 150, 40),
    BubbleType.GREEN: (70, 190, 90),
    BubbleType.BLUE: (60, 120, 230),
    BubbleType.INDESTRUCTIBLE: (120, 120, 130),
    BubbleType.LIGHTNING: (250, 230, 80),
    BubbleType.BOMB: (40, 40, 40),
    BubbleType.STAR: (250, 250, 250),
}


class ThumbnailRenderer:
    """
    Renders a BubbleGridModel to an image.

    Usage:
        renderer = ThumbnailRenderer(cell_size=16)
        surface = renderer.render(grid)  # None if rendering failed
    """

    def __init__(self, cell_size: int = 16, background: Color = BACKGROUND_COLOR):
        if cell_size < 2:
            raise ValueError("cell_size must be at least 2 pixels")
        self.cell_size = cell_size
        self.background = background

    @property
    def row_height(self) -> float:
        # Hex packing: rows overlap by the height of an equilateral triangle
        return self.cell_size * math.sqrt(3) / 2

    def image_size(self, grid: BubbleGridModel) -> tuple[int, int]:
        """(width, height) in pixels."""
        width = grid.columns * self.cell_size
        height = math.ceil((grid.rows - 1) * self.row_height + self.cell_size)
        return width, height

    def bubble_center(self, row: int, column: int) -> tuple[float, float]:
        radius = self.cell_size / 2
        x = column * self.cell_size + radius
        if row % 2 == 1:
            x += radius
        y = row * self.row_height + radius
        return x, y

    def render_pixels(self, grid: BubbleGridModel) -> np.ndarray:
        """
        Draw the grid into an RGB buffer.

        Returns:
            uint8 array of shape (width, height, 3), indexed [x, y] as
            pygame.surfarray expects.
        """
        width, height = self.image_size(grid)
        pixels = np.empty((width, height, 3), dtype=np.uint8)
        pixels[:, :] = self.background

        radius = self.cell_size / 2
        for row, column, bubble in grid.occupied():
            cx, cy = self.bubble_center(row, column)
            x0, x1 = max(0, int(cx - radius)), min(width, math.ceil(cx + radius))
            y0, y1 = max(0, int(cy - radius)), min(height, math.ceil(cy + radius))

            xs = np.arange(x0, x1)[:, None] + 0.5
            ys = np.arange(y0, y1)[None, :] + 0.5
            mask = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius ** 2

            pixels[x0:x1, y0:y1][mask] = BUBBLE_COLORS[bubble]

        return pixels

    def render(self, grid: BubbleGridModel) -> Optional[pygame.Surface]:
        """Render the grid to a Surface, or None if no surface could be made."""
        try:
            return pygame.surfarray.make_surface(self.render_pixels(grid))
        except (pygame.error, ValueError) as e:
            logger.warning(f"Could not render level thumbnail: {e}")
            return None
