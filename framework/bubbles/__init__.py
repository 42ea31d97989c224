"""
Bubble grid data used by the level designer and the game.
"""

from framework.bubbles.model import (
    BubbleGridModel,
    BubbleType,
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
)
from framework.bubbles.render import ThumbnailRenderer, BUBBLE_COLORS

__all__ = [
    "BubbleGridModel",
    "BubbleType",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "ThumbnailRenderer",
    "BUBBLE_COLORS",
]
