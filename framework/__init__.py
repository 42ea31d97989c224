"""
Bubble Blast framework module.

Game data built on top of the engine:
- Bubbles (grid model, thumbnail rendering)
"""

from framework.bubbles import BubbleGridModel, BubbleType, ThumbnailRenderer

__all__ = [
    "BubbleGridModel",
    "BubbleType",
    "ThumbnailRenderer",
]
