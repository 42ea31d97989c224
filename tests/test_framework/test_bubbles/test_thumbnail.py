"""
Test grid thumbnail rendering.
"""

from unittest.mock import patch

import numpy as np
import pygame
import pytest

from framework.bubbles import BUBBLE_COLORS, BubbleGridModel, BubbleType, ThumbnailRenderer
from framework.bubbles.render import BACKGROUND_COLOR


def test_image_size_follows_hex_packing():
    renderer = ThumbnailRenderer(cell_size=10)
    grid = BubbleGridModel(rows=3, columns=4)

    width, height = renderer.image_size(grid)
    assert width == 40
    # Two row steps of 10 * sqrt(3) / 2 plus one full bubble
    assert height == 28


def test_odd_rows_are_shifted_half_a_bubble():
    renderer = ThumbnailRenderer(cell_size=10)

    assert renderer.bubble_center(0, 0) == (5.0, 5.0)
    x, _ = renderer.bubble_center(1, 0)
    assert x == 10.0


def test_render_pixels_draws_bubbles_on_background():
    renderer = ThumbnailRenderer(cell_size=10)
    grid = BubbleGridModel(rows=2, columns=3)
    grid.set(0, 1, BubbleType.RED)

    pixels = renderer.render_pixels(grid)

    assert pixels.shape == (30, 19, 3)
    assert pixels.dtype == np.uint8
    # Center of bubble (0, 1)
    assert tuple(pixels[15, 5]) == BUBBLE_COLORS[BubbleType.RED]
    # Corner is outside every bubble
    assert tuple(pixels[0, 0]) == BACKGROUND_COLOR


def test_empty_grid_is_all_background():
    renderer = ThumbnailRenderer(cell_size=4)
    pixels = renderer.render_pixels(BubbleGridModel(rows=2, columns=2))
    assert (pixels == np.array(BACKGROUND_COLOR, dtype=np.uint8)).all()


def test_render_wraps_pixels_in_surface(grid):
    renderer = ThumbnailRenderer(cell_size=8)

    with patch("pygame.surfarray.make_surface", return_value="surface") as make_surface:
        assert renderer.render(grid) == "surface"

    (pixels,), _ = make_surface.call_args
    assert pixels.shape[:2] == renderer.image_size(grid)


def test_render_returns_none_when_surface_unavailable(grid):
    renderer = ThumbnailRenderer(cell_size=8)

    with patch("pygame.surfarray.make_surface", side_effect=pygame.error("no video")):
        assert renderer.render(grid) is None


def test_cell_size_must_be_drawable():
    with pytest.raises(ValueError):
        ThumbnailRenderer(cell_size=1)
