"""
Tests for layer rendering.
"""

import pytest
import numpy as np

from canvas import Canvas
from constants import LAND_COLOR, WATER_COLOR, MIN_SHADE, MAX_SHADE
from rendering import Layer, render, shade_for_elevation, to_image


class TestLayerRendering:

    @pytest.fixture
    def canvas(self):
        canvas = Canvas(4, 4)
        canvas.set_terrain(2, 2, LAND_COLOR)
        canvas.set_terrain(1, 2, LAND_COLOR)
        canvas.adjust_elevation(2, 2, 4)
        canvas.adjust_elevation(1, 2, 255)
        return canvas

    def test_terrain_layer_is_copy_of_terrain(self, canvas):
        display = render(canvas, Layer.BASE_TERRAIN)
        assert np.array_equal(display, canvas.terrain)
        display[0, 0] = (1, 2, 3)
        assert tuple(canvas.terrain[0, 0]) == WATER_COLOR

    def test_elevation_layer(self, canvas):
        display = render(canvas, Layer.ELEVATION)
        assert display.shape == (4, 4, 3)
        assert display.dtype == np.uint8
        assert tuple(display[2, 2]) == (51, 51, 51)
        assert tuple(display[2, 1]) == (MAX_SHADE,) * 3
        assert tuple(display[0, 0]) == WATER_COLOR

    def test_flat_land_renders_min_shade(self):
        canvas = Canvas(2, 2, fill_color=LAND_COLOR)
        display = render(canvas, Layer.ELEVATION)
        assert np.all(display == MIN_SHADE)

    def test_shade_range(self):
        assert shade_for_elevation(0) == MIN_SHADE
        assert shade_for_elevation(4) == 51
        assert shade_for_elevation(255) == MAX_SHADE
        shades = shade_for_elevation(np.arange(256))
        assert np.all(np.diff(shades) >= 0)

    def test_rendering_is_pure(self, canvas):
        before = canvas.snapshot()
        first = render(canvas, Layer.ELEVATION)
        second = render(canvas, Layer.ELEVATION)
        assert np.array_equal(first, second)
        assert canvas.snapshot() == before

    def test_layer_switch_round_trip(self, canvas):
        terrain_view = render(canvas, Layer.BASE_TERRAIN)
        render(canvas, Layer.ELEVATION)
        assert np.array_equal(render(canvas, Layer.BASE_TERRAIN), terrain_view)

    def test_to_image(self, canvas):
        img = to_image(render(canvas, Layer.BASE_TERRAIN))
        assert img.mode == "RGB"
        assert img.size == (4, 4)
        assert img.getpixel((2, 2)) == LAND_COLOR
