"""
Tests for the map editor composition root.
"""

import pytest
import numpy as np

from brush import ElevationDirection
from constants import LAND_COLOR, WATER_COLOR, DEFAULT_MAP_WIDTH, DEFAULT_MAP_HEIGHT
from editor import MapEditor, PointerButton
from rendering import Layer


@pytest.fixture
def editor():
    return MapEditor(width=8, height=8, history_limit=10)


def paint_land(editor, x, y, size=1):
    editor.set_brush_size(size)
    editor.select_terrain_color(LAND_COLOR)
    editor.begin_stroke(x, y)
    editor.end_stroke()


class TestInitialization:

    def test_defaults(self):
        editor = MapEditor()
        assert editor.canvas.width == DEFAULT_MAP_WIDTH
        assert editor.canvas.height == DEFAULT_MAP_HEIGHT
        assert editor.active_layer == Layer.BASE_TERRAIN
        assert editor.status == "Ready (history limit: 50)"

    def test_initialize_fills_water(self, editor):
        paint_land(editor, 1, 1)
        editor.initialize(3, 5)
        assert editor.canvas.width == 3 and editor.canvas.height == 5
        assert np.all(editor.canvas.terrain == WATER_COLOR)
        assert editor.display.shape == (5, 3, 3)

    def test_render_callback(self):
        frames = []
        editor = MapEditor(width=2, height=2, on_render=frames.append)
        assert len(frames) == 1
        editor.set_active_layer(Layer.ELEVATION)
        assert len(frames) == 2
        assert frames[-1] is editor.display


class TestStrokes:

    def test_terrain_stroke(self, editor):
        editor.set_brush_size(3)
        assert editor.begin_stroke(4, 4, PointerButton.PRIMARY)
        assert editor.is_painting
        assert editor.canvas.is_land(4, 3)
        assert tuple(editor.display[4, 4]) == LAND_COLOR

        assert editor.continue_stroke(6, 6)
        assert editor.canvas.is_land(6, 6)
        # No interpolation between samples
        assert not editor.canvas.is_land(5, 5)

        editor.end_stroke()
        assert not editor.is_painting
        assert not editor.continue_stroke(1, 1)
        assert not editor.canvas.is_land(1, 1)

    def test_stroke_records_undo_once(self, editor):
        editor.begin_stroke(1, 1)
        for x in range(2, 6):
            editor.continue_stroke(x, 1)
        editor.end_stroke()
        assert len(editor.history.undo_stack) == 1

    def test_secondary_button_does_not_paint_terrain(self, editor):
        assert not editor.begin_stroke(1, 1, PointerButton.SECONDARY)
        assert not editor.is_painting
        assert not editor.history.can_undo

    def test_water_brush(self, editor):
        editor.canvas.fill(LAND_COLOR)
        editor.select_terrain_color(WATER_COLOR)
        editor.begin_stroke(2, 2)
        assert not editor.canvas.is_land(2, 2)

    def test_rejects_non_palette_color(self, editor):
        with pytest.raises(ValueError):
            editor.select_terrain_color((1, 2, 3))

    def test_elevation_scenario(self, editor):
        paint_land(editor, 2, 2)
        editor.set_active_layer(Layer.ELEVATION)
        editor.set_brush_size(1)
        assert editor.begin_stroke(2, 2, PointerButton.PRIMARY)
        editor.end_stroke()
        assert editor.canvas.get_elevation(2, 2) == 4
        assert tuple(editor.display[2, 2]) == (51, 51, 51)

    def test_elevation_on_all_water_is_noop(self):
        editor = MapEditor(width=4, height=4)
        editor.set_active_layer(Layer.ELEVATION)
        editor.set_brush_size(3)
        before = editor.canvas.snapshot()
        editor.begin_stroke(1, 1, PointerButton.PRIMARY)
        editor.end_stroke()
        assert editor.canvas.snapshot() == before
        assert np.all(editor.canvas.elevation == 0)

    def test_lower_with_secondary_button(self, editor):
        paint_land(editor, 3, 3)
        editor.canvas.adjust_elevation(3, 3, 10)
        editor.set_active_layer(Layer.ELEVATION)
        editor.set_brush_size(1)
        editor.begin_stroke(3, 3, PointerButton.SECONDARY)
        assert editor.brush.elevation_direction == ElevationDirection.LOWER
        editor.continue_stroke(3, 3)
        assert editor.canvas.get_elevation(3, 3) == 2
        editor.end_stroke()
        assert editor.brush.elevation_direction == ElevationDirection.NONE

    def test_middle_button_ignored_on_elevation_layer(self, editor):
        editor.set_active_layer(Layer.ELEVATION)
        assert not editor.begin_stroke(1, 1, PointerButton.MIDDLE)
        assert not editor.history.can_undo

    def test_elevation_stroke_does_not_touch_terrain(self, editor):
        paint_land(editor, 4, 4, size=5)
        terrain_before = editor.canvas.terrain.copy()
        editor.set_active_layer(Layer.ELEVATION)
        editor.set_brush_size(9)
        editor.begin_stroke(4, 4)
        assert np.array_equal(editor.canvas.terrain, terrain_before)

    def test_stroke_past_border(self, editor):
        editor.set_brush_size(7)
        editor.begin_stroke(0, 0)
        assert editor.canvas.is_land(0, 0)
        assert editor.canvas.is_land(3, 0)
        assert not editor.canvas.is_land(7, 7)


class TestHistory:

    def test_undo_redo_round_trip(self, editor):
        s0 = editor.canvas.snapshot()
        paint_land(editor, 3, 3, size=3)
        s1 = editor.canvas.snapshot()

        assert editor.undo()
        assert editor.status == "Undo"
        assert editor.canvas.snapshot() == s0
        assert editor.redo()
        assert editor.status == "Redo"
        assert editor.canvas.snapshot() == s1

    def test_edit_after_undo_clears_redo(self, editor):
        paint_land(editor, 1, 1)
        editor.undo()
        paint_land(editor, 5, 5)
        assert not editor.redo()
        assert editor.status == "Nothing to redo"

    def test_empty_undo_reports_noop(self, editor):
        assert not editor.undo()
        assert editor.status == "Nothing to undo"

    def test_history_limit_one(self):
        editor = MapEditor(width=4, height=4, history_limit=1)
        paint_land(editor, 0, 0)
        before_second = editor.canvas.snapshot()
        paint_land(editor, 3, 3)

        assert editor.undo()
        assert editor.canvas.snapshot() == before_second
        assert not editor.undo()

    def test_undo_restores_dimensions(self, editor):
        editor.import_raster(2, 3, np.full((3, 2, 3), 9, dtype=np.uint8))
        assert (editor.canvas.width, editor.canvas.height) == (2, 3)
        editor.undo()
        assert (editor.canvas.width, editor.canvas.height) == (8, 8)
        assert editor.display.shape == (8, 8, 3)

    def test_undo_restores_elevation(self, editor):
        paint_land(editor, 2, 2)
        editor.set_active_layer(Layer.ELEVATION)
        editor.set_brush_size(1)
        editor.begin_stroke(2, 2)
        editor.end_stroke()
        editor.undo()
        assert editor.canvas.get_elevation(2, 2) == 0
        editor.redo()
        assert editor.canvas.get_elevation(2, 2) == 4

    def test_disabled_history(self):
        editor = MapEditor(width=4, height=4, history_limit=0)
        paint_land(editor, 1, 1)
        assert not editor.undo()
        assert editor.canvas.is_land(1, 1)


class TestLayersAndIO:

    def test_layer_switch_keeps_data(self, editor):
        paint_land(editor, 2, 2, size=3)
        terrain_view = editor.display.copy()
        state = editor.canvas.snapshot()

        editor.set_active_layer(Layer.ELEVATION)
        assert not np.array_equal(editor.display, terrain_view)
        editor.set_active_layer(Layer.BASE_TERRAIN)
        assert np.array_equal(editor.display, terrain_view)
        assert editor.canvas.snapshot() == state

    def test_set_active_layer_accepts_value(self, editor):
        editor.set_active_layer("Elevation")
        assert editor.active_layer == Layer.ELEVATION

    def test_clear(self, editor):
        paint_land(editor, 2, 2, size=5)
        editor.clear()
        assert np.all(editor.canvas.terrain == WATER_COLOR)
        assert editor.status == "Canvas cleared to water"
        assert editor.undo()
        assert editor.canvas.is_land(2, 2)

    def test_new_map(self, editor):
        paint_land(editor, 2, 2)
        editor.new_map(16, 12)
        assert (editor.canvas.width, editor.canvas.height) == (16, 12)
        assert editor.history.can_undo

    def test_import_raster(self, editor):
        paint_land(editor, 1, 1)
        editor.canvas.adjust_elevation(1, 1, 40)
        pixels = np.zeros((2, 3, 3), dtype=np.uint8)
        pixels[...] = WATER_COLOR
        pixels[0, 1] = LAND_COLOR

        editor.import_raster(3, 2, pixels)
        assert (editor.canvas.width, editor.canvas.height) == (3, 2)
        assert editor.canvas.is_land(1, 0)
        assert np.all(editor.canvas.elevation == 0)
        assert editor.status == "Imported 3x2 PNG"
        assert editor.history.can_undo

    def test_bad_import_leaves_state_untouched(self, editor):
        state = editor.canvas.snapshot()
        with pytest.raises(ValueError):
            editor.import_raster(5, 5, np.zeros(7, dtype=np.uint8))
        assert editor.canvas.snapshot() == state
        assert not editor.history.can_undo

    def test_import_rejects_empty_dimensions(self, editor):
        state = editor.canvas.snapshot()
        with pytest.raises(ValueError):
            editor.import_raster(0, 5, [])
        assert editor.canvas.snapshot() == state
        assert not editor.history.can_undo

    def test_export_raster_is_terrain_only(self, editor):
        paint_land(editor, 2, 2)
        editor.set_active_layer(Layer.ELEVATION)
        editor.begin_stroke(2, 2)
        editor.end_stroke()

        width, height, pixels = editor.export_raster()
        assert (width, height) == (8, 8)
        assert np.array_equal(pixels, editor.canvas.terrain)
        pixels[0, 0] = (0, 0, 0)
        assert tuple(editor.canvas.terrain[0, 0]) == WATER_COLOR


class TestBrushAndZoom:

    @pytest.mark.parametrize("value,expected", [(0.2, 1), (-5, 1), (1.4, 1), (1.6, 2), (12.0, 12), (12.7, 13)])
    def test_brush_size(self, editor, value, expected):
        assert editor.set_brush_size(value) == expected
        assert editor.brush.size == expected

    @pytest.mark.parametrize("value,expected", [(0.5, 1.0), (2.0, 2.0), (9.0, 4.0)])
    def test_zoom_clamped(self, editor, value, expected):
        assert editor.set_zoom(value) == expected

    def test_device_to_cell(self, editor):
        editor.set_zoom(2.0)
        assert editor.device_to_cell(0, 0) == (0, 0)
        assert editor.device_to_cell(3.9, 5.1) == (1, 2)
        assert editor.device_to_cell(15.9, 15.9) == (7, 7)
        assert editor.device_to_cell(16, 0) is None
        assert editor.device_to_cell(-0.5, 0) is None

    def test_brush_preview_diameter(self, editor):
        editor.set_brush_size(5)
        editor.set_zoom(3.0)
        assert editor.brush_preview_diameter == 15.0
