# world-painter/editor.py

import math
from dataclasses import dataclass
from enum import Enum

import structlog

from brush import BrushRasterizer, ElevationDirection
from canvas import Canvas
from constants import (
    LAND_COLOR, WATER_COLOR, DEFAULT_MAP_WIDTH, DEFAULT_MAP_HEIGHT,
    DEFAULT_BRUSH_SIZE, DEFAULT_HISTORY_LIMIT, MIN_ZOOM, MAX_ZOOM, ELEVATION_STEP,
)
from history import HistoryManager
from rendering import Layer, render

logger = structlog.get_logger()


class PointerButton(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"


@dataclass
class BrushSettings:
    size: int = DEFAULT_BRUSH_SIZE
    terrain_color: tuple = LAND_COLOR
    elevation_direction: ElevationDirection = ElevationDirection.NONE


class MapEditor:
    """Owns the canvas, the active layer, the brush and the undo history.

    Input handling, file dialogs and on-screen drawing live outside; they drive
    the editor through the methods below and read back `display` and `status`.
    """

    def __init__(self, width=DEFAULT_MAP_WIDTH, height=DEFAULT_MAP_HEIGHT,
                 history_limit=DEFAULT_HISTORY_LIMIT, elevation_step=ELEVATION_STEP,
                 on_render=None, on_history_change=None):
        self.history = HistoryManager(history_limit, on_change=on_history_change)
        self.rasterizer = BrushRasterizer(step=elevation_step)
        self.brush = BrushSettings()
        self.active_layer = Layer.BASE_TERRAIN
        self.zoom_scale = MIN_ZOOM
        self.is_painting = False
        self.on_render = on_render
        self.canvas = None
        self.display = None
        self.status = ""
        self.initialize(width, height)
        self.status = f"Ready (history limit: {self.history.history_limit})"

    # --- Canvas lifecycle ---
    def initialize(self, width, height):
        """Replaces the canvas with a fresh all-water map."""
        self.canvas = Canvas(width, height, fill_color=WATER_COLOR)
        self.is_painting = False
        self.brush.elevation_direction = ElevationDirection.NONE
        self.refresh()

    def new_map(self, width=DEFAULT_MAP_WIDTH, height=DEFAULT_MAP_HEIGHT):
        self.history.record_for_undo(self.canvas.snapshot())
        self.initialize(width, height)
        self.status = "New map created"
        logger.info("New map", width=width, height=height)

    def clear(self):
        self.history.record_for_undo(self.canvas.snapshot())
        self.canvas.fill(WATER_COLOR)
        self.refresh()
        self.status = "Canvas cleared to water"

    def import_raster(self, width, height, pixels):
        # Build first so a bad pixel buffer leaves canvas and history untouched
        canvas = Canvas.from_pixels(width, height, pixels)
        self.history.record_for_undo(self.canvas.snapshot())
        self.canvas = canvas
        self.is_painting = False
        self.refresh()
        self.status = f"Imported {width}x{height} PNG"
        logger.info("Imported raster", width=width, height=height)

    def export_raster(self):
        """Returns (width, height, pixels) for the terrain layer only; elevation is never exported."""
        return self.canvas.width, self.canvas.height, self.canvas.terrain.copy()

    # --- Rendering ---
    def refresh(self):
        self.display = render(self.canvas, self.active_layer)
        if self.on_render is not None:
            self.on_render(self.display)

    def set_active_layer(self, layer):
        self.active_layer = Layer(layer)
        self.refresh()
        self.status = f"{self.active_layer.value} layer"

    # --- Brush configuration ---
    def set_brush_size(self, value):
        self.brush.size = max(1, int(round(value)))
        return self.brush.size

    def select_terrain_color(self, color):
        color = tuple(color)
        if color not in (LAND_COLOR, WATER_COLOR):
            raise ValueError(f"Brush color must be the land or water color, got {color}")
        self.brush.terrain_color = color
        self.status = "Selected land brush" if color == LAND_COLOR else "Selected water brush"

    # --- Strokes ---
    def begin_stroke(self, x, y, button=PointerButton.PRIMARY):
        """Starts a paint gesture; returns False when the button does not paint on this layer."""
        if self.active_layer == Layer.ELEVATION:
            direction = {
                PointerButton.PRIMARY: ElevationDirection.RAISE,
                PointerButton.SECONDARY: ElevationDirection.LOWER,
            }.get(button, ElevationDirection.NONE)
            if direction == ElevationDirection.NONE:
                return False
            self.brush.elevation_direction = direction
        elif button != PointerButton.PRIMARY:
            return False

        self.history.record_for_undo(self.canvas.snapshot())
        self.is_painting = True
        self._apply_brush(x, y)
        return True

    def continue_stroke(self, x, y):
        if not self.is_painting:
            return False
        self._apply_brush(x, y)
        return True

    def end_stroke(self):
        self.is_painting = False
        self.brush.elevation_direction = ElevationDirection.NONE

    def _apply_brush(self, x, y):
        # The direction captured at begin_stroke holds for the whole stroke
        if self.active_layer == Layer.ELEVATION:
            self.rasterizer.adjust_elevation(
                self.canvas, x, y, self.brush.size, self.brush.elevation_direction)
        else:
            self.rasterizer.paint_terrain(
                self.canvas, x, y, self.brush.size, self.brush.terrain_color)
        self.refresh()

    # --- History ---
    def undo(self):
        state = self.history.undo(self.canvas.snapshot())
        if state is None:
            self.status = "Nothing to undo"
            return False
        self._restore(state)
        self.status = "Undo"
        return True

    def redo(self):
        state = self.history.redo(self.canvas.snapshot())
        if state is None:
            self.status = "Nothing to redo"
            return False
        self._restore(state)
        self.status = "Redo"
        return True

    def _restore(self, state):
        self.canvas = Canvas.from_state(state)
        self.is_painting = False
        self.brush.elevation_direction = ElevationDirection.NONE
        self.refresh()

    # --- View ---
    def set_zoom(self, scale):
        self.zoom_scale = min(max(float(scale), MIN_ZOOM), MAX_ZOOM)
        return self.zoom_scale

    def device_to_cell(self, px, py):
        """Maps a pointer position on the zoomed surface to a cell, or None outside the map."""
        x = math.floor(px / self.zoom_scale)
        y = math.floor(py / self.zoom_scale)
        if not self.canvas.in_bounds(x, y):
            return None
        return x, y

    @property
    def brush_preview_diameter(self):
        return max(1.0, self.brush.size * self.zoom_scale)
