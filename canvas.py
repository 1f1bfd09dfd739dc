# world-painter/canvas.py

from collections import namedtuple

import numpy as np

from constants import WATER_COLOR, MIN_ELEVATION, MAX_ELEVATION

Cell = namedtuple("Cell", ["terrain", "elevation"])


class MapState:
    """Immutable full copy of the canvas, used as undo/redo payload."""

    __slots__ = ("width", "height", "terrain", "elevation")

    def __init__(self, width, height, terrain, elevation):
        terrain = np.array(terrain, dtype=np.uint8, copy=True)
        elevation = np.array(elevation, dtype=np.uint8, copy=True)
        terrain.flags.writeable = False
        elevation.flags.writeable = False
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "terrain", terrain)
        object.__setattr__(self, "elevation", elevation)

    def __setattr__(self, name, value):
        raise AttributeError("MapState is immutable")

    def __eq__(self, other):
        if not isinstance(other, MapState):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.terrain, other.terrain)
            and np.array_equal(self.elevation, other.elevation)
        )

    __hash__ = None

    def __repr__(self):
        return f"MapState({self.width}x{self.height})"


class Canvas:
    """Fixed-size grid of terrain colors with a parallel elevation field.

    Every accessor silently ignores coordinates outside the grid, so brush
    discs that hang over the border never need special handling upstream.
    """

    def __init__(self, width, height, fill_color=WATER_COLOR):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.terrain = np.empty((self.height, self.width, 3), dtype=np.uint8)
        self.elevation = np.zeros((self.height, self.width), dtype=np.uint8)
        self.fill(fill_color)

    # --- Construction helpers ---
    @classmethod
    def from_state(cls, state):
        canvas = cls(state.width, state.height)
        canvas.terrain[...] = state.terrain
        canvas.elevation[...] = state.elevation
        return canvas

    @classmethod
    def from_pixels(cls, width, height, pixels):
        """Builds a canvas from row-major RGB(A) pixels; alpha is discarded and elevation starts at 0."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        arr = np.asarray(pixels, dtype=np.uint8)
        if arr.size % (width * height) != 0:
            raise ValueError(f"Pixel buffer of {arr.size} values does not fit a {width}x{height} raster")
        channels = arr.size // (width * height)
        if channels not in (3, 4):
            raise ValueError(f"Expected 3 or 4 channels per pixel, got {channels}")
        canvas = cls(width, height)
        canvas.terrain[...] = arr.reshape(height, width, channels)[..., :3]
        return canvas

    def snapshot(self):
        return MapState(self.width, self.height, self.terrain, self.elevation)

    # --- Cell access ---
    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x, y):
        if not self.in_bounds(x, y):
            return None
        return Cell(tuple(int(c) for c in self.terrain[y, x]), int(self.elevation[y, x]))

    def get_elevation(self, x, y):
        if not self.in_bounds(x, y):
            return None
        return int(self.elevation[y, x])

    def set_terrain(self, x, y, color):
        if not self.in_bounds(x, y):
            return
        self.terrain[y, x] = color
        if tuple(color) == WATER_COLOR:
            self.elevation[y, x] = 0

    def is_land(self, x, y):
        if not self.in_bounds(x, y):
            return False
        return tuple(int(c) for c in self.terrain[y, x]) != WATER_COLOR

    def adjust_elevation(self, x, y, delta):
        if not self.is_land(x, y):
            return
        value = int(self.elevation[y, x]) + delta
        self.elevation[y, x] = min(max(value, MIN_ELEVATION), MAX_ELEVATION)

    def fill(self, color):
        self.terrain[...] = color
        self.elevation.fill(0)

    def land_mask(self):
        """Boolean (height, width) array, True where terrain is not water."""
        return np.any(self.terrain != np.array(WATER_COLOR, dtype=np.uint8), axis=-1)
