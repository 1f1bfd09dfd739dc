# world-painter/brush.py

from enum import IntEnum

import numpy as np

from constants import ELEVATION_STEP


class ElevationDirection(IntEnum):
    LOWER = -1
    NONE = 0
    RAISE = 1


def disc_offsets(brush_size):
    """Returns (dx, dy) arrays for every cell of a brush disc centred on (0, 0).

    A cell is inside when dx*dx + dy*dy <= radius**2 with radius = size // 2,
    which gives the blocky midpoint disc at small sizes.
    """
    radius = max(1, int(brush_size)) // 2
    # Generate brush mask coordinates relative to brush center
    y_coords, x_coords = np.ogrid[-radius : radius + 1, -radius : radius + 1]
    mask = x_coords**2 + y_coords**2 <= radius * radius
    dy, dx = np.nonzero(mask)
    return dx - radius, dy - radius


class BrushRasterizer:
    """Stamps a circular brush onto a canvas, one disc per input sample."""

    def __init__(self, step=ELEVATION_STEP):
        self.step = step

    def stamp(self, center_x, center_y, brush_size, apply):
        """Calls apply(x, y) for every cell of the disc, row by row, without bounds filtering."""
        dxs, dys = disc_offsets(brush_size)
        for dx, dy in zip(dxs.tolist(), dys.tolist()):
            apply(center_x + dx, center_y + dy)

    def paint_terrain(self, canvas, center_x, center_y, brush_size, color):
        # Canvas.set_terrain clips out-of-bounds cells itself
        self.stamp(center_x, center_y, brush_size, lambda x, y: canvas.set_terrain(x, y, color))

    def adjust_elevation(self, canvas, center_x, center_y, brush_size, direction):
        if direction == ElevationDirection.NONE:
            return
        delta = int(direction) * self.step

        def apply(x, y):
            # Off-canvas and water cells carry no elevation
            if canvas.is_land(x, y):
                canvas.adjust_elevation(x, y, delta)

        self.stamp(center_x, center_y, brush_size, apply)
