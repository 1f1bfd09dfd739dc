# world-painter/rendering.py

from enum import Enum

import numpy as np
from PIL import Image

from constants import WATER_COLOR, MIN_SHADE, MAX_SHADE, MAX_ELEVATION


class Layer(Enum):
    BASE_TERRAIN = "Base Terrain"
    ELEVATION = "Elevation"


def shade_for_elevation(elevation):
    """Maps 0-255 elevation linearly onto the MIN_SHADE..MAX_SHADE gray ramp, rounding to nearest."""
    span = MAX_SHADE - MIN_SHADE
    elevation = np.asarray(elevation, dtype=np.int32)
    return MIN_SHADE + (elevation * span + MAX_ELEVATION // 2) // MAX_ELEVATION


def render_terrain(canvas):
    return canvas.terrain.copy()


def render_elevation(canvas):
    shade = shade_for_elevation(canvas.elevation).astype(np.uint8)
    rgb = np.repeat(shade[..., np.newaxis], 3, axis=-1)
    rgb[~canvas.land_mask()] = WATER_COLOR
    return rgb


_RENDERERS = {
    Layer.BASE_TERRAIN: render_terrain,
    Layer.ELEVATION: render_elevation,
}


def render(canvas, layer):
    """Derives the (height, width, 3) display buffer for the given layer.

    Pure function of the canvas contents; it never caches or mutates anything.
    """
    return _RENDERERS[layer](canvas)


def to_image(display):
    # uint8 (h, w, 3) arrays come out as mode "RGB"
    return Image.fromarray(np.ascontiguousarray(display, dtype=np.uint8))
