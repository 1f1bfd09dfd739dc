# world-painter/raster_io.py

"""PNG import/export for the terrain layer. Only opaque 24-bit RGB is persisted."""

import io

import numpy as np
import structlog
from PIL import Image, UnidentifiedImageError

logger = structlog.get_logger()


class RasterDecodeError(Exception):
    """Raised when bytes cannot be decoded as a raster image."""


def decode_png(data):
    """Decodes image bytes into (width, height, pixels) with pixels shaped (height, width, 3)."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            # Every source pixel is treated as opaque
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise RasterDecodeError(f"Could not decode image: {e}") from e
    pixels = np.asarray(rgb, dtype=np.uint8)
    width, height = rgb.size
    return width, height, pixels


def encode_png(width, height, pixels):
    arr = np.asarray(pixels, dtype=np.uint8).reshape(height, width, 3)
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(arr)).save(buf, format="PNG")
    return buf.getvalue()


def read_png(path):
    with open(path, "rb") as f:
        data = f.read()
    width, height, pixels = decode_png(data)
    logger.info("Read PNG", path=str(path), width=width, height=height)
    return width, height, pixels


def write_png(path, width, height, pixels):
    data = encode_png(width, height, pixels)
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Wrote PNG", path=str(path), width=width, height=height, size_bytes=len(data))
