# world-painter/constants.py

# --- Palette ---
# Terrain is stored as opaque RGB; anything that is not WATER_COLOR counts as land.
LAND_COLOR = (34, 139, 34)
WATER_COLOR = (70, 130, 180)
PALETTE = {"Land": LAND_COLOR, "Water": WATER_COLOR}

# --- Elevation ---
MIN_ELEVATION = 0
MAX_ELEVATION = 255
ELEVATION_STEP = 4  # Change applied per brush sample

# Gray range used when shading land on the elevation layer
MIN_SHADE = 48
MAX_SHADE = 235

# --- Map / View defaults ---
DEFAULT_MAP_WIDTH = 512
DEFAULT_MAP_HEIGHT = 512
DEFAULT_BRUSH_SIZE = 12
MIN_ZOOM = 1.0
MAX_ZOOM = 4.0
ZOOM_PRESETS = [1.0, 2.0, 3.0, 4.0]

# --- History / Config ---
DEFAULT_HISTORY_LIMIT = 50
MIN_HISTORY_LIMIT = 1
MAX_HISTORY_LIMIT = 1000
CONFIG_FILENAME = "world_painter.config.json"
