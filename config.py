# world-painter/config.py

"""
Startup configuration for the editor.

Settings are read from a small JSON file next to the application. Anything
missing or unreadable falls back to defaults; configuration problems are never
surfaced to the user.
"""

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from constants import CONFIG_FILENAME, DEFAULT_HISTORY_LIMIT, MIN_HISTORY_LIMIT, MAX_HISTORY_LIMIT

logger = structlog.get_logger()


class EditorConfig(BaseModel):
    """Settings recognised in world_painter.config.json."""

    history_limit: int = Field(
        default=DEFAULT_HISTORY_LIMIT,
        strict=True,
        description="Maximum number of undo (and redo) snapshots kept in memory",
    )

    @field_validator("history_limit")
    @classmethod
    def clamp_history_limit(cls, v: int) -> int:
        return min(max(v, MIN_HISTORY_LIMIT), MAX_HISTORY_LIMIT)


# Keys are matched case-insensitively, with or without underscores
_KEY_ALIASES = {"historylimit": "history_limit"}


def _normalize_keys(raw: dict) -> dict:
    normalized = {}
    for key, value in raw.items():
        field_name = _KEY_ALIASES.get(str(key).replace("_", "").lower())
        if field_name is not None:
            normalized[field_name] = value
    return normalized


def parse_config(text: str) -> EditorConfig:
    """Parses JSON config text, returning defaults on any error."""
    try:
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError("Config root must be a JSON object")
        return EditorConfig(**_normalize_keys(raw))
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning("Invalid configuration, using defaults", error=str(e))
        return EditorConfig()


def load_config(base_directory) -> EditorConfig:
    config_path = Path(base_directory) / CONFIG_FILENAME
    if not config_path.is_file():
        logger.debug("No configuration file found", path=str(config_path))
        return EditorConfig()

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read configuration, using defaults", path=str(config_path), error=str(e))
        return EditorConfig()

    config = parse_config(text)
    logger.info("Loaded configuration", path=str(config_path), history_limit=config.history_limit)
    return config
