"""JSON config for grid defaults and keymap overrides.

The file lives in the platform config directory. All access is defensive:
malformed or missing config falls back to defaults value by value.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

from .layout import DEFAULT_CANDIDATE_LIMIT

logger = logging.getLogger(__name__)

APP_NAME = "gridpick"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class GridSettings:
    """User-tunable picker settings; CLI flags override these."""

    cell_width: int = 16
    cell_height: int = 3
    cell_padding: int = 1
    origin_x: float = 0.5
    origin_y: float = 0.5
    theme: str | None = None
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    keymap: dict[str, str] = field(default_factory=dict)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


def _nonnegative_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _fraction(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not 0.0 <= value <= 1.0:
        return None
    return float(value)


def _keymap(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {key: action for key, action in value.items() if isinstance(key, str) and isinstance(action, str)}


def load_settings() -> GridSettings:
    """Build ``GridSettings`` from config, keeping defaults for invalid values."""
    data = load_config()
    settings = GridSettings()
    updates: dict[str, object] = {}
    for key in ("cell_width", "cell_height", "candidate_limit"):
        value = _positive_int(data.get(key))
        if value is not None:
            updates[key] = value
    padding = _nonnegative_int(data.get("cell_padding"))
    if padding is not None:
        updates["cell_padding"] = padding
    for key in ("origin_x", "origin_y"):
        value = _fraction(data.get(key))
        if value is not None:
            updates[key] = value
    theme = data.get("theme")
    if isinstance(theme, str) and theme.strip():
        updates["theme"] = theme.strip()
    updates["keymap"] = _keymap(data.get("keymap"))
    return replace(settings, **updates)
