"""Persistent JSON config helpers.

Stores the highlight style, hidden-file preference, and list pane width.
Malformed or missing config falls back to defaults; environment variables
override what is persisted.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "seer"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_STYLE = "nord"
DEFAULT_LEFT_PANE_PERCENT = 35.0
STYLE_ENV_VAR = "SEER_STYLE"
NO_COLOR_ENV_VAR = "NO_COLOR"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so an unwritable
    config directory never interrupts browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not save config to %s: %s", CONFIG_PATH, exc)


def load_style(env: Mapping[str, str] | None = None) -> str:
    """Return the Pygments style name: ``SEER_STYLE``, then config, then ``nord``."""
    if env is None:
        env = os.environ
    override = env.get(STYLE_ENV_VAR, "").strip()
    if override:
        return override
    value = load_config().get("style")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_STYLE


def color_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Colour is on unless ``NO_COLOR`` is present, whatever its value."""
    if env is None:
        env = os.environ
    return NO_COLOR_ENV_VAR not in env


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_left_pane_percent() -> float:
    """Load the list pane width percentage constrained to (0, 100)."""
    value = load_config().get("left_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_LEFT_PANE_PERCENT
    if value <= 0 or value >= 100:
        return DEFAULT_LEFT_PANE_PERCENT
    return float(value)
