from __future__ import annotations

"""Session options persisted between runs.

``data/settings.json`` holds one ``{"key", "value", "type"}`` entry per
option, in the order they were first written.  A session created without
explicit options takes its default rest length and its choice of resting
after the last set from here, see :func:`session_options`.
"""

from pathlib import Path
import json
import logging
from typing import Any, List, Dict

from backend import DEFAULT_REST_DURATION

SETTINGS_PATH = Path(__file__).resolve().parents[1] / "data" / "settings.json"

# Written out whenever the file is missing or unreadable.
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "default_rest_seconds", "value": DEFAULT_REST_DURATION, "type": "int"},
    {"key": "rest_before_finish", "value": False, "type": "bool"},
]

# Parsed file contents; reset with clear_cache().
_settings_cache: List[Dict[str, Any]] | None = None


def load_settings() -> List[Dict[str, Any]]:
    """Read :data:`SETTINGS_PATH`, rewriting it with defaults when unusable."""
    if SETTINGS_PATH.exists():
        try:
            with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
                if isinstance(data, list):
                    return data
        except (OSError, json.JSONDecodeError):
            logging.warning("Unreadable settings file %s, restoring defaults", SETTINGS_PATH)
    save_settings(DEFAULT_SETTINGS)
    return [item.copy() for item in DEFAULT_SETTINGS]


def save_settings(settings: List[Dict[str, Any]]) -> None:
    """Write ``settings`` to disk, creating the data directory if needed."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh)


def get_settings() -> List[Dict[str, Any]]:
    """Return the settings list, reading the file on first use."""
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def clear_cache() -> None:
    """Forget cached settings so the next read goes back to disk."""
    global _settings_cache
    _settings_cache = None


def get_value(key: str, default: Any = None) -> Any:
    """Return the stored value for ``key``.

    Keys missing from the file fall back to :data:`DEFAULT_SETTINGS`, then
    to ``default``.
    """
    for item in get_settings():
        if item.get("key") == key:
            return item.get("value")
    for item in DEFAULT_SETTINGS:
        if item["key"] == key:
            return item["value"]
    return default


def set_value(key: str, value: Any) -> None:
    """Store ``value`` under ``key`` and save the file."""
    settings = get_settings()
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings)


def session_options() -> Dict[str, Any]:
    """Return the options a new workout session is created with."""
    rest = get_value("default_rest_seconds")
    try:
        rest = max(0, int(rest))
    except (TypeError, ValueError, OverflowError):
        rest = DEFAULT_REST_DURATION
    return {
        "default_rest_seconds": rest,
        "rest_before_finish": bool(get_value("rest_before_finish")),
    }
