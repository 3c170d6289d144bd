"""User preferences that seed new workout sessions.

Preferences live in a JSON file as an ordered list of ``{key, value, type}``
entries.  ``rest_duration`` is the rest period in seconds started after each
completed set and ``carry_forward_sets`` controls whether a completed set's
reps and weight are copied into the next open set.
"""

from __future__ import annotations

from pathlib import Path
import json
import logging
from typing import Any, Dict, List, NamedTuple

from backend import DEFAULT_REST_DURATION

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).resolve().parents[1] / "data" / "settings.json"

DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "rest_duration", "value": DEFAULT_REST_DURATION, "type": "int"},
    {"key": "carry_forward_sets", "value": True, "type": "bool"},
]

_settings_cache: List[Dict[str, Any]] | None = None


class SessionDefaults(NamedTuple):
    rest_duration: int
    carry_forward: bool


def _default(key: str) -> Any:
    for item in DEFAULT_SETTINGS:
        if item["key"] == key:
            return item["value"]
    return None


def load_settings() -> List[Dict[str, Any]]:
    """Read preferences from :data:`SETTINGS_PATH`, writing defaults if unusable."""
    if SETTINGS_PATH.exists():
        try:
            with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError):
            logger.warning("Could not read settings from %s, resetting", SETTINGS_PATH)
        else:
            if isinstance(data, list):
                return data
            logger.warning("Settings file %s is not a list, resetting", SETTINGS_PATH)
    defaults = [dict(item) for item in DEFAULT_SETTINGS]
    save_settings(defaults)
    return defaults


def save_settings(settings: List[Dict[str, Any]]) -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh, indent=2)


def get_settings() -> List[Dict[str, Any]]:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def get_value(key: str, default: Any = None) -> Any:
    """Return the stored value for ``key``, else its built-in default."""
    for item in get_settings():
        if item.get("key") == key:
            return item.get("value")
    builtin = _default(key)
    return default if builtin is None else builtin


def set_value(key: str, value: Any) -> None:
    settings = get_settings()
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings)


def session_defaults() -> SessionDefaults:
    """Rest duration and carry-forward flag for a new session.

    Hand-edited files can hold anything, so a rest duration that is not a
    non-negative integer or a carry-forward flag that is not a bool falls back
    to the built-in default.
    """

    rest = get_value("rest_duration")
    if isinstance(rest, bool) or not isinstance(rest, int) or rest < 0:
        logger.warning("Ignoring invalid rest_duration %r", rest)
        rest = _default("rest_duration")

    carry = get_value("carry_forward_sets")
    if not isinstance(carry, bool):
        logger.warning("Ignoring invalid carry_forward_sets %r", carry)
        carry = _default("carry_forward_sets")

    return SessionDefaults(rest, carry)
