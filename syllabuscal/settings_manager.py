"""
Application settings management for user preferences.

Tracks how many upcoming events to list, where exported calendars are saved,
and whether reminders are delivered as desktop notifications.
Settings are persisted to a JSON file so they survive across runs; extracted
events are never persisted.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TypedDict

from syllabuscal.logging_helper import Log


class SettingsSchema(TypedDict, total=False):
    upcoming_limit: int
    export_dir: str
    notifications_enabled: bool


SETTINGS_DIR = Path(os.environ.get("SYLLABUSCAL_HOME", Path.home() / ".syllabuscal"))
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

DEFAULT_SETTINGS: SettingsSchema = {
    "upcoming_limit": 5,
    "export_dir": str(Path.home() / "Downloads"),
    "notifications_enabled": True,
}


def _ensure_settings_dir() -> None:
    try:
        SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
    except Exception as err:
        Log.warn(f"Unable to create settings directory {SETTINGS_DIR}: {err}")


def load_settings() -> SettingsSchema:
    """
    Load settings from disk, falling back to defaults if anything fails.
    """
    if not SETTINGS_FILE.exists():
        Log.info(f"Settings file not found, using defaults: {SETTINGS_FILE}")
        return DEFAULT_SETTINGS.copy()

    try:
        data = json.loads(SETTINGS_FILE.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Settings data is not a JSON object")
    except Exception as err:
        Log.warn(f"Failed to read settings file ({SETTINGS_FILE}): {err}")
        return DEFAULT_SETTINGS.copy()

    merged: SettingsSchema = DEFAULT_SETTINGS.copy()
    # Merge only known keys
    for key in DEFAULT_SETTINGS:
        if key in data:
            merged[key] = data[key]  # type: ignore[literal-required]
    return merged


def save_settings(settings: SettingsSchema) -> None:
    """
    Persist settings to disk.
    """
    _ensure_settings_dir()
    try:
        SETTINGS_FILE.write_text(
            json.dumps(settings, indent=2, sort_keys=True),
            encoding="utf-8",
        )
    except Exception as err:
        Log.warn(f"Failed to write settings file ({SETTINGS_FILE}): {err}")


def get_upcoming_limit() -> int:
    settings = load_settings()
    limit = settings.get("upcoming_limit", DEFAULT_SETTINGS["upcoming_limit"])
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        Log.warn(f"Invalid upcoming_limit value '{limit}', defaulting to {DEFAULT_SETTINGS['upcoming_limit']}")
        limit = DEFAULT_SETTINGS["upcoming_limit"]
    return limit


def set_upcoming_limit(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Invalid upcoming limit: {value}")
    settings = load_settings()
    settings["upcoming_limit"] = value
    save_settings(settings)
    Log.info(f"Saved upcoming limit setting: {value}")


def get_export_dir() -> Path:
    """
    Export directory: SYLLABUSCAL_EXPORT_DIR if set, else the saved preference.
    """
    env_dir = os.environ.get("SYLLABUSCAL_EXPORT_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()

    settings = load_settings()
    export_dir = settings.get("export_dir", DEFAULT_SETTINGS["export_dir"])
    if not isinstance(export_dir, str) or not export_dir.strip():
        Log.warn(f"Invalid export_dir value '{export_dir}', defaulting to {DEFAULT_SETTINGS['export_dir']}")
        export_dir = DEFAULT_SETTINGS["export_dir"]
    return Path(export_dir).expanduser()


def set_export_dir(value: str) -> None:
    if not value or not str(value).strip():
        raise ValueError("Export directory must not be empty")
    settings = load_settings()
    settings["export_dir"] = str(value)
    save_settings(settings)
    Log.info(f"Saved export directory setting: {value}")


def notifications_enabled() -> bool:
    settings = load_settings()
    enabled = settings.get("notifications_enabled", DEFAULT_SETTINGS["notifications_enabled"])
    if not isinstance(enabled, bool):
        Log.warn(f"Invalid notifications_enabled value '{enabled}', defaulting to true")
        enabled = True
    return enabled


def set_notifications_enabled(value: bool) -> None:
    settings = load_settings()
    settings["notifications_enabled"] = bool(value)
    save_settings(settings)
    Log.info(f"Saved notifications setting: {bool(value)}")
