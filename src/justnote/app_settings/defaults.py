from __future__ import annotations

SETTINGS_SCHEMA_VERSION = 1
DEFAULT_AUTOSAVE_INTERVAL_MIN = 5
MIN_AUTOSAVE_INTERVAL_MIN = 1
MAX_AUTOSAVE_INTERVAL_MIN = 60


def build_default_settings() -> dict:
    return {
        "settings_schema_version": SETTINGS_SCHEMA_VERSION,
        "log_level": "INFO",
        "restore_session": True,
        "autosave_enabled": False,
        "autosave_interval_min": DEFAULT_AUTOSAVE_INTERVAL_MIN,
        "search_case_sensitive": False,
        "search_history": [],
        "search_history_max": 25,
    }
