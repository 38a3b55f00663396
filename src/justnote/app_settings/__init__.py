"""Shared application settings helpers."""

from .coercion import coerce_bool, coerce_int_clamped, coerce_string_list, migrate_settings
from .defaults import (
    DEFAULT_AUTOSAVE_INTERVAL_MIN,
    MAX_AUTOSAVE_INTERVAL_MIN,
    MIN_AUTOSAVE_INTERVAL_MIN,
    build_default_settings,
)
from .paths import get_session_file_path, get_settings_file_path
from .storage import load_settings, save_settings

__all__ = [
    "DEFAULT_AUTOSAVE_INTERVAL_MIN",
    "MAX_AUTOSAVE_INTERVAL_MIN",
    "MIN_AUTOSAVE_INTERVAL_MIN",
    "build_default_settings",
    "coerce_bool",
    "coerce_int_clamped",
    "coerce_string_list",
    "migrate_settings",
    "get_session_file_path",
    "get_settings_file_path",
    "load_settings",
    "save_settings",
]
