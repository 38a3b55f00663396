from __future__ import annotations

from .defaults import (
    MAX_AUTOSAVE_INTERVAL_MIN,
    MIN_AUTOSAVE_INTERVAL_MIN,
    SETTINGS_SCHEMA_VERSION,
    build_default_settings,
)
from ..logging_utils import normalize_log_level_name


def coerce_bool(value, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off", ""}:
            return False
    return default


def coerce_int_clamped(value: object, default: int, min_value: int, max_value: int) -> int:
    try:
        num = int(value)  # type: ignore[arg-type]
    except Exception:
        num = default
    return max(min_value, min(max_value, num))


def coerce_string_list(value: object, max_items: int | None = None) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    out = [str(item) for item in value if isinstance(item, str) and item]
    if max_items is not None and len(out) > max_items:
        out = out[-max_items:]
    return out


def migrate_settings(settings: dict) -> dict:
    current = dict(settings)
    defaults = build_default_settings()
    for key, value in defaults.items():
        current.setdefault(key, value)
    current["log_level"] = normalize_log_level_name(current.get("log_level"), defaults["log_level"])
    current["restore_session"] = coerce_bool(current.get("restore_session"), True)
    current["autosave_enabled"] = coerce_bool(current.get("autosave_enabled"), False)
    current["autosave_interval_min"] = coerce_int_clamped(
        current.get("autosave_interval_min"),
        defaults["autosave_interval_min"],
        MIN_AUTOSAVE_INTERVAL_MIN,
        MAX_AUTOSAVE_INTERVAL_MIN,
    )
    current["search_case_sensitive"] = coerce_bool(current.get("search_case_sensitive"), False)
    current["search_history_max"] = coerce_int_clamped(
        current.get("search_history_max"),
        defaults["search_history_max"],
        1,
        500,
    )
    current["search_history"] = coerce_string_list(
        current.get("search_history"),
        max_items=current["search_history_max"],
    )
    current["settings_schema_version"] = SETTINGS_SCHEMA_VERSION
    return current
