from __future__ import annotations

import json
from pathlib import Path

from .coercion import migrate_settings
from .defaults import build_default_settings
from ..logging_utils import get_logger

_LOGGER = get_logger(__name__)


def _atomic_write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)


def load_settings(path: Path) -> dict:
    settings = build_default_settings()
    if not path.exists():
        _LOGGER.debug("load_settings no file path=%s; using defaults", path)
        return settings
    try:
        loaded = json.loads(path.read_bytes().decode("utf-8"))
    except Exception:
        _LOGGER.exception("load_settings failed to parse path=%s", path)
        return settings
    if not isinstance(loaded, dict):
        _LOGGER.warning("load_settings ignoring non-object payload path=%s", path)
        return settings
    settings.update(loaded)
    return migrate_settings(settings)


def save_settings(path: Path, settings: dict) -> dict:
    payload = migrate_settings(dict(settings))
    _atomic_write_json(path, payload)
    _LOGGER.debug("save_settings wrote path=%s keys=%d", path, len(payload))
    return payload
