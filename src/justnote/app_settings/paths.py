from __future__ import annotations

import os
from pathlib import Path


def _app_data_dir() -> Path:
    override = os.environ.get("JUSTNOTE_HOME")
    if override:
        return Path(override)
    appdata = os.environ.get("APPDATA")
    base_dir = Path(appdata) if appdata else (Path.home() / ".config")
    return base_dir / "justnote"


def get_settings_file_path() -> Path:
    return _app_data_dir() / "settings.json"


def get_session_file_path() -> Path:
    return _app_data_dir() / "session.ini"
