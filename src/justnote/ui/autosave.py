from __future__ import annotations

from enum import Enum

from PySide6.QtCore import QObject, QTimer, Signal

from ..app_settings import (
    DEFAULT_AUTOSAVE_INTERVAL_MIN,
    MAX_AUTOSAVE_INTERVAL_MIN,
    MIN_AUTOSAVE_INTERVAL_MIN,
    coerce_int_clamped,
)
from ..logging_utils import get_logger
from .document import FileError, TabRegistry

_LOGGER = get_logger(__name__)

_MS_PER_MINUTE = 60_000


class AutoSaveState(Enum):
    DISABLED = "disabled"
    ARMED = "armed"


class AutoSaveScheduler(QObject):
    """Saves the active tab to its own file on a recurring timer."""

    state_changed = Signal(bool)
    saved = Signal(str)
    save_failed = Signal(str)

    def __init__(
        self,
        registry: TabRegistry,
        interval_minutes: int = DEFAULT_AUTOSAVE_INTERVAL_MIN,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.registry = registry
        self.state = AutoSaveState.DISABLED
        self._interval_minutes = self._clamp(interval_minutes)
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.run_tick)
        _LOGGER.debug("AutoSaveScheduler initialized interval_min=%d", self._interval_minutes)

    @staticmethod
    def _clamp(minutes: object) -> int:
        return coerce_int_clamped(
            minutes,
            DEFAULT_AUTOSAVE_INTERVAL_MIN,
            MIN_AUTOSAVE_INTERVAL_MIN,
            MAX_AUTOSAVE_INTERVAL_MIN,
        )

    @property
    def interval_minutes(self) -> int:
        return self._interval_minutes

    @property
    def interval_ms(self) -> int:
        return self._interval_minutes * _MS_PER_MINUTE

    def is_armed(self) -> bool:
        return self.state is AutoSaveState.ARMED

    def toggle(self) -> bool:
        self.set_enabled(not self.is_armed())
        return self.is_armed()

    def set_enabled(self, enabled: bool) -> None:
        if bool(enabled) == self.is_armed():
            return
        if enabled:
            self.state = AutoSaveState.ARMED
            self.timer.start(self.interval_ms)
        else:
            self.state = AutoSaveState.DISABLED
            self.timer.stop()
        _LOGGER.info("Autosave %s interval_min=%d", self.state.value, self._interval_minutes)
        self.state_changed.emit(self.is_armed())

    def set_interval(self, minutes: int) -> int:
        self._interval_minutes = self._clamp(minutes)
        if self.is_armed():
            self.timer.start(self.interval_ms)
        _LOGGER.debug("AutoSaveScheduler.set_interval minutes=%d armed=%s", self._interval_minutes, self.is_armed())
        return self._interval_minutes

    def run_tick(self) -> str | None:
        if not self.is_armed():
            return None
        entry = self.registry.active_entry()
        if entry is None or not entry.file_path:
            _LOGGER.debug("AutoSaveScheduler tick skipped; active tab has no file")
            return None
        try:
            path = self.registry.save_active()
        except FileError as exc:
            _LOGGER.warning("Autosave failed path=%s error=%s", exc.path, exc.message)
            self.save_failed.emit(exc.message)
            return None
        _LOGGER.debug("AutoSaveScheduler tick saved path=%s", path)
        self.saved.emit(path)
        return path
