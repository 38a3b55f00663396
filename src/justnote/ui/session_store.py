from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from PySide6.QtCore import QObject, QSettings

from ..logging_utils import get_logger
from .document import FileSystem, FileUnwritableError, SessionCorruptError, TabRegistry

_LOGGER = get_logger(__name__)

TAB_COUNT_KEY = "tabCount"
CURRENT_TAB_KEY = "currentTab"


def tab_path_key(index: int) -> str:
    return f"tab{index}_filePath"


def tab_content_key(index: int) -> str:
    return f"tab{index}_content"


@dataclass
class SessionTab:
    file_path: str
    content: str


@dataclass
class SessionSnapshot:
    tabs: list[SessionTab] = field(default_factory=list)
    current_tab: int = 0

    @classmethod
    def from_registry(cls, registry: TabRegistry) -> "SessionSnapshot":
        tabs: list[SessionTab] = []
        for entry in registry.entries():
            buffer = registry.buffer(entry.handle)
            tabs.append(
                SessionTab(
                    file_path=str(entry.file_path or ""),
                    content=buffer.text() if buffer is not None else "",
                )
            )
        return cls(tabs=tabs, current_tab=max(0, registry.active_index))

    def to_registry(
        self,
        file_system: FileSystem | None = None,
        parent: QObject | None = None,
    ) -> TabRegistry:
        registry = TabRegistry(file_system=file_system, parent=parent)
        for tab in self.tabs:
            registry.create_tab(initial_content=tab.content, file_path=tab.file_path or None)
        if registry.is_empty():
            registry.create_tab()
        registry.set_active_index(max(0, min(self.current_tab, registry.count() - 1)))
        return registry


class SessionStore:
    """Round-trips every open tab through an INI file via ``QSettings``.

    Only plain text is stored; character formatting does not survive a restart.
    """

    def __init__(self, path: Path, file_system: FileSystem | None = None) -> None:
        self.path = Path(path)
        self.file_system = file_system

    def _settings(self) -> QSettings:
        return QSettings(str(self.path), QSettings.IniFormat)

    def save(self, registry: TabRegistry) -> SessionSnapshot:
        snapshot = SessionSnapshot.from_registry(registry)
        self.write(snapshot)
        return snapshot

    def write(self, snapshot: SessionSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        settings = self._settings()
        settings.clear()
        settings.setValue(TAB_COUNT_KEY, len(snapshot.tabs))
        for index, tab in enumerate(snapshot.tabs):
            settings.setValue(tab_path_key(index), tab.file_path)
            settings.setValue(tab_content_key(index), tab.content)
        settings.setValue(CURRENT_TAB_KEY, snapshot.current_tab)
        settings.sync()
        if settings.status() != QSettings.NoError:
            raise FileUnwritableError(str(self.path), f"Could not write session file (status {settings.status()}).")
        _LOGGER.debug(
            "SessionStore.write path=%s tabs=%d current=%d",
            self.path,
            len(snapshot.tabs),
            snapshot.current_tab,
        )

    def load(self) -> SessionSnapshot | None:
        if not self.path.exists():
            _LOGGER.debug("SessionStore.load no session file path=%s", self.path)
            return None
        settings = self._settings()
        if settings.status() != QSettings.NoError:
            raise SessionCorruptError(f"Session file is unreadable (status {settings.status()}).")
        if not settings.contains(TAB_COUNT_KEY):
            return None
        try:
            count = int(settings.value(TAB_COUNT_KEY))
            current = int(settings.value(CURRENT_TAB_KEY, 0))
        except (TypeError, ValueError) as exc:
            raise SessionCorruptError(f"Invalid tab counters: {exc}") from exc
        if count < 0:
            raise SessionCorruptError(f"Negative tab count {count}.")
        tabs: list[SessionTab] = []
        for index in range(count):
            if not settings.contains(tab_content_key(index)):
                raise SessionCorruptError(f"Missing content for tab {index}.")
            try:
                file_path = settings.value(tab_path_key(index), "", type=str)
                content = settings.value(tab_content_key(index), "", type=str)
            except (TypeError, ValueError) as exc:
                raise SessionCorruptError(f"Invalid value for tab {index}: {exc}") from exc
            tabs.append(SessionTab(file_path=str(file_path or ""), content=str(content or "")))
        return SessionSnapshot(tabs=tabs, current_tab=current)

    def restore(self, parent: QObject | None = None) -> TabRegistry:
        try:
            snapshot = self.load()
        except SessionCorruptError as exc:
            _LOGGER.warning("Session snapshot is corrupt; starting fresh path=%s error=%s", self.path, exc)
            snapshot = None
        if snapshot is None or not snapshot.tabs:
            snapshot = SessionSnapshot()
        registry = snapshot.to_registry(file_system=self.file_system, parent=parent)
        _LOGGER.info("Session restored tabs=%d active=%d", registry.count(), registry.active_index)
        return registry

    def clear(self) -> None:
        try:
            if self.path.exists():
                self.path.unlink()
        except OSError:
            _LOGGER.exception("SessionStore.clear failed path=%s", self.path)
