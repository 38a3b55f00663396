from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from ...logging_utils import get_logger
from .buffer import BufferArena, DocumentBuffer
from .errors import FileUnreadableError, FileUnwritableError, NoActiveTabError, NoAssociatedFileError
from .file_system import FileSystem, LocalFileSystem

_LOGGER = get_logger(__name__)

UNTITLED_LABEL = "Untitled"
FILE_ENCODING = "utf-8"


def display_label_for(file_path: str | None) -> str:
    if file_path:
        return Path(file_path).name or file_path
    return UNTITLED_LABEL


@dataclass
class TabEntry:
    handle: int
    file_path: str | None = None

    @property
    def display_label(self) -> str:
        return display_label_for(self.file_path)


class TabRegistry(QObject):
    """Ordered open tabs, their buffers and their optional backing files."""

    tab_added = Signal(int, int)
    tab_removed = Signal(int, int)
    active_changed = Signal(int)
    label_changed = Signal(int, str)

    def __init__(
        self,
        file_system: FileSystem | None = None,
        arena: BufferArena | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.file_system: FileSystem = file_system if file_system is not None else LocalFileSystem()
        self.arena = arena if arena is not None else BufferArena()
        self._tabs: list[TabEntry] = []
        self._active_index = -1

    # ---------- Queries ----------
    def __len__(self) -> int:
        return len(self._tabs)

    def count(self) -> int:
        return len(self._tabs)

    def is_empty(self) -> bool:
        return not self._tabs

    @property
    def active_index(self) -> int:
        return self._active_index

    def entries(self) -> list[TabEntry]:
        return list(self._tabs)

    def handles(self) -> list[int]:
        return [entry.handle for entry in self._tabs]

    def index_of(self, handle: int) -> int:
        for index, entry in enumerate(self._tabs):
            if entry.handle == handle:
                return index
        return -1

    def entry(self, handle: int) -> TabEntry | None:
        index = self.index_of(handle)
        return self._tabs[index] if index >= 0 else None

    def buffer(self, handle: int | None) -> DocumentBuffer | None:
        return self.arena.find(handle)

    def active_tab(self) -> int | None:
        if not self._tabs:
            return None
        return self._tabs[self._active_index].handle

    def active_entry(self) -> TabEntry | None:
        if not self._tabs:
            return None
        return self._tabs[self._active_index]

    def active_buffer(self) -> DocumentBuffer | None:
        return self.buffer(self.active_tab())

    # ---------- Lifecycle ----------
    def create_tab(self, initial_content: str = "", file_path: str | None = None) -> int:
        buffer = self.arena.allocate(initial_content)
        entry = TabEntry(handle=buffer.handle, file_path=file_path or None)
        self._tabs.append(entry)
        index = len(self._tabs) - 1
        _LOGGER.debug("TabRegistry.create_tab handle=%d index=%d path=%s", entry.handle, index, entry.file_path)
        self.tab_added.emit(entry.handle, index)
        self._set_active(index)
        return entry.handle

    def open_from_file(self, path: str) -> int:
        try:
            data = self.file_system.read_file(path)
        except OSError as exc:
            _LOGGER.warning("TabRegistry.open_from_file unreadable path=%s error=%s", path, exc)
            raise FileUnreadableError(path, str(exc)) from exc
        text = data.decode(FILE_ENCODING, errors="replace")
        return self.create_tab(initial_content=text, file_path=path)

    def close_tab(self, handle: int) -> None:
        index = self.index_of(handle)
        if index < 0:
            _LOGGER.debug("TabRegistry.close_tab unknown handle=%s", handle)
            return
        previous = self._active_index
        del self._tabs[index]
        # The active index must be valid again before any listener runs.
        if not self._tabs:
            self._active_index = -1
        elif index == previous:
            self._active_index = min(index, len(self._tabs) - 1)
        elif index < previous:
            self._active_index = previous - 1
        self.tab_removed.emit(handle, index)
        self.arena.release(handle)
        _LOGGER.debug("TabRegistry.close_tab handle=%d index=%d active=%d", handle, index, self._active_index)
        if index <= previous:
            self.active_changed.emit(self._active_index)

    def set_active_index(self, index: int) -> None:
        if not 0 <= index < len(self._tabs):
            _LOGGER.debug("TabRegistry.set_active_index ignored index=%s count=%d", index, len(self._tabs))
            return
        self._set_active(index)

    def move_tab(self, from_index: int, to_index: int) -> None:
        count = len(self._tabs)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            return
        active_handle = self.active_tab()
        entry = self._tabs.pop(from_index)
        self._tabs.insert(to_index, entry)
        if active_handle is not None:
            self._active_index = self.index_of(active_handle)
        _LOGGER.debug("TabRegistry.move_tab handle=%d from=%d to=%d", entry.handle, from_index, to_index)

    def _set_active(self, index: int, force: bool = False) -> None:
        if index == self._active_index and not force:
            return
        self._active_index = index
        self.active_changed.emit(index)

    # ---------- Saving ----------
    def save_active(self, path: str | None = None) -> str:
        handle = self.active_tab()
        if handle is None:
            raise NoActiveTabError("There is no open document to save.")
        return self.save_tab(handle, path)

    def save_tab(self, handle: int, path: str | None = None) -> str:
        """Write a tab's text to ``path`` (Save As) or to its associated file.

        Returns the path written.
        """
        entry = self.entry(handle)
        buffer = self.buffer(handle)
        if entry is None or buffer is None:
            raise NoActiveTabError(f"Unknown document handle {handle}.")
        target = path or entry.file_path
        if not target:
            raise NoAssociatedFileError()
        try:
            self.file_system.write_file(target, buffer.text().encode(FILE_ENCODING))
        except OSError as exc:
            _LOGGER.warning("TabRegistry.save_tab failed handle=%d path=%s error=%s", handle, target, exc)
            raise FileUnwritableError(target, str(exc)) from exc
        # A failed Save As leaves the previous association untouched.
        entry.file_path = target
        buffer.set_modified(False)
        _LOGGER.debug("TabRegistry.save_tab wrote handle=%d path=%s", handle, target)
        self.label_changed.emit(handle, entry.display_label)
        return target
