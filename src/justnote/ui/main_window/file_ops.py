from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtWidgets import QFileDialog, QMessageBox

from justnote.logging_utils import get_logger
from justnote.ui.document import FileError, NoActiveTabError, NoAssociatedFileError

_LOGGER = get_logger(__name__)

FILE_FILTER = "Text Files (*.txt);;All Files (*)"


class FileOpsMixin:
    if TYPE_CHECKING:
        def __getattr__(self, name: str) -> Any: ...

    # ---------- File operations ----------
    def file_new(self) -> None:
        self.registry.create_tab()
        _LOGGER.info("Created new file tab")

    def file_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open File", "", FILE_FILTER)
        if not path:
            return
        _LOGGER.debug("file_open dialog selected path=%s", path)
        self.open_path(path)

    def open_path(self, path: str) -> bool:
        try:
            self.registry.open_from_file(path)
        except FileError as exc:
            QMessageBox.warning(self, "Warning", f"Cannot open file: {exc.message}")
            return False
        _LOGGER.info('Open succeeded: "%s"', path)
        return True

    def file_save(self) -> bool:
        try:
            self.registry.save_active()
        except NoAssociatedFileError:
            return self.file_save_as()
        except NoActiveTabError:
            return False
        except FileError as exc:
            QMessageBox.warning(self, "Warning", f"Cannot save file: {exc.message}")
            return False
        self.update_window_title()
        return True

    def file_save_as(self) -> bool:
        if self.registry.is_empty():
            return False
        path, _ = QFileDialog.getSaveFileName(self, "Save File", "", FILE_FILTER)
        if not path:
            return False
        try:
            self.registry.save_active(path)
        except FileError as exc:
            QMessageBox.warning(self, "Warning", f"Cannot save file: {exc.message}")
            return False
        self.update_window_title()
        return True

    def close_tab_at(self, index: int) -> None:
        handles = self.registry.handles()
        if 0 <= index < len(handles):
            self.registry.close_tab(handles[index])

    def close_active_tab(self) -> None:
        handle = self.registry.active_tab()
        if handle is not None:
            self.registry.close_tab(handle)

    def file_exit(self) -> None:
        self.close()
