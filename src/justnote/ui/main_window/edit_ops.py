from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtWidgets import QInputDialog, QLineEdit, QMessageBox

from justnote.app_settings import MAX_AUTOSAVE_INTERVAL_MIN, MIN_AUTOSAVE_INTERVAL_MIN
from justnote.logging_utils import get_logger
from justnote.ui.document import PromptReply, SearchResult, run_interactive_search

_LOGGER = get_logger(__name__)


class MessageBoxSearchPrompt:
    def __init__(self, parent) -> None:
        self.parent = parent

    def confirm(self, title: str, question: str, allow_no: bool = True) -> PromptReply:
        buttons = QMessageBox.Yes | QMessageBox.Cancel
        if allow_no:
            buttons |= QMessageBox.No
        reply = QMessageBox.question(self.parent, title, question, buttons)
        if reply == QMessageBox.Yes:
            return PromptReply.YES
        if reply == QMessageBox.No:
            return PromptReply.NO
        return PromptReply.CANCEL

    def inform(self, title: str, message: str) -> None:
        QMessageBox.information(self.parent, title, message)


class EditOpsMixin:
    if TYPE_CHECKING:
        def __getattr__(self, name: str) -> Any: ...

    # ---------- Edit helpers ----------
    def edit_undo(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.undo()

    def edit_redo(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.redo()

    def edit_cut(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.cut()

    def edit_copy(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.copy()

    def edit_paste(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.paste()

    def edit_select_all(self) -> None:
        editor = self.active_editor()
        if editor is not None:
            editor.selectAll()

    # ---------- Find / replace ----------
    def edit_find(self) -> None:
        if self.registry.is_empty():
            return
        history = list(reversed(self.search_engine.session.history))
        text, ok = QInputDialog.getItem(self, "Find", "Find what:", history, 0, True)
        if not ok:
            return
        default_button = QMessageBox.Yes if self.settings.get("search_case_sensitive", False) else QMessageBox.No
        reply = QMessageBox.question(
            self,
            "Find",
            "Match case?",
            QMessageBox.Yes | QMessageBox.No,
            default_button,
        )
        case_sensitive = reply == QMessageBox.Yes
        self.settings["search_case_sensitive"] = case_sensitive
        run_interactive_search(
            self.search_engine,
            text,
            case_sensitive,
            MessageBoxSearchPrompt(self),
            on_match=self._select_search_match,
        )
        self.settings["search_history"] = list(self.search_engine.session.history)

    def _select_search_match(self, result: SearchResult) -> None:
        handle = self.search_engine.session.handle
        editor = self.editor_for_handle(handle)
        if editor is None:
            return
        editor.select_range(result.start, result.end)

    def edit_replace(self) -> None:
        if self.registry.is_empty():
            return
        find_text, ok = QInputDialog.getText(self, "Find", "Find what:", QLineEdit.Normal, "")
        if not ok or not find_text:
            return
        replace_text, ok = QInputDialog.getText(self, "Replace", "Replace with:", QLineEdit.Normal, "")
        if not ok:
            return
        count = self.replace_engine.replace_all(find_text, replace_text)
        _LOGGER.info("Replace all find=%r count=%d", find_text, count)
        QMessageBox.information(self, "Replace", f"Replaced {count} occurrences of '{find_text}'.")

    # ---------- Auto-save ----------
    def toggle_autosave(self) -> None:
        armed = self.autosave.toggle()
        self.settings["autosave_enabled"] = armed
        if armed:
            message = f"Auto-save enabled. Documents will be saved every {self.autosave.interval_minutes} minutes."
        else:
            message = "Auto-save disabled."
        QMessageBox.information(self, "Auto-Save", message)

    def set_autosave_interval(self) -> None:
        minutes, ok = QInputDialog.getInt(
            self,
            "Auto-Save Interval",
            "Set auto-save interval (in minutes):",
            self.autosave.interval_minutes,
            MIN_AUTOSAVE_INTERVAL_MIN,
            MAX_AUTOSAVE_INTERVAL_MIN,
            1,
        )
        if not ok:
            return
        applied = self.autosave.set_interval(minutes)
        self.settings["autosave_interval_min"] = applied
        QMessageBox.information(self, "Auto-Save", f"Auto-save interval set to {applied} minutes.")
