from __future__ import annotations

from pathlib import Path

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QLabel, QMainWindow, QTabWidget

from justnote.app_settings import (
    get_session_file_path,
    get_settings_file_path,
    load_settings,
    save_settings,
)
from justnote.logging_utils import get_logger
from justnote.ui.autosave import AutoSaveScheduler
from justnote.ui.debug_logs_dialog import DebugLogsDialog
from justnote.ui.document import (
    FileError,
    ReplaceEngine,
    SearchEngine,
    SearchSession,
    TabRegistry,
)
from justnote.ui.editor_tab import EditorTab
from justnote.ui.session_store import SessionSnapshot, SessionStore

from .edit_ops import EditOpsMixin
from .file_ops import FileOpsMixin

_LOGGER = get_logger(__name__)

APP_NAME = "JustNote"


class JustNote(FileOpsMixin, EditOpsMixin, QMainWindow):
    def __init__(
        self,
        settings_path: Path | None = None,
        session_path: Path | None = None,
        restore_session: bool | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"Untitled - {APP_NAME}")
        self.resize(800, 600)

        self.settings_file = Path(settings_path) if settings_path is not None else get_settings_file_path()
        self.settings = load_settings(self.settings_file)
        _LOGGER.info("[Startup] Settings loaded from: %s", self.settings_file)

        self.session_store = SessionStore(session_path if session_path is not None else get_session_file_path())
        if restore_session is None:
            restore_session = bool(self.settings.get("restore_session", True))
        if restore_session:
            self.registry: TabRegistry = self.session_store.restore(parent=self)
        else:
            self.registry = SessionSnapshot().to_registry(parent=self)

        self.search_engine = SearchEngine(
            self.registry,
            SearchSession(
                case_sensitive=bool(self.settings.get("search_case_sensitive", False)),
                history=list(self.settings.get("search_history", [])),
                history_max=int(self.settings.get("search_history_max", 25)),
            ),
        )
        self.replace_engine = ReplaceEngine(self.registry)
        self.autosave = AutoSaveScheduler(
            self.registry,
            interval_minutes=int(self.settings.get("autosave_interval_min", 5)),
            parent=self,
        )

        self.tab_widget = QTabWidget(self)
        self.tab_widget.setTabsClosable(True)
        self.tab_widget.setMovable(True)
        self.setCentralWidget(self.tab_widget)

        self.debug_logs_dialog: DebugLogsDialog | None = None

        self.word_count_label = QLabel("Words: 0", self)
        self.autosave_status_label = QLabel("", self)
        self.statusBar().addPermanentWidget(self.autosave_status_label)
        self.statusBar().addPermanentWidget(self.word_count_label)

        self._build_menus()
        self._populate_tabs()
        self._connect_signals()
        self.autosave.set_enabled(bool(self.settings.get("autosave_enabled", False)))
        self._refresh_autosave_label()
        self.update_window_title()
        self.update_status_bar()
        _LOGGER.info("[Startup] Main window ready tabs=%d", self.registry.count())

    # ---------- Setup ----------
    def _add_action(self, menu, text: str, slot, shortcut=None) -> QAction:
        action = QAction(text, self)
        if shortcut is not None:
            action.setShortcut(QKeySequence(shortcut))
        action.triggered.connect(lambda _checked=False: slot())
        menu.addAction(action)
        return action

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        self.new_action = self._add_action(file_menu, "&New", self.file_new, QKeySequence.New)
        self.open_action = self._add_action(file_menu, "&Open...", self.file_open, QKeySequence.Open)
        self.save_action = self._add_action(file_menu, "&Save", self.file_save, QKeySequence.Save)
        self.save_as_action = self._add_action(file_menu, "Save &As...", self.file_save_as, QKeySequence.SaveAs)
        self.close_tab_action = self._add_action(file_menu, "&Close Tab", self.close_active_tab, QKeySequence.Close)
        file_menu.addSeparator()
        self.exit_action = self._add_action(file_menu, "E&xit", self.file_exit, QKeySequence.Quit)

        edit_menu = self.menuBar().addMenu("&Edit")
        self.undo_action = self._add_action(edit_menu, "&Undo", self.edit_undo, QKeySequence.Undo)
        self.redo_action = self._add_action(edit_menu, "&Redo", self.edit_redo, QKeySequence.Redo)
        edit_menu.addSeparator()
        self.cut_action = self._add_action(edit_menu, "Cu&t", self.edit_cut, QKeySequence.Cut)
        self.copy_action = self._add_action(edit_menu, "&Copy", self.edit_copy, QKeySequence.Copy)
        self.paste_action = self._add_action(edit_menu, "&Paste", self.edit_paste, QKeySequence.Paste)
        self.select_all_action = self._add_action(edit_menu, "Select &All", self.edit_select_all, QKeySequence.SelectAll)
        edit_menu.addSeparator()
        self.find_action = self._add_action(edit_menu, "&Find...", self.edit_find, QKeySequence.Find)
        self.replace_action = self._add_action(edit_menu, "R&eplace...", self.edit_replace, QKeySequence.Replace)

        options_menu = self.menuBar().addMenu("&Options")
        self.autosave_action = self._add_action(options_menu, "&Auto Save", self.toggle_autosave)
        self.autosave_action.setCheckable(True)
        self.autosave_interval_action = self._add_action(options_menu, "Save &Interval...", self.set_autosave_interval)
        options_menu.addSeparator()
        self.debug_logs_action = self._add_action(options_menu, "Debug &Logs...", self.show_debug_logs)

    def _populate_tabs(self) -> None:
        self.tab_widget.blockSignals(True)
        try:
            for handle in self.registry.handles():
                self._insert_editor(handle, self.tab_widget.count())
            if self.registry.active_index >= 0:
                self.tab_widget.setCurrentIndex(self.registry.active_index)
        finally:
            self.tab_widget.blockSignals(False)

    def _connect_signals(self) -> None:
        self.registry.tab_added.connect(self._on_tab_added)
        self.registry.tab_removed.connect(self._on_tab_removed)
        self.registry.active_changed.connect(self._on_active_changed)
        self.registry.label_changed.connect(self._on_label_changed)
        self.tab_widget.currentChanged.connect(self._on_current_tab_changed)
        self.tab_widget.tabCloseRequested.connect(self.close_tab_at)
        self.tab_widget.tabBar().tabMoved.connect(self.registry.move_tab)
        self.autosave.state_changed.connect(lambda _armed: self._refresh_autosave_label())
        self.autosave.saved.connect(self._on_autosaved)
        self.autosave.save_failed.connect(self._on_autosave_failed)

    # ---------- Registry <-> view ----------
    def _insert_editor(self, handle: int, index: int) -> EditorTab | None:
        buffer = self.registry.buffer(handle)
        entry = self.registry.entry(handle)
        if buffer is None or entry is None:
            return None
        editor = EditorTab(buffer, self.tab_widget)
        editor.textChanged.connect(self.update_status_bar)
        buffer.document.modificationChanged.connect(lambda _changed: self.update_window_title())
        self.tab_widget.insertTab(index, editor, entry.display_label)
        return editor

    def _on_tab_added(self, handle: int, index: int) -> None:
        self.tab_widget.blockSignals(True)
        try:
            self._insert_editor(handle, index)
        finally:
            self.tab_widget.blockSignals(False)

    def _on_tab_removed(self, handle: int, index: int) -> None:
        editor = self.tab_widget.widget(index)
        self.tab_widget.blockSignals(True)
        try:
            self.tab_widget.removeTab(index)
        finally:
            self.tab_widget.blockSignals(False)
        if editor is not None:
            editor.deleteLater()
        _LOGGER.debug("Tab view removed handle=%d index=%d", handle, index)
        self.update_window_title()
        self.update_status_bar()

    def _on_active_changed(self, index: int) -> None:
        if 0 <= index < self.tab_widget.count() and self.tab_widget.currentIndex() != index:
            self.tab_widget.setCurrentIndex(index)
        self.update_window_title()
        self.update_status_bar()

    def _on_current_tab_changed(self, index: int) -> None:
        self.registry.set_active_index(index)

    def _on_label_changed(self, handle: int, label: str) -> None:
        editor = self.editor_for_handle(handle)
        if editor is not None:
            self.tab_widget.setTabText(self.tab_widget.indexOf(editor), label)
        self.update_window_title()

    def active_editor(self) -> EditorTab | None:
        return self.editor_for_handle(self.registry.active_tab())

    def editor_for_handle(self, handle: int | None) -> EditorTab | None:
        if handle is None:
            return None
        for index in range(self.tab_widget.count()):
            widget = self.tab_widget.widget(index)
            if isinstance(widget, EditorTab) and widget.handle == handle:
                return widget
        return None

    # ---------- Status ----------
    def update_window_title(self) -> None:
        entry = self.registry.active_entry()
        if entry is None:
            self.setWindowTitle(APP_NAME)
            return
        buffer = self.registry.buffer(entry.handle)
        marker = "*" if buffer is not None and buffer.is_modified() else ""
        self.setWindowTitle(f"{entry.display_label}{marker} - {APP_NAME}")

    def update_status_bar(self) -> None:
        buffer = self.registry.active_buffer()
        words = buffer.word_count() if buffer is not None else 0
        self.word_count_label.setText(f"Words: {words}")

    def _refresh_autosave_label(self) -> None:
        armed = self.autosave.is_armed()
        self.autosave_action.setChecked(armed)
        if armed:
            self.autosave_status_label.setText(f"Auto-save: every {self.autosave.interval_minutes} min")
        else:
            self.autosave_status_label.setText("Auto-save: off")

    def _on_autosaved(self, path: str) -> None:
        self.statusBar().showMessage(f"Autosaved {Path(path).name}", 3000)
        self.update_window_title()

    def _on_autosave_failed(self, message: str) -> None:
        self.statusBar().showMessage(f"Auto-save failed: {message}", 5000)

    # ---------- Diagnostics ----------
    def show_debug_logs(self) -> DebugLogsDialog:
        if self.debug_logs_dialog is None:
            self.debug_logs_dialog = DebugLogsDialog(self)
        self.debug_logs_dialog.refresh()
        self.debug_logs_dialog.show()
        self.debug_logs_dialog.raise_()
        return self.debug_logs_dialog

    # ---------- Shutdown ----------
    def shutdown(self) -> None:
        self.autosave.set_enabled(False)
        try:
            self.session_store.save(self.registry)
        except FileError as exc:
            _LOGGER.warning("Session snapshot not written path=%s error=%s", exc.path, exc.message)
        self.settings["search_history"] = list(self.search_engine.session.history)
        self.settings["autosave_interval_min"] = self.autosave.interval_minutes
        try:
            self.settings = save_settings(self.settings_file, self.settings)
        except OSError:
            _LOGGER.exception("Settings not written path=%s", self.settings_file)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.shutdown()
        super().closeEvent(event)
