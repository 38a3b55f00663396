import io
import os
import shutil
import sys
import time
import unittest
from pathlib import Path
from unittest import mock

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PySide6.QtWidgets import QApplication, QInputDialog, QMessageBox

from justnote.app import build_arg_parser, main
from justnote.app_settings import load_settings
from justnote.logging_utils import clear_console_log_lines, configure_app_logging, get_logger
from justnote.ui.main_window import JustNote


class MainWindowTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self) -> None:
        self.tmp = ROOT / "tests_tmp" / f"window_{time.time_ns()}"
        self.tmp.mkdir(parents=True, exist_ok=True)
        self.settings_path = self.tmp / "settings.json"
        self.session_path = self.tmp / "session.ini"
        self._windows: list[JustNote] = []

    def tearDown(self) -> None:
        for window in self._windows:
            window.autosave.set_enabled(False)
            window.deleteLater()
        self.app.processEvents()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _window(self, restore: bool | None = True) -> JustNote:
        window = JustNote(
            settings_path=self.settings_path,
            session_path=self.session_path,
            restore_session=restore,
        )
        self._windows.append(window)
        return window

    def test_fresh_start_has_one_untitled_tab(self) -> None:
        window = self._window()
        self.assertEqual(window.tab_widget.count(), 1)
        self.assertEqual(window.registry.count(), 1)
        self.assertEqual(window.windowTitle(), "Untitled - JustNote")
        self.assertEqual(window.word_count_label.text(), "Words: 0")
        self.assertEqual(window.autosave_status_label.text(), "Auto-save: off")

    def test_new_and_close_keep_view_in_sync(self) -> None:
        window = self._window()
        window.file_new()
        window.file_new()
        self.assertEqual(window.tab_widget.count(), 3)
        self.assertEqual(window.tab_widget.currentIndex(), 2)
        self.assertEqual(window.registry.active_index, 2)

        window.tab_widget.setCurrentIndex(0)
        self.assertEqual(window.registry.active_index, 0)

        window.close_tab_at(0)
        self.assertEqual(window.tab_widget.count(), 2)
        self.assertEqual(window.tab_widget.currentIndex(), window.registry.active_index)
        self.assertEqual(window.active_editor().handle, window.registry.active_tab())

    def test_closing_last_tab_leaves_empty_window(self) -> None:
        window = self._window()
        window.close_active_tab()
        self.assertEqual(window.tab_widget.count(), 0)
        self.assertTrue(window.registry.is_empty())
        self.assertIsNone(window.active_editor())
        self.assertFalse(window.file_save())
        self.assertEqual(window.windowTitle(), "JustNote")

    def test_editor_shows_buffer_text_and_counts_words(self) -> None:
        window = self._window()
        buffer = window.registry.active_buffer()
        buffer.set_text("three little words")
        self.assertEqual(window.active_editor().toPlainText(), "three little words")
        window.update_status_bar()
        self.assertEqual(window.word_count_label.text(), "Words: 3")

    def test_open_path_adds_named_tab(self) -> None:
        path = self.tmp / "todo.txt"
        path.write_text("milk", encoding="utf-8")
        window = self._window()
        self.assertTrue(window.open_path(str(path)))
        self.assertEqual(window.tab_widget.count(), 2)
        self.assertEqual(window.tab_widget.tabText(1), "todo.txt")
        self.assertEqual(window.windowTitle(), "todo.txt - JustNote")

    def test_shutdown_persists_session_and_settings(self) -> None:
        window = self._window()
        window.registry.active_buffer().set_text("kept across restarts")
        window.file_new()
        window.search_engine.start_search("kept")
        window.autosave.set_interval(9)
        window.shutdown()

        self.assertTrue(self.session_path.exists())
        settings = load_settings(self.settings_path)
        self.assertEqual(settings["autosave_interval_min"], 9)
        self.assertEqual(settings["search_history"], ["kept"])

        restored = self._window()
        self.assertEqual(restored.tab_widget.count(), 2)
        self.assertEqual(restored.registry.active_index, 1)
        first = restored.registry.buffer(restored.registry.handles()[0])
        self.assertEqual(first.text(), "kept across restarts")
        self.assertEqual(restored.autosave.interval_minutes, 9)
        self.assertEqual(restored.search_engine.session.history, ["kept"])

    def test_restore_can_be_skipped(self) -> None:
        window = self._window()
        window.file_new()
        window.shutdown()
        fresh = self._window(restore=False)
        self.assertEqual(fresh.tab_widget.count(), 1)

    def test_dragging_tab_reorders_registry(self) -> None:
        window = self._window()
        window.file_new()
        window.file_new()
        before = window.registry.handles()
        self.assertEqual(window.registry.active_tab(), before[2])

        window.tab_widget.tabBar().moveTab(0, 2)

        view_order = [window.tab_widget.widget(i).handle for i in range(window.tab_widget.count())]
        self.assertEqual(view_order, [before[1], before[2], before[0]])
        self.assertEqual(window.registry.handles(), view_order)
        self.assertEqual(window.registry.active_tab(), window.tab_widget.currentWidget().handle)
        self.assertEqual(window.registry.active_index, window.tab_widget.currentIndex())

    def test_find_prompt_defaults_to_stored_case_choice(self) -> None:
        window = self._window()
        window.registry.active_buffer().set_text("Needle in a haystack")
        calls: list[tuple] = []

        def _question(*args):
            calls.append(args)
            return QMessageBox.No

        window.settings["search_case_sensitive"] = True
        with mock.patch.object(QInputDialog, "getItem", return_value=("absent", True)), mock.patch.object(
            QMessageBox, "question", side_effect=_question
        ), mock.patch.object(QMessageBox, "information"):
            window.edit_find()
            self.assertEqual(calls[0][4], QMessageBox.Yes)
            self.assertFalse(window.settings["search_case_sensitive"])

            window.edit_find()
            self.assertEqual(calls[1][4], QMessageBox.No)

    def test_debug_logs_dialog_shows_captured_lines(self) -> None:
        configure_app_logging("INFO", stream=io.StringIO())
        clear_console_log_lines()
        get_logger("justnote.tests").info("visible in dialog")
        window = self._window()
        dialog = window.show_debug_logs()
        self.assertIn("visible in dialog", dialog.logs_view.toPlainText())
        self.assertIs(window.show_debug_logs(), dialog)

        dialog.clear_button.click()
        self.assertEqual(dialog.logs_view.toPlainText(), "")
        dialog.refresh()
        self.assertEqual(dialog.logs_view.toPlainText(), "")
        dialog.close()

    def test_arg_parser_accepts_files_and_flags(self) -> None:
        args = build_arg_parser().parse_args(["--log-level", "debug", "--no-restore", "a.txt", "b.txt"])
        self.assertEqual(args.log_level, "DEBUG")
        self.assertTrue(args.no_restore)
        self.assertEqual(args.files, ["a.txt", "b.txt"])

    def test_main_opens_files_from_command_line(self) -> None:
        path = self.tmp / "cli.txt"
        path.write_text("from argv", encoding="utf-8")
        previous_hook = sys.excepthook
        try:
            with mock.patch.dict(os.environ, {"JUSTNOTE_HOME": str(self.tmp / "home")}):
                window = main(existing_app=self.app, argv=["--no-restore", str(path)])
            self._windows.append(window)
        finally:
            sys.excepthook = previous_hook
        self.assertEqual(window.tab_widget.count(), 2)
        self.assertEqual(window.registry.active_buffer().text(), "from argv")
        self.assertFalse(window.isVisible())


if __name__ == "__main__":
    unittest.main()
