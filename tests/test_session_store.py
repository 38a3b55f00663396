import os
import shutil
import sys
import time
import unittest
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PySide6.QtGui import QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QApplication

from justnote.ui.document import SessionCorruptError, TabRegistry
from justnote.ui.session_store import SessionSnapshot, SessionStore, SessionTab


class SessionStoreTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self) -> None:
        self.tmp = ROOT / "tests_tmp" / f"session_{time.time_ns()}"
        self.tmp.mkdir(parents=True, exist_ok=True)
        self.store = SessionStore(self.tmp / "session.ini")

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_round_trip_preserves_tabs_paths_and_active_index(self) -> None:
        registry = TabRegistry()
        registry.create_tab("first", file_path="a.txt")
        registry.create_tab("second")
        registry.create_tab("third", file_path="b.txt")
        registry.set_active_index(1)
        self.store.save(registry)

        restored = self.store.restore()
        self.assertEqual(restored.count(), 3)
        self.assertEqual(restored.active_index, 1)
        self.assertEqual([entry.file_path for entry in restored.entries()], ["a.txt", None, "b.txt"])
        self.assertEqual(
            [restored.buffer(handle).text() for handle in restored.handles()],
            ["first", "second", "third"],
        )
        self.assertEqual(restored.active_entry().display_label, "Untitled")

    def test_content_with_separators_and_unicode_survives(self) -> None:
        content = "line one\nline, two; = three\néè 中文 \U0001F600"
        registry = TabRegistry()
        registry.create_tab(content)
        self.store.save(registry)
        snapshot = self.store.load()
        self.assertEqual(snapshot.tabs, [SessionTab(file_path="", content=content)])

    def test_missing_file_restores_one_fresh_tab(self) -> None:
        self.assertIsNone(self.store.load())
        registry = self.store.restore()
        self.assertEqual(registry.count(), 1)
        self.assertEqual(registry.active_index, 0)
        self.assertEqual(registry.active_buffer().text(), "")

    def test_zero_tab_snapshot_restores_one_fresh_tab(self) -> None:
        self.store.write(SessionSnapshot(tabs=[], current_tab=0))
        snapshot = self.store.load()
        self.assertEqual(snapshot.tabs, [])
        self.assertEqual(self.store.restore().count(), 1)

    def test_corrupt_counter_raises_and_restore_falls_back(self) -> None:
        self.store.path.write_text("[General]\ntabCount=abc\n", encoding="utf-8")
        with self.assertRaises(SessionCorruptError):
            self.store.load()
        registry = self.store.restore()
        self.assertEqual(registry.count(), 1)
        self.assertEqual(registry.active_buffer().text(), "")

    def test_missing_content_key_is_corrupt(self) -> None:
        self.store.path.write_text(
            "[General]\ntabCount=2\ncurrentTab=0\ntab0_filePath=\ntab0_content=kept\n",
            encoding="utf-8",
        )
        with self.assertRaises(SessionCorruptError):
            self.store.load()

    def test_out_of_range_current_tab_is_clamped(self) -> None:
        snapshot = SessionSnapshot(tabs=[SessionTab("", "a"), SessionTab("", "b")], current_tab=7)
        self.store.write(snapshot)
        registry = self.store.restore()
        self.assertEqual(registry.active_index, 1)

    def test_overwrite_drops_keys_from_larger_session(self) -> None:
        self.store.write(SessionSnapshot(tabs=[SessionTab("", str(i)) for i in range(4)], current_tab=3))
        self.store.write(SessionSnapshot(tabs=[SessionTab("only.txt", "x")], current_tab=0))
        text = self.store.path.read_text(encoding="utf-8")
        self.assertNotIn("tab3_content", text)
        snapshot = self.store.load()
        self.assertEqual(snapshot.tabs, [SessionTab("only.txt", "x")])

    def test_formatting_is_not_persisted(self) -> None:
        registry = TabRegistry()
        handle = registry.create_tab("styled")
        italic = QTextCharFormat()
        italic.setFontItalic(True)
        registry.buffer(handle).apply_char_format(0, 6, italic)
        self.store.save(registry)

        restored = self.store.restore()
        cursor = QTextCursor(restored.active_buffer().document)
        cursor.setPosition(1)
        self.assertFalse(cursor.charFormat().fontItalic())
        self.assertEqual(restored.active_buffer().text(), "styled")

    def test_clear_removes_file(self) -> None:
        registry = TabRegistry()
        registry.create_tab("x")
        self.store.save(registry)
        self.assertTrue(self.store.path.exists())
        self.store.clear()
        self.assertFalse(self.store.path.exists())


if __name__ == "__main__":
    unittest.main()
