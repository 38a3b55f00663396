import json
import shutil
import sys
import time
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from justnote.app_settings import (
    build_default_settings,
    load_settings,
    migrate_settings,
    save_settings,
)


class SettingsMigrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = ROOT / "tests_tmp" / f"settings_{time.time_ns()}"
        self.tmp.mkdir(parents=True, exist_ok=True)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_fills_defaults_and_sets_schema(self) -> None:
        migrated = migrate_settings({"autosave_enabled": True})
        self.assertEqual(migrated["settings_schema_version"], 1)
        self.assertTrue(migrated["autosave_enabled"])
        self.assertEqual(migrated["autosave_interval_min"], 5)
        self.assertEqual(migrated["search_history"], [])

    def test_invalid_values_are_clamped_or_defaulted(self) -> None:
        source = {
            "autosave_interval_min": 999,
            "autosave_enabled": "yes",
            "log_level": "chatty",
            "search_history_max": 0,
            "restore_session": "off",
        }
        migrated = migrate_settings(source)
        self.assertEqual(migrated["autosave_interval_min"], 60)
        self.assertTrue(migrated["autosave_enabled"])
        self.assertEqual(migrated["log_level"], "INFO")
        self.assertEqual(migrated["search_history_max"], 1)
        self.assertFalse(migrated["restore_session"])
        self.assertEqual(migrate_settings({"autosave_interval_min": "abc"})["autosave_interval_min"], 5)

    def test_search_history_is_filtered_and_capped(self) -> None:
        source = {"search_history": ["a", "", 3, "b", "c"], "search_history_max": 2}
        migrated = migrate_settings(source)
        self.assertEqual(migrated["search_history"], ["b", "c"])
        self.assertEqual(migrate_settings({"search_history": "oops"})["search_history"], [])

    def test_unknown_keys_preserved(self) -> None:
        migrated = migrate_settings({"my_custom_flag": "x"})
        self.assertEqual(migrated["my_custom_flag"], "x")

    def test_save_then_load_round_trip(self) -> None:
        path = self.tmp / "settings.json"
        settings = build_default_settings()
        settings["search_history"] = ["needle"]
        settings["autosave_interval_min"] = 12
        save_settings(path, settings)
        loaded = load_settings(path)
        self.assertEqual(loaded["search_history"], ["needle"])
        self.assertEqual(loaded["autosave_interval_min"], 12)
        self.assertFalse(path.with_suffix(".json.tmp").exists())

    def test_missing_or_corrupt_file_gives_defaults(self) -> None:
        path = self.tmp / "settings.json"
        self.assertEqual(load_settings(path), build_default_settings())
        path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_settings(path), build_default_settings())
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        self.assertEqual(load_settings(path), build_default_settings())


if __name__ == "__main__":
    unittest.main()
