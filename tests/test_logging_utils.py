import io
import logging
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from justnote.logging_utils import (
    clear_console_log_lines,
    configure_app_logging,
    get_console_log_lines,
    get_level_number,
    get_logger,
    normalize_log_level_name,
)


class LoggingUtilsTests(unittest.TestCase):
    def tearDown(self) -> None:
        clear_console_log_lines()

    def test_level_names_are_normalized(self) -> None:
        self.assertEqual(normalize_log_level_name(" debug "), "DEBUG")
        self.assertEqual(normalize_log_level_name("verbose"), "INFO")
        self.assertEqual(normalize_log_level_name(None, "warning"), "WARNING")
        self.assertEqual(get_level_number("error"), logging.ERROR)

    def test_configured_handler_captures_formatted_lines(self) -> None:
        stream = io.StringIO()
        self.assertEqual(configure_app_logging("debug", stream=stream), "DEBUG")
        configure_app_logging("debug", stream=stream)
        installed = [
            handler
            for handler in logging.getLogger().handlers
            if getattr(handler, "_justnote_console_handler", False)
        ]
        self.assertEqual(len(installed), 1)

        clear_console_log_lines()
        get_logger("justnote.tests").info("hello %s", "world")
        lines = get_console_log_lines()
        self.assertEqual(len(lines), 1)
        self.assertIn("[Info]", lines[0])
        self.assertIn("[justnote.tests] hello world", lines[0])


if __name__ == "__main__":
    unittest.main()
