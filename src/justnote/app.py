import argparse
import sys
import traceback
from typing import Optional, Sequence

from PySide6.QtCore import QtMsgType, qInstallMessageHandler
from PySide6.QtWidgets import QApplication

from .app_settings import get_settings_file_path, load_settings
from .logging_utils import LOG_LEVEL_OPTIONS, configure_app_logging, get_logger
from .ui.main_window import JustNote

LOGGER = get_logger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="justnote", add_help=True)
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_OPTIONS,
        type=str.upper,
        default=None,
        help="Override the log level stored in settings.",
    )
    parser.add_argument(
        "--no-restore",
        action="store_true",
        help="Start with a single empty tab instead of the previous session.",
    )
    parser.add_argument("files", nargs="*", help="Files to open in new tabs.")
    return parser


def _install_qt_message_handler() -> None:
    qt_logger = get_logger("justnote.qt")

    def _qt_message_handler(mode, _context, message) -> None:
        if mode in (QtMsgType.QtCriticalMsg, QtMsgType.QtFatalMsg):
            qt_logger.error("%s", message)
        elif mode == QtMsgType.QtWarningMsg:
            qt_logger.warning("%s", message)
        else:
            qt_logger.debug("%s", message)

    qInstallMessageHandler(_qt_message_handler)


def main(existing_app: Optional[QApplication] = None, argv: Optional[Sequence[str]] = None) -> JustNote:
    args, qt_args = build_arg_parser().parse_known_args(list(argv) if argv is not None else sys.argv[1:])
    settings = load_settings(get_settings_file_path())
    level = configure_app_logging(args.log_level or settings.get("log_level", "INFO"))
    _install_qt_message_handler()

    owns_app = existing_app is None
    app = existing_app or QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("JustNote")
    LOGGER.info("App main() starting (owns_app=%s, log_level=%s)", owns_app, level)

    window = JustNote(restore_session=False if args.no_restore else None)
    for path in args.files:
        window.open_path(path)
    LOGGER.info("Main window instance created")

    def _global_exception_hook(exc_type, exc_value, exc_tb) -> None:
        error_text = "".join(traceback.format_exception(exc_type, exc_value, exc_tb)).strip()
        LOGGER.error("Unhandled exception routed to global hook\n%s", error_text)
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _global_exception_hook

    if owns_app:
        window.show()
        LOGGER.info("Window shown by app.main() (standalone mode)")
    return window


def run(argv: Optional[Sequence[str]] = None) -> int:
    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = main(existing_app=app, argv=argv)
    window.show()
    return app.exec()
