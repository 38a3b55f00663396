from PySide6.QtWidgets import QTextEdit

from .document import DocumentBuffer


class EditorTab(QTextEdit):
    """View onto one tab's buffer. The buffer keeps owning the document."""

    def __init__(self, buffer: DocumentBuffer, parent=None) -> None:
        super().__init__(parent)
        self.buffer = buffer
        self.handle = buffer.handle
        self.setAcceptRichText(True)
        self.setDocument(buffer.document)

    def select_range(self, start: int, end: int) -> None:
        self.setTextCursor(self.buffer.selection_cursor(start, end))
        self.ensureCursorVisible()
