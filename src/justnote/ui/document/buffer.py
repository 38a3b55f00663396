from __future__ import annotations

import itertools
from contextlib import contextmanager
from typing import Iterable, Iterator

from PySide6.QtGui import QTextCharFormat, QTextCursor, QTextDocument

from ...logging_utils import get_logger

_LOGGER = get_logger(__name__)


def _has_astral(text: str) -> bool:
    return any(ord(ch) > 0xFFFF for ch in text)


def to_document_positions(text: str, indices: Iterable[int]) -> list[int]:
    """Map string indices of ``text`` to QTextDocument (UTF-16) positions.

    Characters outside the BMP occupy two document positions but one index in a
    Python string, so every astral character before an index shifts it by one.
    """
    wanted = [max(0, min(int(index), len(text))) for index in indices]
    if not _has_astral(text):
        return wanted
    out = [0] * len(wanted)
    scanned = 0
    extra = 0
    for slot in sorted(range(len(wanted)), key=wanted.__getitem__):
        target = wanted[slot]
        extra += sum(1 for ch in text[scanned:target] if ord(ch) > 0xFFFF)
        scanned = target
        out[slot] = target + extra
    return out


def count_words(text: str) -> int:
    return len(text.split())


class DocumentBuffer:
    """Text plus per-character formatting for one tab.

    Engine offsets are indices into :meth:`text`. The formatting methods take
    document positions (see :func:`to_document_positions`).
    """

    def __init__(self, handle: int, text: str = "") -> None:
        self.handle = handle
        self.document = QTextDocument()
        self.document.setPlainText(text)
        self.document.setModified(False)

    def __repr__(self) -> str:
        return f"DocumentBuffer(handle={self.handle}, length={len(self.text())})"

    def text(self) -> str:
        return self.document.toPlainText()

    def set_text(self, text: str) -> None:
        self.document.setPlainText(text)

    def is_modified(self) -> bool:
        return bool(self.document.isModified())

    def set_modified(self, value: bool) -> None:
        self.document.setModified(bool(value))

    def word_count(self) -> int:
        return count_words(self.text())

    def max_position(self) -> int:
        return max(0, self.document.characterCount() - 1)

    def capture_char_format(self, position: int) -> QTextCharFormat:
        cursor = QTextCursor(self.document)
        # QTextCursor.charFormat() reports the character before the cursor.
        cursor.setPosition(max(0, min(position + 1, self.max_position())))
        return QTextCharFormat(cursor.charFormat())

    def apply_char_format(
        self,
        start: int,
        end: int,
        fmt: QTextCharFormat,
        cursor: QTextCursor | None = None,
    ) -> None:
        if end <= start:
            return
        target = cursor if cursor is not None else QTextCursor(self.document)
        limit = self.max_position()
        target.setPosition(max(0, min(start, limit)))
        target.setPosition(max(0, min(end, limit)), QTextCursor.KeepAnchor)
        target.setCharFormat(fmt)

    @contextmanager
    def edit_block(self) -> Iterator[QTextCursor]:
        cursor = QTextCursor(self.document)
        cursor.beginEditBlock()
        try:
            yield cursor
        finally:
            cursor.endEditBlock()

    def selection_cursor(self, start: int, end: int) -> QTextCursor:
        doc_start, doc_end = to_document_positions(self.text(), (start, end))
        cursor = QTextCursor(self.document)
        cursor.setPosition(doc_start)
        cursor.setPosition(doc_end, QTextCursor.KeepAnchor)
        return cursor


class BufferArena:
    """Owns live buffers keyed by handles that are never handed out twice."""

    def __init__(self) -> None:
        self._buffers: dict[int, DocumentBuffer] = {}
        self._handles = itertools.count(1)

    def __contains__(self, handle: object) -> bool:
        return handle in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def allocate(self, text: str = "") -> DocumentBuffer:
        handle = next(self._handles)
        buffer = DocumentBuffer(handle, text)
        self._buffers[handle] = buffer
        _LOGGER.debug("BufferArena.allocate handle=%d chars=%d live=%d", handle, len(text), len(self._buffers))
        return buffer

    def get(self, handle: int) -> DocumentBuffer:
        return self._buffers[handle]

    def find(self, handle: int | None) -> DocumentBuffer | None:
        if handle is None:
            return None
        return self._buffers.get(handle)

    def release(self, handle: int) -> bool:
        buffer = self._buffers.pop(handle, None)
        if buffer is None:
            return False
        _LOGGER.debug("BufferArena.release handle=%d live=%d", handle, len(self._buffers))
        return True
