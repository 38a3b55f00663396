from __future__ import annotations

from PySide6.QtGui import QTextCursor

from ...logging_utils import get_logger
from .buffer import DocumentBuffer, to_document_positions
from .tab_registry import TabRegistry

_LOGGER = get_logger(__name__)


def find_occurrences(text: str, find_text: str) -> list[tuple[int, int]]:
    """Non-overlapping ``(start, end)`` spans of ``find_text``, left to right."""
    if not find_text:
        return []
    spans: list[tuple[int, int]] = []
    width = len(find_text)
    found = text.find(find_text)
    while found >= 0:
        spans.append((found, found + width))
        found = text.find(find_text, found + width)
    return spans


class ReplaceEngine:
    def __init__(self, registry: TabRegistry) -> None:
        self.registry = registry

    def replace_all(
        self,
        find_text: str,
        replace_text: str,
        buffer: DocumentBuffer | None = None,
    ) -> int:
        """Replace every occurrence in one undoable edit block; return the count.

        Matches come from a single left-to-right pass over the original text,
        so inserted text is never scanned again. Each replacement takes the
        character format found at the start of the span it replaces.
        """
        target = buffer if buffer is not None else self.registry.active_buffer()
        if target is None or not find_text:
            return 0
        text = target.text()
        spans = find_occurrences(text, find_text)
        if not spans:
            _LOGGER.debug("ReplaceEngine.replace_all no match find=%r handle=%d", find_text, target.handle)
            return 0
        flat = [offset for span in spans for offset in span]
        positions = to_document_positions(text, flat)
        doc_spans = list(zip(positions[0::2], positions[1::2]))
        with target.edit_block() as cursor:
            # Back to front keeps the document positions of earlier spans valid.
            for doc_start, doc_end in reversed(doc_spans):
                fmt = target.capture_char_format(doc_start)
                cursor.setPosition(doc_start)
                cursor.setPosition(doc_end, QTextCursor.KeepAnchor)
                cursor.insertText(replace_text)
                target.apply_char_format(doc_start, cursor.position(), fmt, cursor)
        _LOGGER.debug(
            "ReplaceEngine.replace_all handle=%d find=%r count=%d",
            target.handle,
            find_text,
            len(spans),
        )
        return len(spans)
