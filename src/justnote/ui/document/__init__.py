"""Tabs, buffers and the search/replace engines that operate on them."""

from .buffer import BufferArena, DocumentBuffer, count_words, to_document_positions
from .errors import (
    DocumentError,
    FileError,
    FileUnreadableError,
    FileUnwritableError,
    NoActiveTabError,
    NoAssociatedFileError,
    SessionCorruptError,
)
from .file_system import FileSystem, LocalFileSystem
from .replace_engine import ReplaceEngine, find_occurrences
from .search_engine import (
    PromptReply,
    SearchEngine,
    SearchPrompt,
    SearchResult,
    SearchSession,
    SearchState,
    SearchStatus,
    fold_case,
    run_interactive_search,
)
from .tab_registry import UNTITLED_LABEL, TabEntry, TabRegistry, display_label_for

__all__ = [
    "BufferArena",
    "DocumentBuffer",
    "count_words",
    "to_document_positions",
    "DocumentError",
    "FileError",
    "FileUnreadableError",
    "FileUnwritableError",
    "NoActiveTabError",
    "NoAssociatedFileError",
    "SessionCorruptError",
    "FileSystem",
    "LocalFileSystem",
    "ReplaceEngine",
    "find_occurrences",
    "PromptReply",
    "SearchEngine",
    "SearchPrompt",
    "SearchResult",
    "SearchSession",
    "SearchState",
    "SearchStatus",
    "fold_case",
    "run_interactive_search",
    "UNTITLED_LABEL",
    "TabEntry",
    "TabRegistry",
    "display_label_for",
]
