from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from ...logging_utils import get_logger
from .buffer import DocumentBuffer
from .tab_registry import TabRegistry

_LOGGER = get_logger(__name__)

DEFAULT_HISTORY_MAX = 25


class SearchState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class SearchStatus(Enum):
    MATCH_FOUND = "match_found"
    NOT_FOUND = "not_found"
    NO_MORE_OCCURRENCES = "no_more_occurrences"
    NO_PREVIOUS_OCCURRENCES = "no_previous_occurrences"


@dataclass(frozen=True)
class SearchResult:
    status: SearchStatus
    start: int = -1
    end: int = -1

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.MATCH_FOUND


def _fold_char(ch: str) -> str:
    low = ch.lower()
    return low if len(low) == 1 else ch


def fold_case(text: str) -> str:
    """Lower-case ``text`` without changing its length, so offsets stay valid."""
    if text.isascii():
        return text.lower()
    return "".join(_fold_char(ch) for ch in text)


@dataclass
class SearchSession:
    query: str = ""
    case_sensitive: bool = False
    handle: int | None = None
    match_start: int = -1
    match_end: int = -1
    state: SearchState = SearchState.IDLE
    history: list[str] = field(default_factory=list)
    history_max: int = DEFAULT_HISTORY_MAX

    @property
    def cursor_position(self) -> int:
        return max(0, self.match_end)

    def remember_query(self, query: str) -> None:
        if not query:
            return
        if self.history and self.history[-1] == query:
            return
        self.history.append(query)
        limit = max(1, int(self.history_max))
        if len(self.history) > limit:
            self.history = self.history[-limit:]

    def reset(self) -> None:
        self.match_start = -1
        self.match_end = -1
        self.state = SearchState.IDLE


class SearchEngine:
    """Resumable substring search over the active tab's buffer.

    ``start_search`` binds the session to the active buffer; ``find_next`` and
    ``find_previous`` step through non-overlapping matches without wrapping.
    """

    def __init__(self, registry: TabRegistry, session: SearchSession | None = None) -> None:
        self.registry = registry
        self.session = session if session is not None else SearchSession()

    @property
    def state(self) -> SearchState:
        return self.session.state

    def bound_buffer(self) -> DocumentBuffer | None:
        return self.registry.buffer(self.session.handle)

    def start_search(self, query: str, case_sensitive: bool = False) -> SearchResult:
        session = self.session
        session.query = query
        session.case_sensitive = bool(case_sensitive)
        session.remember_query(query)
        session.reset()
        session.handle = self.registry.active_tab()
        buffer = self.bound_buffer()
        if not query or buffer is None:
            _LOGGER.debug("SearchEngine.start_search nothing to scan query=%r handle=%s", query, session.handle)
            return SearchResult(SearchStatus.NOT_FOUND)
        haystack, needle = self._prepare(buffer.text())
        found = haystack.find(needle, 0)
        if found < 0:
            _LOGGER.debug("SearchEngine.start_search not found query=%r", query)
            return SearchResult(SearchStatus.NOT_FOUND)
        return self._accept(found)

    def find_next(self) -> SearchResult:
        buffer = self._scanning_buffer()
        if buffer is None:
            return SearchResult(SearchStatus.NO_MORE_OCCURRENCES)
        haystack, needle = self._prepare(buffer.text())
        found = haystack.find(needle, self.session.match_end)
        if found < 0:
            _LOGGER.debug("SearchEngine.find_next exhausted after=%d", self.session.match_end)
            return SearchResult(SearchStatus.NO_MORE_OCCURRENCES)
        return self._accept(found)

    def find_previous(self) -> SearchResult:
        buffer = self._scanning_buffer()
        if buffer is None:
            return SearchResult(SearchStatus.NO_PREVIOUS_OCCURRENCES)
        haystack, needle = self._prepare(buffer.text())
        found = haystack.rfind(needle, 0, self.session.match_start)
        if found < 0:
            _LOGGER.debug("SearchEngine.find_previous exhausted before=%d", self.session.match_start)
            return SearchResult(SearchStatus.NO_PREVIOUS_OCCURRENCES)
        return self._accept(found)

    def _scanning_buffer(self) -> DocumentBuffer | None:
        if self.session.state is not SearchState.SCANNING:
            return None
        buffer = self.bound_buffer()
        if buffer is None:
            _LOGGER.debug("SearchEngine stale handle=%s; session reset", self.session.handle)
            self.session.reset()
            self.session.handle = None
        return buffer

    def _prepare(self, text: str) -> tuple[str, str]:
        query = self.session.query
        if self.session.case_sensitive:
            return text, query
        return fold_case(text), fold_case(query)

    def _accept(self, start: int) -> SearchResult:
        session = self.session
        session.match_start = start
        session.match_end = start + len(session.query)
        session.state = SearchState.SCANNING
        return SearchResult(SearchStatus.MATCH_FOUND, session.match_start, session.match_end)


class PromptReply(Enum):
    YES = "yes"
    NO = "no"
    CANCEL = "cancel"


class SearchPrompt(Protocol):
    def confirm(self, title: str, question: str, allow_no: bool = True) -> PromptReply: ...

    def inform(self, title: str, message: str) -> None: ...


def run_interactive_search(
    engine: SearchEngine,
    query: str,
    case_sensitive: bool,
    prompt: SearchPrompt,
    on_match: Callable[[SearchResult], None] | None = None,
) -> SearchResult:
    """Drive ``engine`` with yes/no/cancel answers until the user stops or matches run out."""
    result = engine.start_search(query, case_sensitive)
    if not result.found:
        prompt.inform("Find", f'Cannot find "{query}"')
        return result
    if on_match is not None:
        on_match(result)
    while True:
        reply = prompt.confirm("Find Next", "Do you want to find the next occurrence?", allow_no=True)
        if reply is PromptReply.YES:
            step = engine.find_next()
            if not step.found:
                prompt.inform("Find Next", f'No more occurrences of "{query}"')
                return step
        elif reply is PromptReply.NO:
            reply = prompt.confirm("Find Previous", "Do you want to find the previous occurrence?", allow_no=False)
            if reply is not PromptReply.YES:
                return result
            step = engine.find_previous()
            if not step.found:
                prompt.inform("Find Previous", f'No previous occurrences of "{query}"')
                return step
        else:
            return result
        result = step
        if on_match is not None:
            on_match(result)
