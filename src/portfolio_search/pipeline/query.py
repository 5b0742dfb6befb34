"""Per-session query pipeline: debounce, run, and apply only current responses."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Protocol

import structlog

from portfolio_search.config import get_settings
from portfolio_search.errors import SearchError
from portfolio_search.models.search import SearchOptions, SearchResult
from portfolio_search.pipeline.telemetry import SearchTelemetry
from portfolio_search.search_utils import should_perform_search, validate_search_query

logger = structlog.get_logger()


class PipelineStatus(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"
    ERROR = "error"


@dataclass
class QueryState:
    """Query state owned by one interactive session."""

    query: str = ""
    last_executed_query: str = ""
    last_executed_at: float | None = None
    in_flight: bool = False
    results: list[SearchResult] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    error: str | None = None
    has_searched: bool = False
    search_time_ms: float = 0.0
    result_count: int = 0
    status: PipelineStatus = PipelineStatus.IDLE


class Searcher(Protocol):
    async def search(
        self, query: str, options: SearchOptions | None = None
    ) -> list[SearchResult]: ...

    async def suggest(self, query: str) -> list[str]: ...


class QueryPipeline:
    """
    State machine driving one search session.

    Transitions:
    - IDLE/any -> DEBOUNCING on input; each new input restarts the timer
    - DEBOUNCING -> IN_FLIGHT when the timer fires and the query is long
      enough, differs from the last executed query and the minimum interval
      has passed; otherwise the pipeline rests without searching
    - IN_FLIGHT -> SETTLED when the response for the current query arrives
    - IN_FLIGHT -> ERROR on failure, keeping the previous results
    - any -> IDLE on clear()

    A response is applied only if its query still equals the session query.
    Superseded requests are not cancelled, their responses are dropped.

    Must be driven from a running event loop.
    """

    def __init__(
        self,
        searcher: Searcher,
        debounce_ms: int | None = None,
        min_query_length: int | None = None,
        min_interval_ms: int | None = None,
        max_results: int | None = None,
        enable_suggestions: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        telemetry: SearchTelemetry | None = None,
    ):
        settings = get_settings()
        self.searcher = searcher
        self.debounce_ms = debounce_ms if debounce_ms is not None else settings.debounce_ms
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.min_query_length
        )
        self.min_interval_ms = (
            min_interval_ms if min_interval_ms is not None else settings.min_search_interval_ms
        )
        self.max_results = max_results if max_results is not None else settings.default_limit
        self.enable_suggestions = enable_suggestions
        self.telemetry = telemetry or SearchTelemetry()
        self._clock = clock
        self._sleep = sleep

        self.state = QueryState()
        self._debounce_task: asyncio.Task | None = None
        self._requests: dict[asyncio.Task, str] = {}

    # ===== Input events =====

    def on_query_change(self, text: str):
        """Record new input and restart the debounce timer."""
        self.state.query = text
        self._cancel_debounce()
        self.state.status = PipelineStatus.DEBOUNCING
        self._debounce_task = asyncio.ensure_future(self._debounce(text))

    def clear(self):
        """Reset the session and cancel any pending debounce."""
        self._cancel_debounce()
        self.state = QueryState()

    def result_clicked(self, result_id: str):
        result = next((r for r in self.state.results if r.id == result_id), None)
        self.telemetry.emit(
            "search_result_clicked",
            query=self.state.query,
            result_id=result_id,
            result_type=result.type if result else None,
        )

    def suggestion_clicked(self, text: str):
        """Report the click and search for the suggestion."""
        self.telemetry.emit(
            "search_suggestion_clicked",
            query=self.state.query,
            suggestion=text,
        )
        self.on_query_change(text)

    async def settle(self):
        """Wait until the pending debounce and every request in flight finish."""
        while self._debounce_task is not None or self._requests:
            pending = [t for t in [self._debounce_task, *self._requests] if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)
            if self._debounce_task is not None and self._debounce_task.done():
                self._debounce_task = None

    # ===== Transitions =====

    def _cancel_debounce(self):
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self, text: str):
        await self._sleep(self.debounce_ms / 1000)
        self._debounce_task = None
        self._fire(text)

    def _fire(self, text: str):
        state = self.state

        if not text.strip():
            state.results = []
            state.suggestions = []
            state.error = None
            state.has_searched = False
            state.search_time_ms = 0.0
            state.result_count = 0
            state.status = PipelineStatus.IDLE
            return

        if len(text.strip()) < self.min_query_length:
            state.error = None
            state.status = self._resting_status()
            return

        validation = validate_search_query(text, min_length=self.min_query_length)
        if not validation.is_valid:
            state.error = validation.error
            state.status = PipelineStatus.ERROR
            return
        state.error = None

        if not should_perform_search(
            text,
            state.last_executed_query,
            state.last_executed_at,
            self._clock(),
            min_query_length=self.min_query_length,
            min_interval=self.min_interval_ms / 1000,
        ):
            state.status = self._resting_status()
            return

        state.status = PipelineStatus.IN_FLIGHT
        state.in_flight = True
        task = asyncio.ensure_future(self._execute(text))
        self._requests[task] = text
        task.add_done_callback(lambda t: self._requests.pop(t, None))

    async def _execute(self, text: str):
        start_time = self._clock()
        self.telemetry.emit("search_started", query=text)

        try:
            results = await self.searcher.search(text, SearchOptions(limit=self.max_results))
            suggestions = await self.searcher.suggest(text) if self.enable_suggestions else []
        except Exception as e:
            if self._is_stale(text):
                self._discard(text)
                return
            message = e.message if isinstance(e, SearchError) else "Search failed"
            if not isinstance(e, SearchError):
                logger.exception("search_pipeline_error", query=text)
            else:
                logger.warning("search_failed", query=text, error=message)
            self.state.error = message
            self.state.in_flight = False
            self.state.status = PipelineStatus.ERROR
            return

        if self._is_stale(text):
            self._discard(text)
            return

        end_time = self._clock()
        state = self.state
        state.results = results
        state.suggestions = suggestions
        state.last_executed_query = text
        state.last_executed_at = end_time
        state.has_searched = True
        state.search_time_ms = (end_time - start_time) * 1000
        state.result_count = len(results)
        state.error = None
        state.in_flight = False
        state.status = PipelineStatus.SETTLED

        self.telemetry.emit(
            "search_completed",
            query=text,
            result_count=len(results),
            search_time_ms=state.search_time_ms,
        )

    def _is_stale(self, text: str) -> bool:
        return text != self.state.query

    def _discard(self, text: str):
        logger.debug("stale_response_discarded", query=text, current=self.state.query)
        current = asyncio.current_task()
        still_running = any(
            q == self.state.query for t, q in self._requests.items() if t is not current
        )
        if still_running:
            return
        self.state.in_flight = False
        if self.state.status is PipelineStatus.IN_FLIGHT:
            self.state.status = self._resting_status()

    def _resting_status(self) -> PipelineStatus:
        return PipelineStatus.SETTLED if self.state.has_searched else PipelineStatus.IDLE

    # ===== Observable state =====

    @property
    def is_loading(self) -> bool:
        return self.state.status is PipelineStatus.IN_FLIGHT

    @property
    def is_empty(self) -> bool:
        return not self.state.query.strip()

    @property
    def has_no_results(self) -> bool:
        return self.state.has_searched and not self.is_loading and not self.state.results

    def filter_by_type(self, record_type: str) -> list[SearchResult]:
        return [r for r in self.state.results if r.type == record_type]

    def filter_by_category(self, category: str) -> list[SearchResult]:
        return [r for r in self.state.results if r.category == category]

    def unique_categories(self) -> list[str]:
        return list(dict.fromkeys(r.category for r in self.state.results if r.category))

    def unique_types(self) -> list[str]:
        return list(dict.fromkeys(r.type for r in self.state.results))

    def snapshot(self) -> dict:
        """Return the observable state for a UI or API caller."""
        state = self.state
        return {
            "query": state.query,
            "results": [r.model_dump(by_alias=True) for r in state.results],
            "suggestions": list(state.suggestions),
            "is_loading": self.is_loading,
            "error": state.error,
            "has_searched": state.has_searched,
            "search_time_ms": state.search_time_ms,
            "result_count": state.result_count,
            "status": state.status.value,
        }
