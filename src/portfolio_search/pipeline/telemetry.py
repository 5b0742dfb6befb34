"""Search session telemetry events."""

import structlog

from portfolio_search.observability import PIPELINE_EVENTS

logger = structlog.get_logger()

SEARCH_ACTIONS = (
    "search_started",
    "search_completed",
    "search_result_clicked",
    "search_suggestion_clicked",
)


class SearchTelemetry:
    """
    Emits search session events as structured log lines and counters.

    Emitting never raises; a failing sink is logged and ignored so the query
    pipeline keeps running.
    """

    def emit(self, action: str, **data):
        try:
            PIPELINE_EVENTS.labels(action=action).inc()
            self.send(action, data)
        except Exception as e:
            logger.warning("telemetry_emit_failed", action=action, error=str(e))

    def send(self, action: str, data: dict):
        """Deliver one event; override to forward events to an analytics backend."""
        logger.info("search_event", action=action, **data)
