"""Interactive query pipeline package."""

from portfolio_search.pipeline.query import PipelineStatus, QueryPipeline, QueryState, Searcher
from portfolio_search.pipeline.telemetry import SearchTelemetry

__all__ = [
    "PipelineStatus",
    "QueryPipeline",
    "QueryState",
    "SearchTelemetry",
    "Searcher",
]
