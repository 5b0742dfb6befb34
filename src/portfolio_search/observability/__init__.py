"""Observability package."""

from portfolio_search.observability.metrics import (
    SEARCH_REQUESTS,
    SEARCH_LATENCY,
    SUGGEST_REQUESTS,
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_COALESCED,
    SOURCE_LOADS,
    RECORDS_DROPPED,
    INDEX_BUILD_TIME,
    PIPELINE_EVENTS,
    get_metrics,
)

__all__ = [
    "SEARCH_REQUESTS",
    "SEARCH_LATENCY",
    "SUGGEST_REQUESTS",
    "CACHE_HITS",
    "CACHE_MISSES",
    "CACHE_COALESCED",
    "SOURCE_LOADS",
    "RECORDS_DROPPED",
    "INDEX_BUILD_TIME",
    "PIPELINE_EVENTS",
    "get_metrics",
]
