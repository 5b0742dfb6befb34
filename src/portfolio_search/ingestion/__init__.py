"""Ingestion package."""

from portfolio_search.ingestion.aggregator import ContentAggregator
from portfolio_search.ingestion.connectors import (
    BaseContentSource,
    HttpJsonSource,
    JsonFileSource,
    build_default_sources,
)
from portfolio_search.ingestion.normalize import NORMALIZERS, normalize_entry

__all__ = [
    "BaseContentSource",
    "ContentAggregator",
    "HttpJsonSource",
    "JsonFileSource",
    "NORMALIZERS",
    "build_default_sources",
    "normalize_entry",
]
