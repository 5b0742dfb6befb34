"""Search service orchestrating validation, caching, indexing and suggestions."""

import time
from datetime import datetime, timezone
from typing import Callable

import structlog
from pydantic import ValidationError

from portfolio_search.config import Settings, get_settings
from portfolio_search.errors import ContentLoadError, SearchUnavailableError
from portfolio_search.indexing.manager import IndexManager
from portfolio_search.ingestion.aggregator import ContentAggregator
from portfolio_search.ingestion.connectors import BaseContentSource, build_default_sources
from portfolio_search.models.content import WritingContent
from portfolio_search.models.search import SearchOptions, SearchResult
from portfolio_search.observability import SEARCH_LATENCY, SEARCH_REQUESTS, SUGGEST_REQUESTS
from portfolio_search.retrieval.cache import CacheManager
from portfolio_search.retrieval.filters import WritingFilters, filter_writings
from portfolio_search.retrieval.suggest import SuggestionEngine
from portfolio_search.search_utils import validate_search_query

logger = structlog.get_logger()


class SearchService:
    """
    High-level search service.

    Orchestrates:
    - Query validation
    - Cached content aggregation and index snapshots
    - Ranked, highlighted search and autocomplete suggestions
    - Cache invalidation and statistics
    """

    def __init__(
        self,
        index_manager: IndexManager,
        suggestions: SuggestionEngine | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.index_manager = index_manager
        self.suggestions = suggestions or SuggestionEngine(
            limit=self.settings.max_suggestions,
            min_length=self.settings.min_query_length,
        )

    @classmethod
    def create(
        cls,
        sources: list[BaseContentSource] | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "SearchService":
        """Wire cache, aggregator and index manager from settings."""
        settings = settings or get_settings()
        cache = CacheManager(clock=clock, stale_ttl=settings.stale_ttl_seconds)
        aggregator = ContentAggregator(
            sources if sources is not None else build_default_sources(settings),
            cache=cache,
            content_ttl=settings.content_ttl_seconds,
            source_timeout=settings.source_timeout_seconds,
        )
        manager = IndexManager(aggregator, cache, index_ttl=settings.index_ttl_seconds)
        return cls(manager, settings=settings)

    @property
    def cache(self) -> CacheManager:
        return self.index_manager.cache

    async def search(self, query: str, options: SearchOptions | None = None) -> list[SearchResult]:
        """
        Search all content.

        Args:
            query: Free-text query
            options: Limit and type/category filters

        Returns:
            Ranked results; empty for queries shorter than the minimum length

        Raises:
            QueryValidationError: if the query is too long or mostly symbols
            SearchUnavailableError: if the content cannot be aggregated
        """
        trimmed = query.strip()
        if len(trimmed) < self.settings.min_query_length:
            return []

        validation = validate_search_query(trimmed)
        if not validation.is_valid:
            SEARCH_REQUESTS.labels(status="invalid").inc()
            logger.info("search_rejected", query=trimmed, reason=validation.error)
            validation.raise_for_error()

        options = options or SearchOptions(limit=self.settings.default_limit)
        if options.limit > self.settings.max_limit:
            options = options.model_copy(update={"limit": self.settings.max_limit})

        start_time = time.time()
        try:
            index = await self.index_manager.get_index()
        except SearchUnavailableError as e:
            SEARCH_REQUESTS.labels(status="unavailable").inc()
            logger.error("search_unavailable", query=trimmed, error=e.message)
            raise

        results = index.query(trimmed, options)
        latency_ms = (time.time() - start_time) * 1000

        SEARCH_REQUESTS.labels(status="success").inc()
        SEARCH_LATENCY.observe(latency_ms / 1000.0)
        logger.info(
            "search_complete",
            query=trimmed,
            type=options.type,
            category=options.category,
            results_count=len(results),
            latency_ms=latency_ms,
            index_version=index.version,
        )
        return results

    async def suggest(self, query: str) -> list[str]:
        """
        Autocomplete a partial query.

        Raises:
            SearchUnavailableError: if the content cannot be aggregated
        """
        if len(query.strip()) < self.settings.min_query_length:
            return []

        try:
            index = await self.index_manager.get_index()
        except SearchUnavailableError:
            SUGGEST_REQUESTS.labels(status="unavailable").inc()
            raise

        suggestions = self.suggestions.suggest(query, index.records)
        SUGGEST_REQUESTS.labels(status="success").inc()
        return suggestions

    async def list_writings(self, filters: WritingFilters | None = None) -> list[WritingContent]:
        """
        List writing entries matching the listing filters.

        Raises:
            SearchUnavailableError: if the writing source fails
        """
        try:
            entries = await self.index_manager.aggregator.load_entries("writing")
        except ContentLoadError as e:
            raise SearchUnavailableError(f"Writing is temporarily unavailable: {e.message}") from e

        writings = []
        for entry in entries:
            try:
                writings.append(WritingContent.model_validate(entry))
            except ValidationError as e:
                logger.warning("writing_entry_dropped", error_count=e.error_count())
        return filter_writings(writings, filters or WritingFilters())

    def invalidate(self):
        """Drop cached content and the index; the next call rebuilds from sources."""
        self.index_manager.invalidate()

    clear_cache = invalidate

    async def stats(self) -> dict:
        """Return index and cache statistics."""
        index = await self.index_manager.get_index()
        return {
            "total_items": len(index),
            "by_type": index.count_by_type(),
            "index_version": index.version,
            "last_updated": index.built_at.astimezone(timezone.utc).isoformat(),
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "cache": self.cache.stats,
        }
