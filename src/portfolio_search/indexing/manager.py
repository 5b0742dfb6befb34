"""Index management for building, caching, and swapping index snapshots."""

import time

import structlog

from portfolio_search.config import get_settings
from portfolio_search.errors import ContentLoadError, SearchUnavailableError
from portfolio_search.ingestion.aggregator import ContentAggregator
from portfolio_search.observability import INDEX_BUILD_TIME
from portfolio_search.retrieval.cache import CacheManager
from portfolio_search.retrieval.fuzzy import FuzzyMatcher
from portfolio_search.retrieval.index import SearchIndex

logger = structlog.get_logger()


class IndexManager:
    """
    Manages the search index snapshot.

    Features:
    - Builds the index from the aggregated content on first use
    - Caches the snapshot with its own TTL, rebuilt on expiry or invalidation
    - Swaps snapshots by reference so readers never see a partial index
    - Version tracking
    """

    INDEX_KEY = "search-index"

    def __init__(
        self,
        aggregator: ContentAggregator,
        cache: CacheManager,
        index_ttl: float | None = None,
        matcher: FuzzyMatcher | None = None,
    ):
        settings = get_settings()
        self.aggregator = aggregator
        self.cache = cache
        self.index_ttl = index_ttl if index_ttl is not None else settings.index_ttl_seconds
        self.matcher = matcher or FuzzyMatcher(threshold=settings.fuzzy_threshold)
        self._current: SearchIndex | None = None

    async def get_index(self) -> SearchIndex:
        """
        Return a fresh index snapshot, rebuilding it when stale.

        Raises:
            SearchUnavailableError: if the content could not be aggregated
        """
        try:
            index = await self.cache.get_or_load(self.INDEX_KEY, self.index_ttl, self._build)
        except ContentLoadError as e:
            raise SearchUnavailableError(f"Search is temporarily unavailable: {e.message}") from e

        if index is not self._current:
            self._current = index
            logger.info("index_version_activated", version=index.version, records=len(index))
        return index

    async def _build(self) -> SearchIndex:
        start_time = time.time()
        records = await self.aggregator.load()
        index = SearchIndex(records, matcher=self.matcher)

        duration = time.time() - start_time
        INDEX_BUILD_TIME.observe(duration)
        logger.info(
            "search_index_built",
            version=index.version,
            records=len(index),
            duration_ms=duration * 1000,
        )
        return index

    def invalidate(self):
        """Drop the index and all cached source content."""
        self.cache.invalidate_all()
        logger.info("search_cache_invalidated")

    def get_status(self) -> dict:
        """Get current index status."""
        current = self._current
        return {
            "ready": current is not None,
            "records": len(current) if current else 0,
            "current_version": current.version if current else None,
            "built_at": current.built_at.isoformat() if current else None,
        }
