"""Fan-out aggregation of all content sources into searchable records."""

import asyncio
import time

import structlog

from portfolio_search.config import get_settings
from portfolio_search.errors import ContentLoadError, RecordValidationError
from portfolio_search.ingestion.connectors.base import BaseContentSource
from portfolio_search.ingestion.normalize import normalize_entry
from portfolio_search.models.content import SearchableRecord
from portfolio_search.observability import RECORDS_DROPPED, SOURCE_LOADS
from portfolio_search.retrieval.cache import CacheManager

logger = structlog.get_logger()


class ContentAggregator:
    """
    Loads every content source concurrently and normalizes the entries.

    Flow:
    1. Fetch raw entries from each source (through the cache, with a timeout)
    2. Fail the whole aggregation if any source fails
    3. Normalize entries, dropping malformed ones with a warning
    """

    def __init__(
        self,
        sources: list[BaseContentSource],
        cache: CacheManager | None = None,
        content_ttl: float | None = None,
        source_timeout: float | None = None,
    ):
        """
        Args:
            sources: Content sources to aggregate
            cache: Cache for raw source content; None fetches every time
            content_ttl: TTL of cached raw content in seconds
            source_timeout: Upper bound on a single source fetch in seconds
        """
        settings = get_settings()
        self.sources = sources
        self.cache = cache
        self.content_ttl = content_ttl if content_ttl is not None else settings.content_ttl_seconds
        self.source_timeout = (
            source_timeout if source_timeout is not None else settings.source_timeout_seconds
        )

    @staticmethod
    def cache_key(source: BaseContentSource) -> str:
        return f"content:{source.name}"

    async def load(self) -> list[SearchableRecord]:
        """
        Aggregate all sources.

        Returns:
            Normalized records of every source, in source order

        Raises:
            ContentLoadError: if any source fails; no partial result is returned
        """
        start_time = time.time()
        tasks = [asyncio.ensure_future(self._load_source(source)) for source in self.sources]
        try:
            batches = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        records: list[SearchableRecord] = []
        seen: set[tuple[str, str]] = set()
        for batch in batches:
            for record in batch:
                if (record.type, record.id) in seen:
                    logger.warning("duplicate_record_dropped", type=record.type, id=record.id)
                    continue
                seen.add((record.type, record.id))
                records.append(record)

        logger.info(
            "content_aggregated",
            sources=len(self.sources),
            records=len(records),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return records

    async def load_entries(self, name: str) -> list[dict]:
        """
        Return the raw entries of one source, through the cache.

        Raises:
            KeyError: if no source has that name
            ContentLoadError: if the source fails
        """
        source = next((s for s in self.sources if s.name == name), None)
        if source is None:
            raise KeyError(name)
        return await self._entries(source)

    async def _entries(self, source: BaseContentSource) -> list[dict]:
        if self.cache is None:
            return await self._fetch(source)
        return await self.cache.get_or_load(
            self.cache_key(source),
            self.content_ttl,
            lambda: self._fetch(source),
        )

    async def _load_source(self, source: BaseContentSource) -> list[SearchableRecord]:
        entries = await self._entries(source)

        records = []
        for entry in entries:
            try:
                records.append(normalize_entry(source.name, source.record_type, entry))
            except RecordValidationError as e:
                RECORDS_DROPPED.labels(source=source.name).inc()
                logger.warning(
                    "record_dropped",
                    source=source.name,
                    record_id=e.record_id,
                    errors=e.errors,
                )
        return records

    async def _fetch(self, source: BaseContentSource) -> list[dict]:
        """Fetch one source's raw entries, bounded by the source timeout."""
        try:
            entries = await asyncio.wait_for(source.load(), timeout=self.source_timeout)
        except asyncio.TimeoutError:
            SOURCE_LOADS.labels(source=source.name, status="timeout").inc()
            logger.error(
                "source_load_timeout",
                source=source.name,
                label=source.source_name,
                timeout=self.source_timeout,
            )
            raise ContentLoadError(source.name, f"timed out after {self.source_timeout}s")
        except ContentLoadError as e:
            SOURCE_LOADS.labels(source=source.name, status="error").inc()
            logger.error(
                "source_load_failed", source=source.name, label=source.source_name, error=e.message
            )
            raise
        except Exception as e:
            SOURCE_LOADS.labels(source=source.name, status="error").inc()
            logger.error(
                "source_load_failed", source=source.name, label=source.source_name, error=str(e)
            )
            raise ContentLoadError(source.name, str(e)) from e

        SOURCE_LOADS.labels(source=source.name, status="success").inc()
        logger.debug("source_loaded", source=source.name, entries=len(entries))
        return entries
