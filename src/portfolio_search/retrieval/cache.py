"""TTL cache with single-flight loading for content and index snapshots."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog

from portfolio_search.config import get_settings
from portfolio_search.observability import CACHE_COALESCED, CACHE_HITS, CACHE_MISSES

logger = structlog.get_logger()

Loader = Callable[[], Awaitable[Any]]


@dataclass
class CacheEntry:
    """A cached value with its insertion time."""

    key: str
    value: Any
    inserted_at: float
    hits: int = 0

    def is_stale(self, now: float, ttl: float) -> bool:
        return now - self.inserted_at > ttl


class CacheManager:
    """
    Get-or-load cache with a TTL per key.

    Features:
    - Per-call TTL, so raw content and the assembled index can age differently
    - Single-flight: concurrent misses on one key share a single load
    - A shared load is cancelled once every caller waiting on it is cancelled
    - Soft-stale fallback to the last good value when a reload fails
    - Injectable clock for deterministic tests
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        stale_ttl: float | None = None,
    ):
        """
        Initialize the cache.

        Args:
            clock: Returns the current time in seconds
            stale_ttl: Extra seconds past the TTL during which a failed reload
                may fall back to the previous value
        """
        self._clock = clock
        self.stale_ttl = stale_ttl if stale_ttl is not None else get_settings().stale_ttl_seconds

        self._store: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Future] = {}
        self._waiters: dict[asyncio.Future, int] = {}
        self._generations: dict[str, int] = {}
        self._hits = 0
        self._misses = 0
        self._coalesced = 0

    async def get_or_load(self, key: str, ttl: float, loader: Loader) -> Any:
        """
        Return the cached value for ``key``, loading it on miss or expiry.

        Args:
            key: Cache key
            ttl: Seconds after insertion at which the entry goes stale
            loader: Coroutine function producing a fresh value

        Returns:
            The fresh or cached value
        """
        entry = self._store.get(key)
        if entry is not None and not entry.is_stale(self._clock(), ttl):
            entry.hits += 1
            self._hits += 1
            CACHE_HITS.inc()
            return entry.value

        pending = self._pending.get(key)
        if pending is None:
            self._misses += 1
            CACHE_MISSES.inc()
            pending = asyncio.ensure_future(self._load(key, ttl, loader))
            self._pending[key] = pending
            pending.add_done_callback(lambda fut: self._clear_pending(key, fut))
        else:
            self._coalesced += 1
            CACHE_COALESCED.inc()
            logger.debug("cache_load_coalesced", key=key)

        self._waiters[pending] = self._waiters.get(pending, 0) + 1
        try:
            # Shielded so one cancelled waiter does not cancel a load others still await
            return await asyncio.shield(pending)
        finally:
            self._release(key, pending)

    async def _load(self, key: str, ttl: float, loader: Loader) -> Any:
        generation = self._generations.get(key, 0)
        try:
            value = await loader()
        except Exception as e:
            previous = self._store.get(key)
            if previous is not None and not previous.is_stale(self._clock(), ttl + self.stale_ttl):
                logger.warning("cache_serving_stale", key=key, error=str(e))
                return previous.value
            raise

        if self._generations.get(key, 0) == generation:
            self._store[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())
        else:
            logger.info("cache_load_discarded", key=key, reason="invalidated")
        return value

    def _release(self, key: str, pending: asyncio.Future):
        remaining = self._waiters[pending] - 1
        if remaining:
            self._waiters[pending] = remaining
            return
        del self._waiters[pending]
        if not pending.done():
            logger.debug("cache_load_abandoned", key=key)
            if self._pending.get(key) is pending:
                del self._pending[key]
            pending.cancel()

    def _clear_pending(self, key: str, future: asyncio.Future):
        if self._pending.get(key) is future:
            del self._pending[key]
        if not future.cancelled() and future.exception() is not None:
            # Retrieved here so an unawaited failure is not reported as lost
            logger.debug("cache_load_failed", key=key, error=str(future.exception()))

    def get(self, key: str, ttl: float) -> Any | None:
        """Return a fresh cached value without loading, or None."""
        entry = self._store.get(key)
        if entry is None or entry.is_stale(self._clock(), ttl):
            return None
        return entry.value

    def invalidate(self, key: str):
        """Drop one entry and any load in flight for it."""
        self._store.pop(key, None)
        self._pending.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1
        logger.info("cache_invalidated", key=key)

    def invalidate_all(self):
        """Drop every entry and every load in flight."""
        for key in set(self._store) | set(self._pending):
            self._generations[key] = self._generations.get(key, 0) + 1
        self._store.clear()
        self._pending.clear()
        logger.info("cache_cleared")

    def keys(self) -> list[str]:
        return list(self._store)

    @property
    def size(self) -> int:
        """Return current cache size."""
        return len(self._store)

    @property
    def hit_rate(self) -> float:
        """Return cache hit rate."""
        total = self._hits + self._misses
        return self._hits / total if total > 0 else 0.0

    @property
    def stats(self) -> dict:
        """Return cache statistics."""
        return {
            "size": self.size,
            "keys": self.keys(),
            "hits": self._hits,
            "misses": self._misses,
            "coalesced": self._coalesced,
            "hit_rate": self.hit_rate,
        }
