"""
ResponseCache - TTL cache for GET responses with single-flight deduplication.

Features:
- Keys are "<base_url>::<path>" so the data and auth services never collide
- Fresh settled entries are served without touching the network
- Concurrent reads of the same key share one in-flight task
- Failed reads are never cached; the entry is dropped so the next call starts fresh
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


@dataclass
class CacheEntry:
    """Either a settled value or an in-flight request, stamped with a time."""

    timestamp: float
    value: Any = None
    task: asyncio.Future | None = None

    @property
    def in_flight(self) -> bool:
        return self.task is not None

    def is_fresh(self, now: float, ttl: timedelta) -> bool:
        return not self.in_flight and (now - self.timestamp) < ttl.total_seconds()


class ResponseCache:
    """
    In-memory read cache keyed by (service base URL, path).

    Usage:
        cache = ResponseCache()
        key = cache.generate_key(base_url, "/service?available=true")
        data = await cache.get(key, lambda: fetch("/service?available=true"))
    """

    def __init__(
        self,
        default_ttl: timedelta = timedelta(minutes=2),
        clock: Callable[[], float] = time.monotonic,
        debug: bool = False,
    ):
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._clock = clock
        self._debug = debug
        self._stats = CacheStats()

    @staticmethod
    def generate_key(base_url: str, path: str) -> str:
        """Generate a cache key from the service base URL and request path."""
        return f"{base_url}::{path}"

    async def get(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        ttl: timedelta | None = None,
    ) -> T:
        """
        Return the cached value for key, fetching it if missing or expired.

        Args:
            key: Cache key from generate_key
            fetch: Coroutine factory performing the actual read
            ttl: Freshness window (uses default if not specified)

        Returns:
            The cached or freshly fetched value
        """
        ttl = ttl if ttl is not None else self._default_ttl
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and entry.is_fresh(now, ttl):
            self._stats.hits += 1
            self._log(f"HIT: {key[:80]}")
            return entry.value

        if entry is not None and entry.in_flight:
            self._stats.deduplicated += 1
            self._log(f"DEDUPE: waiting for in-flight request: {key[:80]}")
            return await asyncio.shield(entry.task)

        self._stats.misses += 1
        self._log(f"MISS: {key[:80]}")
        # Registered before the first await so concurrent callers find it
        task = asyncio.ensure_future(self._fetch_and_store(key, fetch))
        task.add_done_callback(_consume_exception)
        self._entries[key] = CacheEntry(timestamp=now, task=task)
        return await asyncio.shield(task)

    async def _fetch_and_store(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        """Run the fetch; settle the entry on success, drop it on failure."""
        this_task = asyncio.current_task()
        try:
            value = await fetch()
        except BaseException:
            if self._owns(key, this_task):
                del self._entries[key]
            self._log(f"FAILED: entry dropped: {key[:80]}")
            raise

        # Invalidated while in flight: hand the value to waiters, keep it out of the cache
        if self._owns(key, this_task):
            self._entries[key] = CacheEntry(timestamp=self._clock(), value=value)
            self._log(f"SET: {key[:80]}")
        return value

    def _owns(self, key: str, task: asyncio.Future | None) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.task is task

    def invalidate(self, path_prefix: str, base_url: str | None = None) -> int:
        """
        Drop every entry for a resource family.

        `/service` matches `/service`, `/service?status=active` and `/service/7`
        but not `/service_category`.

        Returns:
            Number of entries invalidated
        """
        doomed = []
        for key in self._entries:
            key_base, _, path = key.partition("::")
            if base_url is not None and key_base != base_url:
                continue
            if path == path_prefix or path.startswith((path_prefix + "?", path_prefix + "/")):
                doomed.append(key)

        for key in doomed:
            del self._entries[key]

        if doomed:
            self._log(f"INVALIDATE: {len(doomed)} entries under '{path_prefix}'")
        return len(doomed)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._entries)
        self._entries.clear()
        self._log(f"CLEAR: {count} entries removed")

    def get_in_flight_count(self) -> int:
        return sum(1 for entry in self._entries.values() if entry.in_flight)

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        self._stats.size = len(self._entries)
        self._stats.in_flight = self.get_in_flight_count()
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[ResponseCache] {message}")


def _consume_exception(task: asyncio.Future) -> None:
    """Mark a failed fetch as retrieved even when every waiter was cancelled."""
    if not task.cancelled():
        task.exception()


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    deduplicated: int = 0
    size: int = 0
    in_flight: int = 0

    @property
    def hit_rate(self) -> float:
        """Share of reads answered without a new network call."""
        total = self.hits + self.deduplicated + self.misses
        if total == 0:
            return 0.0
        return (self.hits + self.deduplicated) / total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "deduplicated": self.deduplicated,
            "size": self.size,
            "in_flight": self.in_flight,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
