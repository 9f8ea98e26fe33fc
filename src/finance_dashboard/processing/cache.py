"""In-process report cache with explicit state and an injectable clock."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

CacheKey = tuple[str, ...]


def make_cache_key(
    unit: str = "all",
    start_date: str | None = None,
    end_date: str | None = None,
    *extra: str,
) -> CacheKey:
    """Build the cache key for a report request.

    Args:
        unit: Unit filter ("all" or a unit identifier).
        start_date: Start of the date filter, or None.
        end_date: End of the date filter, or None.
        *extra: Further request options that change the report.

    Returns:
        Hashable key.
    """
    return (unit or "all", start_date or "all", end_date or "all", *extra)


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the time it was stored."""

    value: T
    stored_at: float


class ReportCache(Generic[T]):
    """Time-to-live cache for built reports.

    All state lives on the instance; the owner decides its lifetime.
    """

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        """Initialize the cache.

        Args:
            ttl_seconds: How long an entry stays fresh.
            clock: Monotonic time source in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry[T]] = {}

    def get(self, key: CacheKey) -> T | None:
        """Return a fresh cached value, evicting it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: CacheKey, value: T) -> None:
        """Store a value under a key."""
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
