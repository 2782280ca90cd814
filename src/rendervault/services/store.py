"""Render cache stores.

The controller talks to its store only through ``get`` and ``set``; the
introspection operations (``size``, ``dump``, ``reset``) back the public
``cache_length``/``cache_dump``/``cache_reset`` calls. Any object with the
same methods can be injected in place of the bundled LRUCacheStore. Errors
raised by a store are not caught by the controller.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from rendervault.shared.constants import RenderCacheConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class RenderCacheStore(Protocol):
    """Minimal store contract used on the render path."""

    def get(self, key: str) -> Any | None:
        """Return the entry for ``key`` or None."""

    def set(self, key: str, entry: Any) -> None:
        """Store ``entry`` under ``key``, replacing any previous entry."""


@runtime_checkable
class IntrospectableStore(RenderCacheStore, Protocol):
    """Store that also supports the public introspection operations."""

    def size(self) -> int:
        """Number of live entries."""

    def dump(self) -> list[Any]:
        """Snapshot of live entries."""

    def reset(self) -> None:
        """Drop every entry."""


@dataclass
class StoreStats:
    """Statistics for store performance monitoring."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate as a percentage."""
        if self.total_requests == 0:
            return 0.0
        return (self.hits / self.total_requests) * 100

    def reset(self) -> None:
        """Reset all statistics to zero."""
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.expirations = 0


class _StoredItem:
    """A value plus the time it was stored."""

    __slots__ = ("stored_at", "value")

    def __init__(self, value: Any, stored_at: float) -> None:
        self.value = value
        self.stored_at = stored_at


class LRUCacheStore:
    """In-memory store with least-recently-used eviction and a max age.

    Reads refresh recency; entries older than ``max_age`` seconds are dropped
    lazily when touched by ``get``, ``size`` or ``dump``.

    Args:
        max_size: Maximum number of entries.
        max_age: Maximum entry age in seconds; None disables expiry.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_size: int = RenderCacheConfig.DEFAULT_MAX_SIZE,
        max_age: Optional[float] = RenderCacheConfig.DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            msg = "max_size must be positive"
            raise ValueError(msg)
        if max_age is not None and max_age <= 0:
            msg = "max_age must be positive or None"
            raise ValueError(msg)

        self.max_size = max_size
        self.max_age = max_age
        self._clock = clock
        self._items: OrderedDict[str, _StoredItem] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = StoreStats()

        logger.debug("Initialized render cache store with max_size=%d, max_age=%s", max_size, max_age)

    def _is_expired(self, item: _StoredItem, now: float) -> bool:
        return self.max_age is not None and now - item.stored_at > self.max_age

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, item in self._items.items() if self._is_expired(item, now)]
        for key in expired:
            del self._items[key]
        self._stats.expirations += len(expired)

    def get(self, key: str) -> Any | None:
        """Get an entry, refreshing its recency."""
        with self._lock:
            item = self._items.get(key)
            if item is None:
                self._stats.misses += 1
                return None

            if self._is_expired(item, self._clock()):
                del self._items[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                return None

            self._items.move_to_end(key)
            self._stats.hits += 1
            return item.value

    def set(self, key: str, entry: Any) -> None:
        """Store an entry, evicting least-recently-used ones beyond capacity."""
        with self._lock:
            self._items[key] = _StoredItem(entry, self._clock())
            self._items.move_to_end(key)
            while len(self._items) > self.max_size:
                evicted_key, _ = self._items.popitem(last=False)
                self._stats.evictions += 1
                logger.debug("Evicted render cache entry '%s'", evicted_key)

    def size(self) -> int:
        """Number of live (unexpired) entries."""
        with self._lock:
            self._purge_expired()
            return len(self._items)

    def dump(self) -> list[Any]:
        """Live entries, most recently used first."""
        with self._lock:
            self._purge_expired()
            return [item.value for item in reversed(self._items.values())]

    def keys(self) -> list[str]:
        """Live keys, most recently used first."""
        with self._lock:
            self._purge_expired()
            return list(reversed(self._items.keys()))

    def reset(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._items.clear()

    def get_stats(self) -> StoreStats:
        """Get a snapshot of store statistics."""
        with self._lock:
            return StoreStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
            )

    def __len__(self) -> int:
        return self.size()
