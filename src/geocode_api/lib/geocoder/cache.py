"""In-memory TTL cache for reverse geocoding responses.

Entries expire after a per-entry time-to-live. Expired entries are removed
lazily, the next time they are read; there is no background sweeper.
"""

import copy
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from loguru import logger


@dataclass(frozen=True)
class CacheEntry:
    """A cached response and the monotonic instant at which it expires."""

    response: Any
    expires_at: float


class TTLCache:
    """Process-local key/value store with lazy time-based expiry.

    All reads and writes go through a single lock, so ``get`` and ``set``
    are atomic with respect to each other from any number of threads or
    coroutines. Values are deep-copied on the way in and on the way out;
    callers never hold a reference into cache storage.

    Args:
        clock: Monotonic time source in seconds. Injectable for tests.
        verbose: Emit a debug log line for every HIT/MISS decision.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, *, verbose: bool = False) -> None:
        self._data: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._verbose = verbose

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet read."""
        with self._lock:
            return len(self._data)

    def set(self, key: str, value: Any, ttl: timedelta | float) -> None:
        """Store ``value`` under ``key``, replacing any existing entry.

        Args:
            key: Cache key.
            value: JSON-compatible value to cache.
            ttl: Time-to-live, as a timedelta or a number of seconds. Zero or
                negative values produce an entry that is already expired.
        """
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        entry = CacheEntry(response=copy.deepcopy(value), expires_at=self._clock() + seconds)
        with self._lock:
            self._data[key] = entry

    def get(self, key: str) -> tuple[Any, bool]:
        """Look up ``key``.

        Returns:
            ``(value, True)`` while the entry is live, otherwise
            ``(None, False)``. An expired entry is deleted as a side effect.
        """
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                self._trace("Cache MISS for key: {}, found: False", key)
                return None, False

            remaining = entry.expires_at - self._clock()
            if remaining < 0:
                del self._data[key]
                self._trace("Cache MISS for key: {}, expired: True", key)
                return None, False

        self._trace("Cache HIT for key: {}, expired: False, cacheTime: {:.1f}s", key, remaining)
        return copy.deepcopy(entry.response), True

    def _trace(self, message: str, *args: Any) -> None:
        if self._verbose:
            logger.debug(message, *args)
