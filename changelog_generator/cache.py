"""
In-memory response cache.

Entries expire after a fixed TTL. Expired entries are not swept; they are
treated as a miss and overwritten by the next write for the same key.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 3600.0

logger = logging.getLogger("changelog-generator.cache")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the time it was stored."""
    data: T
    timestamp: float


def make_cache_key(method: str, params: Mapping[str, Any]) -> str:
    """
    Build a deterministic cache key from an operation name and its parameters.

    Parameter order does not affect the key.
    """
    return f"{method}:{json.dumps(params, sort_keys=True, default=str)}"


class ResponseCache:
    """
    TTL-bounded memoization shared by one generator instance.

    Args:
        ttl: Lifetime of an entry in seconds.
        clock: Time source returning seconds; injectable for tests.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for ``key``, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self.ttl:
            return entry.data
        return None

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=value, timestamp=self._clock())

    def memoize(self, key: str, producer: Callable[[], T]) -> T:
        """
        Return the cached value for ``key`` or compute, store and return it.

        Exceptions raised by ``producer`` propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached
        value = producer()
        self.put(key, value)
        return value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
