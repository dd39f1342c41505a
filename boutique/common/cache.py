"""
TTL Cache

Explicit, injectable memoisation for repository reads. The clock is
passed in so expiry can be tested without sleeping.
"""

import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:
    """
    Key/value cache whose entries expire ``ttl`` seconds after being stored.

    Usage:
        cache = TTLCache(ttl=60)
        products = cache.get_or_load("products", repository_fetch)
        cache.invalidate("products")
    """

    def __init__(self, ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl: Entry lifetime in seconds (0 disables caching)
            clock: Zero-argument callable returning the current time in seconds
        """
        if ttl < 0:
            raise ValueError("ttl cannot be negative")
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default

        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return default
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if self.ttl == 0:
            return
        self._entries[key] = (self.clock() + self.ttl, value)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, calling loader on a miss.

        Exceptions from loader propagate and nothing is stored.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            logger.debug("Cache hit: %s", key)
            return value

        logger.debug("Cache miss: %s", key)
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        """Drop one entry, or every entry when key is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
