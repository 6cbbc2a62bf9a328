"""In-memory response cache with per-entry TTL.

Expired entries are removed lazily when they are read; there is no
background sweep.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from neatsuite.domain.interfaces.cache import CacheService
from neatsuite.domain.models.common import CacheKey

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Internal representation of a cache entry with expiry."""
    value: Any
    expiry_time: float  # Absolute timestamp (clock seconds) when the entry expires


class ResponseCache(CacheService):
    """Simple in-memory cache for API responses."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initializes the cache.

        Args:
            clock: Returns the current time in seconds.
        """
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Raw membership, expired entries included
        return key in self._entries

    def get(self, key: CacheKey) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expiry_time:
            del self._entries[key]
            logger.debug(f"Cache entry expired for key: {key}")
            return None

        logger.debug(f"Cache hit for key: {key}")
        return entry.value

    def set(self, key: CacheKey, value: Any, ttl: float) -> None:
        self._entries[key] = CacheEntry(value=value, expiry_time=self._clock() + ttl)
        logger.debug(f"Stored item in cache: key={key}, ttl={ttl}s")

    def delete(self, key: CacheKey) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Cleared response cache.")
