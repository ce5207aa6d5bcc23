"""In-process response cache with per-entry time-to-live.

Entries are checked lazily: an expired entry is dropped the moment it is
read and is never returned as a hit. ``purge_expired`` sweeps the whole
store on demand.

Every ``delete`` and ``clear`` advances a generation counter. A caller that
fetches a value over the network takes ``generation(key)`` first and stores
the result with ``set_if_current``, so a response that was in flight while
its key got invalidated is dropped instead of cached.
"""

import logging
import time
from typing import Any

from ..constants import API_DEFAULTS

_LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = API_DEFAULTS.DEFAULT_CACHE_TTL


class ResponseCache:
    """Keyed store of API responses with independent TTLs.

    Attributes:
        default_ttl: TTL in seconds used when ``set`` is called without one
    """

    def __init__(self, default_ttl: float = DEFAULT_CACHE_TTL):
        """Initialize the ResponseCache.

        Args:
            default_ttl: TTL in seconds used when ``set`` gets no explicit TTL
        """
        self.default_ttl = default_ttl

        # Cache storage: {cache_key: (value, expires_at)}
        self._entries: dict[str, tuple[Any, float]] = {}
        # Invalidation counters: per key for delete, global for clear
        self._key_generations: dict[str, int] = {}
        self._epoch = 0
        self._hits = 0
        self._misses = 0

    def _get_current_time(self) -> float:
        """Get current monotonic time for expiry checks."""
        return time.monotonic()

    def get(self, cache_key: str):
        """Get a value from cache if it's still valid.

        Args:
            cache_key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        if cache_key in self._entries:
            value, expires_at = self._entries[cache_key]
            if self._get_current_time() < expires_at:
                self._hits += 1
                _LOGGER.debug("Cache hit for %s", cache_key)
                return value
            # Cache expired, remove it
            del self._entries[cache_key]
        self._misses += 1
        _LOGGER.debug("Cache miss for %s", cache_key)
        return None

    def set(self, cache_key: str, value, ttl: float | None = None) -> None:
        """Store a value, overwriting any previous entry for the key.

        Args:
            cache_key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds (default_ttl when None, <= 0 skips caching)
        """
        if ttl is None:
            ttl = self.default_ttl
        if ttl <= 0:
            self._entries.pop(cache_key, None)
            return
        self._entries[cache_key] = (value, self._get_current_time() + ttl)

    def generation(self, cache_key: str) -> tuple[int, int]:
        """Token that changes whenever ``cache_key`` is deleted or the cache cleared."""
        return self._epoch, self._key_generations.get(cache_key, 0)

    def set_if_current(self, cache_key: str, value, token: tuple[int, int], ttl: float | None = None) -> bool:
        """Store ``value`` only if the key was not invalidated since ``token`` was taken.

        Returns:
            True if the value was stored.
        """
        if self.generation(cache_key) != token:
            _LOGGER.debug("Discarding stale result for %s", cache_key)
            return False
        self.set(cache_key, value, ttl)
        return True

    def delete(self, cache_key: str) -> bool:
        """Remove a single entry and invalidate fetches of it still in flight.

        Returns:
            True if an entry was removed.
        """
        self._key_generations[cache_key] = self._key_generations.get(cache_key, 0) + 1
        removed = self._entries.pop(cache_key, None) is not None
        if removed:
            _LOGGER.debug("Invalidated cache entry %s", cache_key)
        return removed

    def clear(self) -> None:
        """Clear all cached values."""
        self._entries.clear()
        self._key_generations.clear()
        self._epoch += 1
        _LOGGER.debug("Cleared all cache entries")

    def purge_expired(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._get_current_time()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def keys(self) -> list[str]:
        """Keys of all entries that have not expired."""
        self.purge_expired()
        return list(self._entries)

    def stats(self) -> dict:
        """Hit/miss counters and number of live keys."""
        return {
            "hits": self._hits,
            "misses": self._misses,
            "keys": len(self.keys()),
        }

    def __contains__(self, cache_key: str) -> bool:
        entry = self._entries.get(cache_key)
        return entry is not None and self._get_current_time() < entry[1]

    def __len__(self) -> int:
        return len(self.keys())
