"""Per-intent request statistics for the ``aqara://stats`` resource."""

import logging
import time

from pydantic import BaseModel, Field

_LOGGER = logging.getLogger(__name__)


class IntentCounters(BaseModel):
    """Counters of a single intent.

    Attributes:
        requests: Requests sent to the Aqara API.
        errors: Sent requests that ended in an AqaraError.
        cache_hits: Calls answered from the response cache.
        cache_misses: Cacheable calls that had to go to the network.
        last_request_at: Wall clock time of the latest request (epoch seconds).
    """

    model_config = {"validate_assignment": True}

    requests: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    cache_hits: int = Field(default=0, ge=0)
    cache_misses: int = Field(default=0, ge=0)
    last_request_at: float | None = None


class RequestTracker:
    """Collects IntentCounters keyed by intent name."""

    def __init__(self):
        self._counters: dict[str, IntentCounters] = {}

    def _get_current_time(self) -> float:
        return time.time()

    def _counters_for(self, intent: str) -> IntentCounters:
        return self._counters.setdefault(str(intent), IntentCounters())

    def record_request(self, intent: str) -> None:
        """Count a request about to be sent for ``intent``."""
        counters = self._counters_for(intent)
        counters.requests += 1
        counters.last_request_at = self._get_current_time()

    def record_error(self, intent: str) -> None:
        """Count a sent request that failed."""
        self._counters_for(intent).errors += 1
        _LOGGER.debug("Recorded failed request for %s", intent)

    def record_cache_hit(self, intent: str) -> None:
        """Count a call answered from the cache."""
        self._counters_for(intent).cache_hits += 1

    def record_cache_miss(self, intent: str) -> None:
        """Count a cacheable call that needs the network."""
        self._counters_for(intent).cache_misses += 1

    def get_summary(self) -> dict[str, dict]:
        """Counters of every intent seen so far, as plain dicts."""
        return {intent: counters.model_dump() for intent, counters in self._counters.items()}
