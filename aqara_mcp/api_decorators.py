"""Decorator for unified Aqara API method patterns.

Every Aqara operation posts ``{"intent": ..., "data": ...}`` to the same
endpoint, so an operation only has to describe its intent, how its result is
cached and which cache entries it invalidates. The decorated method builds
and returns the ``data`` dict; the decorator handles the rest:

- Cache lookup before any network I/O
- Cache invalidation for mutating intents (after validation, before the request is sent)
- Signing, rate limiting and envelope unwrapping via ``self._make_request``
- Cache population after a successful call, unless the key was invalidated meanwhile
- Per-intent cache hit/miss counting on ``self._request_tracker``

Usage:
    @aqara_request(Intent.QUERY_DEVICE_LIST, cache_key="devices_{page_num}_{page_size}", cache_ttl=300)
    async def async_get_device_list(self, page_num: int = 1, page_size: int = 30) -> dict:
        return {"pageNum": page_num, "pageSize": page_size}

    @aqara_request(Intent.WRITE_DEVICE_RESOURCE, invalidates=("device_status_{device_id}",))
    async def async_control_device(self, device_id: str, resource_id: str, value) -> dict:
        return {...}
"""

import functools
import inspect
import logging
from collections.abc import Callable

_LOGGER = logging.getLogger(__name__)


def aqara_request(
    intent: str,
    *,
    cache_key: str | None = None,
    cache_ttl: float | None = None,
    invalidates: tuple[str, ...] = (),
):
    """Decorator for Aqara API operations.

    Args:
        intent: Aqara API intent sent in the request body.
        cache_key: Cache key template formatted with the bound arguments of the
                   decorated method (e.g. "device_status_{device_id}").
                   None means the result is never cached.
        cache_ttl: Time-to-live of the cached result in seconds, unless the
                   client's ``cache_ttls`` maps the intent to another value.
        invalidates: Cache key templates deleted once the data dict is built
                     and before the request is sent.

    The decorated method must build and return the ``data`` dict of the
    request. The wrapper returns the unwrapped AqaraResponse.
    """

    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            # Bind arguments (including defaults) to their names for key formatting
            bound = sig.bind(self, *args, **kwargs)
            bound.apply_defaults()
            key_kwargs = {name: value for name, value in bound.arguments.items() if name != "self"}

            key = cache_key.format(**key_kwargs) if cache_key else None
            if key is not None:
                cached = self._cache.get(key)
                if cached is not None:
                    self._request_tracker.record_cache_hit(intent)
                    return cached
                self._request_tracker.record_cache_miss(intent)
                token = self._cache.generation(key)

            data = await func(self, *args, **kwargs)

            # Only after validation succeeded, but before anything is sent
            for template in invalidates:
                self._cache.delete(template.format(**key_kwargs))

            response = await self._make_request(intent, data)

            if key is not None:
                # Per-intent overrides configured on the client win over the declared TTL
                self._cache.set_if_current(key, response, token, self.cache_ttls.get(intent, cache_ttl))
            return response

        return wrapper

    return decorator
