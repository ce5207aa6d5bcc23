# aqara_api.py
"""Client for the Aqara open API.

AqaraAPI composes the request signer, the rate limiter and the response
cache into typed operations. Each network call runs through the same
pipeline::

    build_signed_request(config, intent, data)  ->  POST (rate limited)  ->  unwrap_envelope(body)

Errors propagate unmodified to the caller; nothing is retried here.
"""

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from .api_decorators import aqara_request
from .config import AqaraConfig
from .constants import (
    API_DEFAULTS,
    API_PATH,
    CACHE_KEY_DEVICE_LIST,
    CACHE_KEY_DEVICE_STATUS,
    CACHE_KEY_SCENE_LIST,
    Intent,
)
from .infrastructure.cache import ResponseCache
from .infrastructure.errors import (
    AqaraAPIError,
    AqaraConnectionError,
    AqaraError,
    AqaraResponseFormatError,
    AqaraTimeoutError,
    AqaraValidationError,
)
from .infrastructure.rate_limiter import RateLimiter
from .infrastructure.signing import SignedRequest, build_signed_request
from .infrastructure.tracking import RequestTracker
from .infrastructure.validation import require_identifier, require_iso_time, require_pagination
from .models import AqaraResponse, Device, DeviceResource, parse_items, unwrap_envelope

_LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = API_DEFAULTS.REQUEST_TIMEOUT

DEFAULT_CACHE_TTLS: dict[str, float] = {
    Intent.QUERY_DEVICE_LIST: API_DEFAULTS.DEVICE_LIST_TTL,
    Intent.QUERY_DEVICE_INFO: API_DEFAULTS.DEVICE_STATUS_TTL,
    Intent.QUERY_SCENE_LIST: API_DEFAULTS.SCENE_LIST_TTL,
}


def _http_error(status: int, reason: str | None, body: Any) -> AqaraAPIError:
    """Map an HTTP error status to an AqaraAPIError, preferring the vendor envelope."""
    if isinstance(body, dict):
        return AqaraAPIError(
            body.get("code") or status,
            body.get("message") or reason or f"HTTP {status}",
            body.get("msgDetails"),
            body.get("requestId"),
        )
    return AqaraAPIError(status, reason or f"HTTP {status}")


class AqaraAPI:
    """Aqara open API client with signing, rate limiting and caching.

    Args:
        config: Application credentials and region.
        cache: Response cache (a fresh ResponseCache when omitted).
        rate_limiter: Request scheduler (a fresh RateLimiter when omitted).
        request_tracker: Per-intent request and cache statistics.
        session: aiohttp session to use; one is created lazily otherwise.
        request_timeout: Total timeout of one request in seconds.
        cache_ttls: Per-intent TTL overrides in seconds.
    """

    def __init__(
        self,
        config: AqaraConfig,
        *,
        cache: ResponseCache | None = None,
        rate_limiter: RateLimiter | None = None,
        request_tracker: RequestTracker | None = None,
        session: aiohttp.ClientSession | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        cache_ttls: dict[str, float] | None = None,
    ):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.cache_ttls = {**DEFAULT_CACHE_TTLS, **(cache_ttls or {})}

        self._cache = cache if cache is not None else ResponseCache()
        self._rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self._request_tracker = request_tracker if request_tracker is not None else RequestTracker()
        self._session = session
        self._owns_session = session is None

    # -------------------------------------------------------------------------
    # Session handling
    # -------------------------------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session.

        Note: Timeouts are set per-request, not on the session level.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def shutdown(self):
        """Clear the cache, abandon queued requests and close the session."""
        self.clear_cache()
        self._rate_limiter.stop()
        await self.close()

    # -------------------------------------------------------------------------
    # Request pipeline
    # -------------------------------------------------------------------------

    async def _post(self, signed: SignedRequest) -> Any:
        """Send a signed request and return the decoded JSON body."""
        url = self.base_url + API_PATH
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        session = await self._get_session()

        try:
            async with session.post(url, json=signed.body, headers=signed.headers, timeout=timeout) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError as err:
                    if response.status >= 400:
                        raise _http_error(response.status, response.reason, None) from err
                    raise AqaraResponseFormatError("Invalid response format from Aqara API") from err

                if response.status >= 400:
                    raise _http_error(response.status, response.reason, body)

        except TimeoutError as err:
            raise AqaraTimeoutError("Request to Aqara API timed out. Please try again.") from err
        except aiohttp.ClientConnectionError as err:
            raise AqaraConnectionError(
                "Unable to connect to Aqara API. Please check your network connection."
            ) from err
        except aiohttp.ClientError as err:
            raise AqaraConnectionError(f"Request to Aqara API failed: {err}") from err

        _LOGGER.debug("API POST %s intent=%s returned: %s", url, signed.body.get("intent"), body)
        return body

    async def _make_request(self, intent: str, data: dict | None = None) -> AqaraResponse:
        """Sign, schedule and send one request, returning the unwrapped envelope."""

        async def _execute() -> AqaraResponse:
            # Signed at send time so the timestamp is not stale after queuing
            signed = build_signed_request(self.config, intent, data)
            self._request_tracker.record_request(intent)
            try:
                return unwrap_envelope(await self._post(signed))
            except AqaraError:
                self._request_tracker.record_error(intent)
                raise

        return await self._rate_limiter.schedule(_execute)

    # -------------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------------

    @aqara_request(
        Intent.QUERY_DEVICE_LIST,
        cache_key=CACHE_KEY_DEVICE_LIST,
        cache_ttl=API_DEFAULTS.DEVICE_LIST_TTL,
    )
    async def async_get_device_list(self, page_num: int = 1, page_size: int = API_DEFAULTS.PAGE_SIZE) -> dict:
        """List devices of the account (cached for 5 minutes)."""
        require_pagination(page_num, page_size)
        return {"pageNum": page_num, "pageSize": page_size}

    @aqara_request(
        Intent.QUERY_DEVICE_INFO,
        cache_key=CACHE_KEY_DEVICE_STATUS,
        cache_ttl=API_DEFAULTS.DEVICE_STATUS_TTL,
    )
    async def async_get_device_status(self, device_id: str) -> dict:
        """Detailed status of one device (cached for 30 seconds)."""
        require_identifier("deviceId", device_id)
        return {"dids": [device_id]}

    @aqara_request(Intent.WRITE_DEVICE_RESOURCE, invalidates=(CACHE_KEY_DEVICE_STATUS,))
    async def async_control_device(self, device_id: str, resource_id: str, value: str | int | float | bool) -> dict:
        """Write a resource value; drops the cached status of the device first."""
        require_identifier("deviceId", device_id)
        require_identifier("resourceId", resource_id)
        try:
            resource = DeviceResource(subject_id=device_id, resource_id=resource_id, value=value)
        except ValidationError as err:
            raise AqaraValidationError("value", "must be a string, number or boolean") from err
        return {"did": device_id, "resources": [resource.to_api_dict()]}

    @aqara_request(Intent.FETCH_DEVICE_HISTORY)
    async def async_get_device_history(
        self,
        device_id: str,
        resource_id: str,
        start_time: str,
        end_time: str,
        page_num: int = 1,
        page_size: int = API_DEFAULTS.HISTORY_PAGE_SIZE,
    ) -> dict:
        """Historical values of a device resource. Times must be ISO-8601."""
        require_identifier("deviceId", device_id)
        require_identifier("resourceId", resource_id)
        require_iso_time("startTime", start_time)
        require_iso_time("endTime", end_time)
        require_pagination(page_num, page_size)
        return {
            "subjectId": device_id,
            "resourceIds": [resource_id],
            "startTime": start_time,
            "endTime": end_time,
            "pageNum": page_num,
            "pageSize": page_size,
        }

    async def async_get_devices_by_type(self, model_type: int | None = None) -> list[Device]:
        """All devices, optionally only those of one model type."""
        response = await self.async_get_device_list(1, API_DEFAULTS.FULL_LIST_PAGE_SIZE)
        devices = parse_items(Device, response.items())

        if model_type is not None:
            return [device for device in devices if device.model_type == model_type]
        return devices

    async def async_get_online_devices(self) -> list[Device]:
        """All devices currently reported online."""
        devices = await self.async_get_devices_by_type()
        return [device for device in devices if device.online]

    # -------------------------------------------------------------------------
    # Scenes
    # -------------------------------------------------------------------------

    @aqara_request(
        Intent.QUERY_SCENE_LIST,
        cache_key=CACHE_KEY_SCENE_LIST,
        cache_ttl=API_DEFAULTS.SCENE_LIST_TTL,
    )
    async def async_get_scene_list(self, page_num: int = 1, page_size: int = API_DEFAULTS.PAGE_SIZE) -> dict:
        """List scenes of the account (cached for 10 minutes)."""
        require_pagination(page_num, page_size)
        return {"pageNum": page_num, "pageSize": page_size}

    @aqara_request(Intent.RUN_SCENE)
    async def async_execute_scene(self, scene_id: str) -> dict:
        """Trigger a scene. Fire-and-forget on the Aqara side."""
        require_identifier("sceneId", scene_id)
        return {"sceneId": scene_id}

    # -------------------------------------------------------------------------
    # Cache and statistics
    # -------------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Clear all cached data."""
        self._cache.clear()

    def get_stats(self) -> dict:
        """Cache, rate limiter and per-intent request statistics."""
        return {
            "cache": self._cache.stats(),
            "limiter": self._rate_limiter.counts(),
            "requests": self._request_tracker.get_summary(),
        }
