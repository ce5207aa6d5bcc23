"""Infrastructure layer for the Aqara MCP server.

This package contains core infrastructure components:
- Request signing
- Rate limiting and response caching
- Validation logic
- Error definitions
- Request tracking
"""

from .cache import DEFAULT_CACHE_TTL, ResponseCache
from .errors import (
    AqaraAPIError,
    AqaraConfigurationError,
    AqaraConnectionError,
    AqaraError,
    AqaraLimiterStoppedError,
    AqaraResponseFormatError,
    AqaraTimeoutError,
    AqaraValidationError,
)
from .rate_limiter import DEFAULT_MAX_CONCURRENT, DEFAULT_MIN_REQUEST_INTERVAL, RateLimiter
from .signing import SignedRequest, build_sign_string, build_signed_request
from .tracking import IntentCounters, RequestTracker
from .validation import (
    require_identifier,
    require_iso_time,
    require_pagination,
    validate_identifier,
    validate_iso_time,
    validate_pagination,
)

__all__ = [
    # Signing
    "SignedRequest",
    "build_sign_string",
    "build_signed_request",
    # Rate limiting and caching
    "RateLimiter",
    "ResponseCache",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_MAX_CONCURRENT",
    "DEFAULT_MIN_REQUEST_INTERVAL",
    # Errors
    "AqaraError",
    "AqaraAPIError",
    "AqaraConfigurationError",
    "AqaraConnectionError",
    "AqaraLimiterStoppedError",
    "AqaraResponseFormatError",
    "AqaraTimeoutError",
    "AqaraValidationError",
    # Tracking
    "IntentCounters",
    "RequestTracker",
    # Validation
    "validate_iso_time",
    "validate_pagination",
    "validate_identifier",
    "require_iso_time",
    "require_pagination",
    "require_identifier",
]
