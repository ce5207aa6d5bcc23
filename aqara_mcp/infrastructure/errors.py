"""Custom exceptions for the Aqara MCP server."""

from __future__ import annotations

from typing import Any


class AqaraError(Exception):
    """Base exception for Aqara."""


class AqaraConfigurationError(AqaraError):
    """Raised when required configuration is missing at startup."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}. "
            "Please check your .env file and ensure all Aqara API credentials are provided."
        )


class AqaraAPIError(AqaraError):
    """Raised when the Aqara API rejects a request (non-zero code)."""

    def __init__(
        self,
        code: int,
        message: str,
        details: Any = None,
        request_id: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.request_id = request_id


class AqaraConnectionError(AqaraError):
    """Raised when connection to the Aqara API fails."""


class AqaraTimeoutError(AqaraError):
    """Raised when request times out."""


class AqaraResponseFormatError(AqaraError):
    """Raised when the Aqara API answers with something that is not an envelope."""


class AqaraValidationError(AqaraError):
    """Raised when input validation fails."""

    def __init__(self, field: str, detail: str):
        super().__init__(f"Invalid {field}: {detail}")
        self.field = field
        self.detail = detail


class AqaraLimiterStoppedError(AqaraError):
    """Raised for queued requests abandoned because the rate limiter was stopped."""
