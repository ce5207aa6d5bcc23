"""Tests for custom exceptions and error formatting."""

import pytest

from aqara_mcp.helpers import error_response, format_error
from aqara_mcp.infrastructure.errors import (
    AqaraAPIError,
    AqaraConfigurationError,
    AqaraConnectionError,
    AqaraError,
    AqaraLimiterStoppedError,
    AqaraResponseFormatError,
    AqaraTimeoutError,
    AqaraValidationError,
)


class TestExceptionHierarchy:
    """Every custom exception derives from AqaraError."""

    @pytest.mark.parametrize(
        "exc",
        [
            AqaraAPIError(1, "x"),
            AqaraConfigurationError(["AQARA_APP_ID"]),
            AqaraConnectionError("x"),
            AqaraTimeoutError("x"),
            AqaraResponseFormatError("x"),
            AqaraValidationError("field", "x"),
            AqaraLimiterStoppedError("x"),
        ],
    )
    def test_is_aqara_error(self, exc):
        assert isinstance(exc, AqaraError)


class TestAqaraAPIError:
    """Tests for AqaraAPIError."""

    def test_attributes(self):
        err = AqaraAPIError(108, "Sign error", "bad sign", "req-1")

        assert err.code == 108
        assert err.message == "Sign error"
        assert err.details == "bad sign"
        assert err.request_id == "req-1"
        assert str(err) == "Sign error"

    def test_defaults(self):
        err = AqaraAPIError(500, "Server error")

        assert err.details is None
        assert err.request_id is None


class TestAqaraConfigurationError:
    """Tests for AqaraConfigurationError."""

    def test_message_lists_missing(self):
        err = AqaraConfigurationError(["AQARA_APP_ID", "AQARA_APP_SECRET"])

        assert err.missing == ["AQARA_APP_ID", "AQARA_APP_SECRET"]
        assert str(err).startswith("Missing required environment variables: AQARA_APP_ID, AQARA_APP_SECRET.")


class TestFormatError:
    """Tests for format_error and error_response."""

    def test_api_error_with_details(self):
        assert format_error(AqaraAPIError(108, "Sign error", "bad sign")) == "Aqara API Error (108): Sign error - bad sign"

    def test_api_error_without_details(self):
        assert format_error(AqaraAPIError(302, "Param error")) == "Aqara API Error (302): Param error"

    def test_generic_error(self):
        assert format_error(AqaraTimeoutError("Request timed out")) == "Error: Request timed out"

    def test_error_without_message(self):
        assert format_error(RuntimeError()) == "Error: RuntimeError"

    def test_error_response(self):
        assert error_response(AqaraAPIError(1, "bad")) == '{"error": "Aqara API Error (1): bad"}'
