"""Input validation for the Aqara MCP server.

This module provides validation functions that run before any request is
sent to the Aqara API. It includes validation for:
- ISO-8601 time strings (history queries)
- Pagination parameters (page number and page size)
- Identifiers (device, resource and scene IDs)

Each ``validate_*`` function returns a ``(is_valid, error_message)`` tuple;
``require_*`` helpers raise AqaraValidationError instead.
"""

from __future__ import annotations

from datetime import datetime

from .errors import AqaraValidationError

ISO_FORMAT_HINT = 'ISO 8601 format (e.g., "2024-01-01T00:00:00Z")'


def validate_iso_time(value: str) -> tuple[bool, str | None]:
    """Validate that a time string is ISO-8601.

    Relative expressions ("yesterday", "2 hours ago") are not parsed here.

    Args:
        value: Time string supplied by the caller.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid, otherwise contains description of the error.

    Example:
        >>> validate_iso_time("2024-01-01T00:00:00Z")
        (True, None)
        >>> validate_iso_time("not-a-date")
        (False, 'Invalid time format. Please use ISO 8601 format (e.g., "2024-01-01T00:00:00Z")')
    """
    if not isinstance(value, str) or not value.strip():
        return False, "Time cannot be empty"

    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False, f"Invalid time format. Please use {ISO_FORMAT_HINT}"

    return True, None


def validate_pagination(page_num: int, page_size: int) -> tuple[bool, str | None]:
    """Validate page number and page size are positive.

    Example:
        >>> validate_pagination(1, 30)
        (True, None)
        >>> validate_pagination(0, 30)
        (False, "Page number must be at least 1")
    """
    if page_num < 1:
        return False, "Page number must be at least 1"
    if page_size < 1:
        return False, "Page size must be at least 1"
    return True, None


def validate_identifier(value: str) -> tuple[bool, str | None]:
    """Validate an Aqara identifier (did, resourceId, sceneId) is not blank."""
    if not isinstance(value, str) or not value.strip():
        return False, "Identifier cannot be empty"
    return True, None


def require_iso_time(field: str, value: str) -> str:
    """Return ``value`` unchanged if it is ISO-8601, else raise AqaraValidationError."""
    is_valid, error_message = validate_iso_time(value)
    if not is_valid:
        raise AqaraValidationError(field, error_message)
    return value


def require_pagination(page_num: int, page_size: int) -> None:
    """Raise AqaraValidationError for non-positive pagination parameters."""
    is_valid, error_message = validate_pagination(page_num, page_size)
    if not is_valid:
        raise AqaraValidationError("pagination", error_message)


def require_identifier(field: str, value: str) -> str:
    """Return ``value`` unchanged if it is a usable identifier."""
    is_valid, error_message = validate_identifier(value)
    if not is_valid:
        raise AqaraValidationError(field, error_message)
    return value
