"""Formatting helpers for tool and resource results."""

import json
from typing import Any

from .infrastructure.errors import AqaraAPIError
from .models import AqaraModel


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, AqaraModel):
        return value.to_api_dict()
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def format_error(error: BaseException) -> str:
    """User-facing description of an error.

    Example:
        >>> format_error(AqaraAPIError(108, "Sign error", "bad sign"))
        'Aqara API Error (108): Sign error - bad sign'
    """
    if isinstance(error, AqaraAPIError):
        details = f" - {error.details}" if error.details else ""
        return f"Aqara API Error ({error.code}): {error.message}{details}"

    return f"Error: {str(error) or type(error).__name__}"


def success_response(summary: str, *, indent: int | None = 2, **data: Any) -> str:
    """JSON text of ``{"success": true, "summary": ..., **data}``."""
    payload = {"success": True, "summary": summary}
    payload.update({key: _to_jsonable(value) for key, value in data.items()})
    return json.dumps(payload, indent=indent, default=str)


def resource_response(resource: str, **data: Any) -> str:
    """JSON text of a resource read."""
    payload = {"success": True, "resource": resource}
    payload.update({key: _to_jsonable(value) for key, value in data.items()})
    return json.dumps(payload, indent=2, default=str)


def error_response(error: BaseException) -> str:
    """JSON text of a failed resource read."""
    return json.dumps({"error": format_error(error)})
