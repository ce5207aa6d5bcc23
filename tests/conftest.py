"""Common fixtures for Aqara MCP tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from aqara_mcp.aqara_api import AqaraAPI
from aqara_mcp.config import AqaraConfig
from aqara_mcp.infrastructure.cache import ResponseCache
from aqara_mcp.infrastructure.rate_limiter import RateLimiter


def make_response(body=None, status=200, reason="OK", json_error=None):
    """Create a mock aiohttp response returning ``body`` from ``json()``."""
    response = MagicMock()
    response.status = status
    response.reason = reason
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=body)
    return response


def make_session(*responses):
    """Create a mock aiohttp session whose ``post`` yields ``responses`` in order.

    The last response is reused once the list is exhausted.
    """
    remaining = list(responses)

    def _post(*args, **kwargs):
        response = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        # __aexit__ must return None/False to not suppress exceptions
        context.__aexit__ = AsyncMock(return_value=None)
        return context

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.post = MagicMock(side_effect=_post)
    return session


def envelope(result=None, code=0, message="Success", **extra):
    """Build an Aqara response envelope."""
    body = {"code": code, "requestId": "req-123", "message": message, "result": result}
    body.update(extra)
    return body


@pytest.fixture
def config():
    """Create a config without access token."""
    return AqaraConfig(
        app_id="TestAppId",
        app_key="test-app-key",
        key_id="K.TestKey",
        app_secret="test-secret",
        region="eu",
    )


@pytest.fixture
def config_with_token():
    """Create a config with an access token."""
    return AqaraConfig(
        app_id="TestAppId",
        app_key="test-app-key",
        key_id="K.TestKey",
        app_secret="test-secret",
        region="usa",
        access_token="AbCdEf123",
    )


@pytest.fixture
def mock_devices():
    """Raw device entries as returned by query.device.list."""
    return [
        {
            "did": "lumi.0001",
            "uid": "user-1",
            "name": "Living Room Light",
            "model": "lumi.light.acn014",
            "modelType": 2,
            "online": True,
            "firmwareVersion": "1.0.5",
            "createTime": 1700000000000,
            "updateTime": 1700000100000,
        },
        {
            "did": "lumi.0002",
            "uid": "user-1",
            "name": "Door Sensor",
            "model": "lumi.magnet.agl02",
            "modelType": 3,
            "online": False,
            "firmwareVersion": "2.1.0",
            "createTime": 1700000000000,
            "updateTime": 1700000200000,
        },
        {
            "did": "lumi.0003",
            "uid": "user-1",
            "name": "Bedroom Light",
            "model": "lumi.light.acn014",
            "modelType": 2,
            "online": True,
            "firmwareVersion": "1.0.5",
            "createTime": 1700000000000,
            "updateTime": 1700000300000,
        },
    ]


@pytest.fixture
def mock_scenes():
    """Raw scene entries as returned by query.scene.list."""
    return [
        {"sceneId": "AL.1", "name": "Good Night", "enable": True, "createTime": 1, "updateTime": 2},
        {"sceneId": "AL.2", "name": "Morning", "enable": False, "createTime": 1, "updateTime": 2},
        {"sceneId": "AL.3", "name": "Movie", "enable": True, "createTime": 1, "updateTime": 2},
    ]


@pytest.fixture
def fast_limiter():
    """Rate limiter without start spacing to keep tests fast."""
    return RateLimiter(max_concurrent=3, min_request_interval=0)


@pytest.fixture
def make_api(config, fast_limiter):
    """Factory creating an AqaraAPI on top of a mock session."""

    def _make_api(*responses, cache=None):
        session = make_session(*responses)
        api = AqaraAPI(
            config,
            cache=cache if cache is not None else ResponseCache(),
            rate_limiter=fast_limiter,
            session=session,
        )
        return api, session

    return _make_api
