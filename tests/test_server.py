"""Tests for server assembly and the console entry point."""

from unittest.mock import patch

import pytest
from fastmcp import Client, FastMCP

from aqara_mcp import server
from aqara_mcp.server import create_server


@pytest.fixture
def mcp(make_api):
    api, _ = make_api()
    return create_server(api)


def test_create_server(mcp):
    assert isinstance(mcp, FastMCP)
    assert mcp.name == "aqara-mcp"


@pytest.mark.asyncio
async def test_registered_tools(mcp):
    """All tools, resources and prompts are exposed."""
    async with Client(mcp) as client:
        tools = {tool.name for tool in await client.list_tools()}
        resources = {str(resource.uri) for resource in await client.list_resources()}
        prompts = {prompt.name for prompt in await client.list_prompts()}

    assert tools == {
        "list_devices",
        "get_device_status",
        "control_device",
        "list_scenes",
        "execute_scene",
        "get_device_history",
        "clear_cache",
    }
    assert resources == {
        "aqara://devices",
        "aqara://scenes",
        "aqara://devices/online",
        "aqara://stats",
    }
    assert prompts == {"home_status", "goodnight_routine", "morning_routine", "device_troubleshooting"}


@pytest.mark.asyncio
async def test_tool_schema_uses_camel_case(mcp):
    async with Client(mcp) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    schema = tools["get_device_history"].inputSchema
    assert set(schema["required"]) == {"deviceId", "resourceId", "startTime", "endTime"}
    assert "pageSize" in schema["properties"]


def test_main_exits_on_missing_configuration(monkeypatch):
    """Startup fails with exit code 1 when credentials are missing."""
    for name in ("AQARA_APP_ID", "AQARA_APP_KEY", "AQARA_KEY_ID", "AQARA_APP_SECRET"):
        monkeypatch.delenv(name, raising=False)

    with patch.object(server, "load_dotenv"), patch.object(server, "setup_logging"):
        with pytest.raises(SystemExit) as exc_info:
            server.main()

    assert exc_info.value.code == 1


def test_main_runs_server(monkeypatch):
    monkeypatch.setenv("AQARA_APP_ID", "app")
    monkeypatch.setenv("AQARA_APP_KEY", "key")
    monkeypatch.setenv("AQARA_KEY_ID", "K.1")
    monkeypatch.setenv("AQARA_APP_SECRET", "secret")

    with (
        patch.object(server, "load_dotenv"),
        patch.object(server, "setup_logging"),
        patch.object(server.signal, "signal"),
        patch.object(FastMCP, "run", side_effect=KeyboardInterrupt) as mock_run,
    ):
        server.main()

    mock_run.assert_called_once()
