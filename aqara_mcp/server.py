"""MCP server entry point for Aqara home automation.

Builds a FastMCP server around an AqaraAPI client and runs it over stdio.
Configuration comes from the environment (optionally a ``.env`` file):
AQARA_APP_ID, AQARA_APP_KEY, AQARA_KEY_ID and AQARA_APP_SECRET are
required; AQARA_REGION, AQARA_ACCESS_TOKEN and AQARA_LOG_LEVEL are optional.
"""

import logging
import os
import signal
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastmcp import FastMCP

from .aqara_api import AqaraAPI
from .config import AqaraConfig
from .constants import ENV_LOG_LEVEL, SERVER_INSTRUCTIONS, SERVER_NAME
from .infrastructure.errors import AqaraConfigurationError
from .prompts import AqaraPrompts
from .tools import AqaraTools

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the MCP stdio transport."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def _build_lifespan(api: AqaraAPI):
    @asynccontextmanager
    async def lifespan(server: FastMCP):
        try:
            yield {}
        finally:
            _LOGGER.info("Shutting down Aqara MCP Server...")
            await api.shutdown()

    return lifespan


def create_server(api: AqaraAPI) -> FastMCP:
    """Create the FastMCP server and register tools, resources and prompts."""
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, lifespan=_build_lifespan(api))
    tools = AqaraTools(api)
    prompts = AqaraPrompts(api)

    # Tools
    mcp.tool(
        name="list_devices",
        description="List all Aqara devices in your home with their current status",
    )(tools.list_devices)
    mcp.tool(
        name="get_device_status",
        description="Get detailed status information for a specific Aqara device",
    )(tools.get_device_status)
    mcp.tool(
        name="control_device",
        description="Control an Aqara device (turn on/off, adjust settings, etc.)",
    )(tools.control_device)
    mcp.tool(
        name="list_scenes",
        description="List all available Aqara scenes and automations",
    )(tools.list_scenes)
    mcp.tool(
        name="execute_scene",
        description="Execute/trigger an Aqara scene or automation",
    )(tools.execute_scene)
    mcp.tool(
        name="get_device_history",
        description="Get historical data for a device attribute (sensor readings, state changes, etc.)",
    )(tools.get_device_history)
    mcp.tool(
        name="clear_cache",
        description="Clear the internal cache to force fresh data retrieval",
    )(tools.clear_cache)

    # Resources
    mcp.resource(
        "aqara://devices",
        name="Aqara Devices",
        description="Complete list of all Aqara devices in your home",
        mime_type="application/json",
    )(tools.devices_resource)
    mcp.resource(
        "aqara://scenes",
        name="Aqara Scenes",
        description="Complete list of all available Aqara scenes and automations",
        mime_type="application/json",
    )(tools.scenes_resource)
    mcp.resource(
        "aqara://devices/online",
        name="Online Aqara Devices",
        description="List of currently online Aqara devices",
        mime_type="application/json",
    )(tools.online_devices_resource)
    mcp.resource(
        "aqara://stats",
        name="Aqara API Statistics",
        description="Cache hit rate, rate limiter queue and request counts per intent",
        mime_type="application/json",
    )(tools.stats_resource)

    # Prompts
    mcp.prompt(
        name="home_status",
        description="Get a comprehensive summary of all devices in your Aqara smart home",
    )(prompts.home_status)
    mcp.prompt(
        name="goodnight_routine",
        description="Execute a comprehensive goodnight routine for your smart home",
    )(prompts.goodnight_routine)
    mcp.prompt(
        name="morning_routine",
        description="Execute a morning routine to wake up your smart home",
    )(prompts.morning_routine)
    mcp.prompt(
        name="device_troubleshooting",
        description="Help troubleshoot issues with Aqara devices",
    )(prompts.device_troubleshooting)

    return mcp


def _handle_sigterm(signum, frame):
    raise KeyboardInterrupt


def main() -> None:
    """Console entry point: validate configuration and serve over stdio."""
    load_dotenv()
    setup_logging(os.environ.get(ENV_LOG_LEVEL, "INFO"))

    try:
        config = AqaraConfig.from_env()
    except AqaraConfigurationError as err:
        _LOGGER.error("Environment validation failed: %s", err)
        sys.exit(1)

    api = AqaraAPI(config)
    mcp = create_server(api)

    _LOGGER.info("Starting Aqara MCP Server...")
    _LOGGER.info("Region: %s", config.region)
    _LOGGER.info("App ID: %s...", config.app_id[:8])

    signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        mcp.run()
    except KeyboardInterrupt:
        _LOGGER.info("Aqara MCP Server stopped")


if __name__ == "__main__":
    main()
