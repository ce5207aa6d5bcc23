"""Constants and Enums for the Aqara MCP server."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

SERVER_NAME = "aqara-mcp"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = "MCP server for Aqara home automation control and monitoring"

# Single JSON-RPC style endpoint of the Aqara open API
API_PATH = "/v3.0/open/api"
USER_AGENT = "AqaraMCPServer/1.0.0"
LANG = "en"

DEFAULT_REGION = "usa"

# Region -> base endpoint
REGION_DOMAINS: dict[str, str] = {
    "cn": "https://open-cn.aqara.com",
    "usa": "https://open-usa.aqara.com",
    "eu": "https://open-ger.aqara.com",
    "kr": "https://open-kr.aqara.com",
    "ru": "https://open-ru.aqara.com",
    "sg": "https://open-sg.aqara.com",
}

# Environment variables
ENV_APP_ID = "AQARA_APP_ID"
ENV_APP_KEY = "AQARA_APP_KEY"
ENV_KEY_ID = "AQARA_KEY_ID"
ENV_APP_SECRET = "AQARA_APP_SECRET"
ENV_REGION = "AQARA_REGION"
ENV_ACCESS_TOKEN = "AQARA_ACCESS_TOKEN"
ENV_LOG_LEVEL = "AQARA_LOG_LEVEL"

REQUIRED_ENV_VARS: tuple[str, ...] = (
    ENV_APP_ID,
    ENV_APP_KEY,
    ENV_KEY_ID,
    ENV_APP_SECRET,
)


class Intent(StrEnum):
    """Intents understood by the Aqara open API."""

    QUERY_DEVICE_LIST = "query.device.list"
    QUERY_DEVICE_INFO = "query.device.info"
    WRITE_DEVICE_RESOURCE = "write.device.resource"
    QUERY_SCENE_LIST = "query.scene.list"
    RUN_SCENE = "config.scene.run"
    FETCH_DEVICE_HISTORY = "fetch.device.history"


# Cache key templates, formatted with the bound arguments of the operation
CACHE_KEY_DEVICE_LIST = "devices_{page_num}_{page_size}"
CACHE_KEY_DEVICE_STATUS = "device_status_{device_id}"
CACHE_KEY_SCENE_LIST = "scenes_{page_num}_{page_size}"


class APIDefaults(BaseModel):
    """Default values for API configuration.

    Immutable configuration values for timeouts, caching and rate limiting.
    These values can be overridden when instantiating AqaraAPI, RateLimiter
    or ResponseCache.
    """

    model_config = {"frozen": True}

    REQUEST_TIMEOUT: int = Field(default=15, description="Total timeout for one API request in seconds")
    MAX_CONCURRENT: int = Field(default=3, description="Maximum number of requests in flight at once")
    MIN_REQUEST_INTERVAL: float = Field(
        default=0.2,
        description="Minimum interval between request starts in seconds (5 requests/second)",
    )
    DEFAULT_CACHE_TTL: float = Field(default=600.0, description="Fallback cache time-to-live in seconds")
    DEVICE_LIST_TTL: float = Field(default=300.0, description="Cache time-to-live for device lists in seconds")
    DEVICE_STATUS_TTL: float = Field(default=30.0, description="Cache time-to-live for device status in seconds")
    SCENE_LIST_TTL: float = Field(default=600.0, description="Cache time-to-live for scene lists in seconds")
    PAGE_SIZE: int = Field(default=30, description="Default page size for device and scene lists")
    HISTORY_PAGE_SIZE: int = Field(default=100, description="Default page size for history queries")
    FULL_LIST_PAGE_SIZE: int = Field(
        default=100,
        description="Page size used when the whole device or scene list is needed",
    )


# Create a default instance for easy access
API_DEFAULTS = APIDefaults()
