"""MCP tool and resource handlers for the Aqara MCP server.

This module contains the caller-facing operations:
- list_devices / get_device_status / control_device
- list_scenes / execute_scene
- get_device_history
- clear_cache
- the devices, scenes, online devices and stats resources

Every handler returns text: a JSON success envelope, or a plain error
description. No handler raises; errors of every kind are rendered at this
boundary with ``format_error``.
"""

import logging
from typing import Annotated

from pydantic import Field

from .aqara_api import AqaraAPI
from .constants import API_DEFAULTS
from .helpers import error_response, format_error, resource_response, success_response
from .infrastructure.errors import AqaraError
from .models import Scene, parse_items

_LOGGER = logging.getLogger(__name__)

PageNum = Annotated[int, Field(ge=1, description="Page number for pagination")]
DeviceId = Annotated[str, Field(description="The device ID (did) - get this from list_devices")]


class AqaraTools:
    """Caller-facing operations backed by an AqaraAPI client."""

    def __init__(self, api: AqaraAPI):
        self.api = api

    def _render_error(self, action: str, err: Exception) -> str:
        if isinstance(err, AqaraError):
            _LOGGER.warning("%s failed: %s", action, err)
        else:
            _LOGGER.exception("Unexpected error during %s", action)
        return format_error(err)

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def list_devices(
        self,
        pageNum: PageNum = 1,
        pageSize: Annotated[int, Field(ge=1, description="Number of devices per page")] = API_DEFAULTS.PAGE_SIZE,
        onlineOnly: Annotated[bool, Field(description="Show only online devices")] = False,
    ) -> str:
        """List all Aqara devices in your home with their current status."""
        try:
            if onlineOnly:
                devices = await self.api.async_get_online_devices()
                return success_response(
                    "Online devices retrieved successfully",
                    count=len(devices),
                    devices=devices,
                )

            response = await self.api.async_get_device_list(pageNum, pageSize)
            return success_response("Devices retrieved successfully", **response.to_api_dict())
        except Exception as err:
            return self._render_error("list_devices", err)

    async def get_device_status(self, deviceId: DeviceId) -> str:
        """Get detailed status information for a specific Aqara device."""
        try:
            response = await self.api.async_get_device_status(deviceId)
            return success_response("Device status retrieved successfully", **response.to_api_dict())
        except Exception as err:
            return self._render_error("get_device_status", err)

    async def control_device(
        self,
        deviceId: DeviceId,
        resourceId: Annotated[
            str, Field(description='The resource/attribute ID to control (e.g., "4.1.85" for power)')
        ],
        value: Annotated[
            bool | int | float | str,
            Field(description="The value to set (true/false for switches, numbers for dimmers, etc.)"),
        ],
    ) -> str:
        """Control an Aqara device (turn on/off, adjust settings, etc.)."""
        try:
            response = await self.api.async_control_device(deviceId, resourceId, value)
            return success_response(
                "Device controlled successfully",
                deviceId=deviceId,
                resourceId=resourceId,
                setValue=value,
                result=response.to_api_dict(),
            )
        except Exception as err:
            return self._render_error("control_device", err)

    async def list_scenes(
        self,
        pageNum: PageNum = 1,
        pageSize: Annotated[int, Field(ge=1, description="Number of scenes per page")] = API_DEFAULTS.PAGE_SIZE,
        enabledOnly: Annotated[bool, Field(description="Show only enabled scenes")] = False,
    ) -> str:
        """List all available Aqara scenes and automations."""
        try:
            response = await self.api.async_get_scene_list(pageNum, pageSize)
            scenes = response.items()
            if enabledOnly:
                scenes = [scene for scene in parse_items(Scene, scenes) if scene.enable is True]

            return success_response("Scenes retrieved successfully", count=len(scenes), scenes=scenes)
        except Exception as err:
            return self._render_error("list_scenes", err)

    async def execute_scene(
        self,
        sceneId: Annotated[str, Field(description="The scene ID to execute - get this from list_scenes")],
    ) -> str:
        """Execute/trigger an Aqara scene or automation."""
        try:
            response = await self.api.async_execute_scene(sceneId)
            return success_response(
                "Scene executed successfully",
                sceneId=sceneId,
                result=response.to_api_dict(),
            )
        except Exception as err:
            return self._render_error("execute_scene", err)

    async def get_device_history(
        self,
        deviceId: Annotated[str, Field(description="The device ID (did)")],
        resourceId: Annotated[str, Field(description="The resource/attribute ID to get history for")],
        startTime: Annotated[str, Field(description='Start time in ISO format (e.g., "2024-01-01T00:00:00Z")')],
        endTime: Annotated[str, Field(description='End time in ISO format (e.g., "2024-01-02T00:00:00Z")')],
        pageNum: PageNum = 1,
        pageSize: Annotated[
            int, Field(ge=1, description="Number of records per page")
        ] = API_DEFAULTS.HISTORY_PAGE_SIZE,
    ) -> str:
        """Get historical data for a device attribute (sensor readings, state changes, etc.)."""
        try:
            response = await self.api.async_get_device_history(
                deviceId, resourceId, startTime, endTime, pageNum, pageSize
            )
            return success_response(
                "Device history retrieved successfully",
                deviceId=deviceId,
                resourceId=resourceId,
                timeRange={"startTime": startTime, "endTime": endTime},
                result=response.to_api_dict(),
            )
        except Exception as err:
            return self._render_error("get_device_history", err)

    async def clear_cache(self) -> str:
        """Clear the internal cache to force fresh data retrieval."""
        try:
            self.api.clear_cache()
            return success_response("Cache cleared successfully", indent=None)
        except Exception as err:
            return self._render_error("clear_cache", err)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    async def devices_resource(self) -> str:
        """Complete list of all Aqara devices in your home."""
        try:
            response = await self.api.async_get_device_list(1, API_DEFAULTS.FULL_LIST_PAGE_SIZE)
            return resource_response("Device list resource", **response.to_api_dict())
        except Exception as err:
            self._render_error("devices resource", err)
            return error_response(err)

    async def scenes_resource(self) -> str:
        """Complete list of all available Aqara scenes and automations."""
        try:
            response = await self.api.async_get_scene_list(1, API_DEFAULTS.FULL_LIST_PAGE_SIZE)
            return resource_response("Scene list resource", **response.to_api_dict())
        except Exception as err:
            self._render_error("scenes resource", err)
            return error_response(err)

    async def online_devices_resource(self) -> str:
        """List of currently online Aqara devices."""
        try:
            devices = await self.api.async_get_online_devices()
            return resource_response("Online devices resource", count=len(devices), devices=devices)
        except Exception as err:
            self._render_error("online devices resource", err)
            return error_response(err)

    async def stats_resource(self) -> str:
        """Cache, rate limiter and request statistics."""
        return resource_response("Statistics resource", **self.api.get_stats())
