"""Data models for the Aqara MCP server.

This module provides Pydantic models for the Aqara open API payloads
(response envelope, devices, scenes, history points) together with the
envelope unwrapping step of the request pipeline.

Field names follow Python conventions; the camelCase names used on the
wire are kept as aliases and unknown vendor fields are preserved so that
payloads can be passed back to the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .infrastructure.errors import AqaraAPIError, AqaraResponseFormatError

_LOGGER = logging.getLogger(__name__)

ResourceValue = str | int | float | bool


class AqaraModel(BaseModel):
    """Base model for all Aqara data structures."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) names, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AqaraResponse(AqaraModel):
    """Uniform response envelope of the Aqara open API.

    ``code == 0`` is the only success code. The payload is carried in
    ``result`` or ``data`` depending on the endpoint; both are checked.

    Example:
        >>> response = AqaraResponse.model_validate({"code": 0, "requestId": "r1", "result": []})
        >>> response.payload
        []
    """

    model_config = {"frozen": True}

    code: int = Field(..., description="Status code, 0 means success")
    request_id: str = Field(default="", alias="requestId", description="Request ID for support")
    message: str = Field(default="", description="Status message")
    msg_details: Any = Field(default=None, alias="msgDetails", description="Error details")
    result: Any = Field(default=None, description="Payload of most intents")
    data: Any = Field(default=None, description="Payload of some intents")

    @property
    def payload(self) -> Any:
        """``data`` when present, otherwise ``result``."""
        return self.data if self.data is not None else self.result

    def items(self) -> list:
        """List payload of list intents.

        Accepts a bare list or an object wrapping the list in ``data``.
        """
        payload = self.payload
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            return payload["data"]
        return []


def unwrap_envelope(body: Any) -> AqaraResponse:
    """Turn a decoded response body into an AqaraResponse.

    Raises:
        AqaraResponseFormatError: If the body is not an envelope.
        AqaraAPIError: If the envelope carries a non-zero code.
    """
    if not isinstance(body, dict) or not body:
        raise AqaraResponseFormatError("Invalid response format from Aqara API")

    try:
        response = AqaraResponse.model_validate(body)
    except ValidationError as err:
        raise AqaraResponseFormatError("Invalid response format from Aqara API") from err

    if response.code != 0:
        raise AqaraAPIError(
            response.code,
            response.message,
            response.msg_details,
            response.request_id or None,
        )
    return response


class ResourceInfo(AqaraModel):
    """A readable or writable attribute of a device."""

    resource_id: str = Field(..., alias="resourceId")
    resource_name: str = Field(default="", alias="resourceName")
    access: list[str] = Field(default_factory=list)
    unit: str | None = None
    description: str | None = None


class Device(AqaraModel):
    """An Aqara device as returned by ``query.device.list``.

    Attributes:
        did: Device ID.
        uid: User ID.
        name: Device name.
        model: Device model.
        model_type: Model type code.
        online: Online status.
        firmware_version: Firmware version.
        create_time: Creation timestamp (ms).
        update_time: Last update timestamp (ms).
        resource_info: Available resources.
    """

    did: str = Field(..., min_length=1, description="Device ID")
    uid: str | None = Field(default=None, description="User ID")
    name: str = Field(default="Unknown Device", description="Device name")
    model: str | None = Field(default=None, description="Device model")
    model_type: int | None = Field(default=None, alias="modelType", description="Model type code")
    online: bool = Field(default=False, description="Online status")
    firmware_version: str | None = Field(default=None, alias="firmwareVersion")
    create_time: int | None = Field(default=None, alias="createTime")
    update_time: int | None = Field(default=None, alias="updateTime")
    resource_info: list[ResourceInfo] | None = Field(default=None, alias="resourceInfo")

    @classmethod
    def from_api_dict(cls, device_dict: dict) -> Device | None:
        """Parse a device entry from the API, ``None`` if it is unusable."""
        if not isinstance(device_dict, dict):
            return None
        raw = dict(device_dict)
        # Both "name" and "deviceName" show up depending on the intent
        if "name" not in raw and "deviceName" in raw:
            raw["name"] = raw["deviceName"]
        if "online" not in raw and raw.get("state") is not None:
            raw["online"] = raw["state"] == 1
        try:
            return cls.model_validate(raw)
        except ValidationError as err:
            _LOGGER.debug("Skipping unparseable device entry %s: %s", device_dict, err)
            return None


class Scene(AqaraModel):
    """An Aqara scene as returned by ``query.scene.list``."""

    scene_id: str = Field(..., min_length=1, alias="sceneId", description="Scene ID")
    name: str = Field(default="", description="Scene name")
    description: str | None = None
    enable: bool | None = Field(default=None, description="Whether scene is enabled")
    create_time: int | None = Field(default=None, alias="createTime")
    update_time: int | None = Field(default=None, alias="updateTime")

    @classmethod
    def from_api_dict(cls, scene_dict: dict) -> Scene | None:
        """Parse a scene entry from the API, ``None`` if it is unusable."""
        try:
            return cls.model_validate(scene_dict)
        except ValidationError as err:
            _LOGGER.debug("Skipping unparseable scene entry %s: %s", scene_dict, err)
            return None


class DeviceResource(AqaraModel):
    """One resource write of a ``write.device.resource`` request."""

    model_config = {"extra": "forbid"}

    subject_id: str = Field(..., min_length=1, alias="subjectId")
    resource_id: str = Field(..., min_length=1, alias="resourceId")
    value: ResourceValue


class HistoryDataPoint(AqaraModel):
    """A single historical value of a device resource."""

    time: int
    value: ResourceValue
    resource_id: str = Field(..., alias="resourceId")

    @classmethod
    def from_api_dict(cls, point_dict: dict) -> HistoryDataPoint | None:
        try:
            return cls.model_validate(point_dict)
        except ValidationError as err:
            _LOGGER.debug("Skipping unparseable history entry %s: %s", point_dict, err)
            return None


def parse_items(model: type[Device] | type[Scene] | type[HistoryDataPoint], items: list) -> list:
    """Parse raw list entries with ``model.from_api_dict``, skipping bad ones."""
    parsed = []
    for item in items:
        entry = model.from_api_dict(item)
        if entry is not None:
            parsed.append(entry)
    return parsed
