"""Tests for Aqara data models."""

import pytest
from pydantic import ValidationError

from aqara_mcp.infrastructure.errors import AqaraAPIError, AqaraResponseFormatError
from aqara_mcp.models import (
    AqaraResponse,
    Device,
    DeviceResource,
    HistoryDataPoint,
    Scene,
    parse_items,
    unwrap_envelope,
)


class TestAqaraResponse:
    """Tests for the response envelope."""

    def test_payload_prefers_data(self):
        response = AqaraResponse.model_validate({"code": 0, "result": "r", "data": "d"})

        assert response.payload == "d"

    def test_payload_falls_back_to_result(self):
        response = AqaraResponse.model_validate({"code": 0, "result": [1, 2]})

        assert response.payload == [1, 2]

    def test_items_from_bare_list(self):
        response = AqaraResponse.model_validate({"code": 0, "result": [{"did": "a"}]})

        assert response.items() == [{"did": "a"}]

    def test_items_from_wrapped_list(self):
        """List intents may wrap the list in a data key with a total count."""
        response = AqaraResponse.model_validate({"code": 0, "result": {"data": [{"did": "a"}], "totalCount": 1}})

        assert response.items() == [{"did": "a"}]

    def test_items_without_list(self):
        response = AqaraResponse.model_validate({"code": 0, "result": {"ok": True}})

        assert response.items() == []

    def test_to_api_dict_uses_wire_names(self):
        """Serialization keeps camelCase names and unknown fields."""
        response = AqaraResponse.model_validate({"code": 0, "requestId": "r1", "result": [], "extraField": 5})

        data = response.to_api_dict()

        assert data["requestId"] == "r1"
        assert data["extraField"] == 5
        assert "data" not in data


class TestUnwrapEnvelope:
    """Tests for unwrap_envelope."""

    def test_success(self):
        response = unwrap_envelope({"code": 0, "requestId": "r1", "message": "Success", "result": []})

        assert response.code == 0
        assert response.request_id == "r1"

    def test_nonzero_code_raises_api_error(self):
        """The code, message, details and request id are carried over."""
        body = {"code": 302, "requestId": "r9", "message": "Param error", "msgDetails": "did missing"}

        with pytest.raises(AqaraAPIError) as exc_info:
            unwrap_envelope(body)

        err = exc_info.value
        assert err.code == 302
        assert err.message == "Param error"
        assert err.details == "did missing"
        assert err.request_id == "r9"

    @pytest.mark.parametrize("body", [None, {}, [], "text", {"message": "no code"}])
    def test_invalid_body(self, body):
        with pytest.raises(AqaraResponseFormatError, match="Invalid response format"):
            unwrap_envelope(body)


class TestDevice:
    """Tests for Device model."""

    def test_from_api_dict(self, mock_devices):
        device = Device.from_api_dict(mock_devices[0])

        assert device.did == "lumi.0001"
        assert device.name == "Living Room Light"
        assert device.model_type == 2
        assert device.online is True
        assert device.firmware_version == "1.0.5"

    def test_device_name_alias(self):
        """deviceName is accepted when name is missing."""
        device = Device.from_api_dict({"did": "x", "deviceName": "Hall Switch"})

        assert device.name == "Hall Switch"

    def test_online_from_state(self):
        assert Device.from_api_dict({"did": "x", "state": 1}).online is True
        assert Device.from_api_dict({"did": "x", "state": 0}).online is False

    def test_defaults(self):
        device = Device.from_api_dict({"did": "x"})

        assert device.name == "Unknown Device"
        assert device.online is False

    @pytest.mark.parametrize("raw", [{}, {"did": ""}, "lumi.0001", None])
    def test_unusable_entry(self, raw):
        assert Device.from_api_dict(raw) is None

    def test_round_trip_keeps_unknown_fields(self):
        raw = {"did": "x", "name": "n", "positionId": "real1.123"}

        assert Device.from_api_dict(raw).to_api_dict()["positionId"] == "real1.123"


class TestScene:
    """Tests for Scene model."""

    def test_from_api_dict(self, mock_scenes):
        scene = Scene.from_api_dict(mock_scenes[0])

        assert scene.scene_id == "AL.1"
        assert scene.name == "Good Night"
        assert scene.enable is True

    def test_missing_scene_id(self):
        assert Scene.from_api_dict({"name": "no id"}) is None


class TestDeviceResource:
    """Tests for DeviceResource model."""

    @pytest.mark.parametrize("value", [True, 1, 0.5, "on"])
    def test_accepted_values(self, value):
        resource = DeviceResource(subject_id="lumi.1", resource_id="4.1.85", value=value)

        assert resource.to_api_dict() == {"subjectId": "lumi.1", "resourceId": "4.1.85", "value": value}

    def test_boolean_stays_boolean(self):
        resource = DeviceResource(subject_id="lumi.1", resource_id="4.1.85", value=True)

        assert resource.value is True

    def test_rejects_structured_value(self):
        with pytest.raises(ValidationError):
            DeviceResource(subject_id="lumi.1", resource_id="4.1.85", value={"on": 1})


class TestHistoryAndParseItems:
    """Tests for HistoryDataPoint and parse_items."""

    def test_history_point(self):
        point = HistoryDataPoint.from_api_dict({"time": 1700000000000, "value": "21.5", "resourceId": "0.1.85"})

        assert point.time == 1700000000000
        assert point.resource_id == "0.1.85"

    def test_parse_items_skips_bad_entries(self, mock_devices):
        devices = parse_items(Device, [*mock_devices, {"name": "no did"}, "junk"])

        assert [device.did for device in devices] == ["lumi.0001", "lumi.0002", "lumi.0003"]
