"""Unit tests for the service layer and command dispatcher."""

import pytest
from unittest.mock import Mock

from image_toolkit.core.exceptions import UnsupportedFormatError, ValidationError
from image_toolkit.core.models import (
    CommandResponse,
    CropSpec,
    ImageInfoResult,
    ToolkitConfig,
)
from image_toolkit.core.observability import MetricsCollector
from image_toolkit.core.services import CommandDispatcher, ImageToolkitService
from image_toolkit.testing.fakes import FakeLogger, create_test_image_base64


@pytest.fixture
def logger():
    return FakeLogger()


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def service(logger, metrics):
    return ImageToolkitService(logger=logger, metrics_collector=metrics)


class TestImageToolkitService:
    """Tests for ImageToolkitService."""

    def test_crop_logs_and_records_metric(self, service, logger, metrics):
        """Test that a successful call is logged and timed."""
        result = service.crop(
            create_test_image_base64(50, 50), CropSpec(x=0, y=0, width=20, height=10)
        )

        assert (result.width, result.height) == (20, 10)
        info_logs = logger.get_logs("INFO")
        assert len(info_logs) == 1
        assert info_logs[0]["message"] == "Completed crop"
        assert info_logs[0]["operation"] == "crop"
        assert info_logs[0]["width"] == 20
        assert info_logs[0]["component"] == "image_toolkit_service"

        recorded = metrics.get_metrics("crop")
        assert len(recorded) == 1
        assert recorded[0].success is True
        assert recorded[0].duration >= 0

    def test_failure_is_logged_and_reraised(self, service, logger, metrics):
        """Test that toolkit errors propagate after being logged."""
        with pytest.raises(UnsupportedFormatError):
            service.convert(create_test_image_base64(10, 10), {"format": "tiff"})

        error_logs = logger.get_logs("ERROR")
        assert len(error_logs) == 1
        assert error_logs[0]["stage"] == "format"
        assert "tiff" in error_logs[0]["error"]

        recorded = metrics.get_metrics("convert")
        assert recorded[0].success is False
        assert "tiff" in recorded[0].error_message

    def test_each_call_gets_its_own_correlation_id(self, service, logger):
        """Test that calls do not share log context."""
        payload = create_test_image_base64(10, 10)
        service.inspect(payload)
        service.inspect(payload)

        ids = {log["correlation_id"] for log in logger.get_logs("INFO")}
        assert len(ids) == 2

    def test_config_is_applied(self, logger):
        """Test that the service passes its config to the operations."""
        service = ImageToolkitService(logger=logger, config=ToolkitConfig(max_pixels=50))
        with pytest.raises(ValidationError, match="exceeds the limit"):
            service.inspect(create_test_image_base64(10, 10))

    def test_default_config(self, logger):
        """Test that a service without config has no pixel limit."""
        service = ImageToolkitService(logger=logger)
        assert service.config.max_pixels is None

    def test_all_operations(self, service, metrics):
        """Test that every operation is reachable through the service."""
        payload = create_test_image_base64(40, 20)

        service.crop(payload, {"x": 0, "y": 0, "width": 4, "height": 4})
        service.resize(payload, {"width": 10, "height": 10, "maintain_aspect_ratio": True})
        service.convert(payload, {"format": "bmp"})
        service.compare(payload, payload)
        info = service.inspect(payload)

        assert isinstance(info, ImageInfoResult)
        summary = metrics.get_summary()
        assert summary["total_operations"] == 5
        assert summary["failed_operations"] == 0


class TestCommandDispatcher:
    """Tests for CommandDispatcher."""

    def test_dispatch_crop(self, service, logger):
        """Test routing a crop command."""
        dispatcher = CommandDispatcher(service, logger)
        response = dispatcher.dispatch(
            "crop_image",
            {
                "base64_data": create_test_image_base64(30, 30),
                "params": {"x": 5, "y": 5, "width": 10, "height": 12},
            },
        )

        assert isinstance(response, CommandResponse)
        assert response.ok is True
        assert response.error is None
        assert response.result["width"] == 10
        assert response.result["height"] == 12
        assert response.result["format"] == "png"

    def test_dispatch_accepts_command_suffix(self, service, logger):
        """Test that desktop-style "_command" names are accepted."""
        dispatcher = CommandDispatcher(service, logger)
        response = dispatcher.dispatch(
            "get_image_info_command", {"base64_data": create_test_image_base64(8, 6)}
        )
        assert response.ok is True
        assert response.result["width"] == 8

    def test_dispatch_compare(self, service, logger):
        """Test routing a compare command with two payloads."""
        dispatcher = CommandDispatcher(service, logger)
        payload = create_test_image_base64(12, 12)
        response = dispatcher.dispatch(
            "compare_images", {"base64_data1": payload, "base64_data2": payload}
        )
        assert response.ok is True
        assert response.result["size_bytes"] > 0

    def test_dispatch_error_is_message_string(self, service, logger):
        """Test that failures cross the boundary as strings."""
        dispatcher = CommandDispatcher(service, logger)
        response = dispatcher.dispatch(
            "crop_image",
            {
                "base64_data": create_test_image_base64(100, 100),
                "params": {"x": 90, "y": 90, "width": 20, "height": 20},
            },
        )
        assert response.ok is False
        assert response.result is None
        assert "exceed image dimensions" in response.error

    def test_dispatch_unknown_command(self, service, logger):
        """Test that unknown commands are reported."""
        dispatcher = CommandDispatcher(service, logger)
        response = dispatcher.dispatch("rotate_image", {})
        assert response.ok is False
        assert response.error == "Unknown command: rotate_image"
        assert logger.get_logs("WARNING")

    def test_dispatch_missing_argument(self, service, logger):
        """Test that missing arguments are reported by name."""
        dispatcher = CommandDispatcher(service, logger)
        response = dispatcher.dispatch("convert_image", {"base64_data": "abc"})
        assert response.ok is False
        assert "params" in response.error

    def test_dispatch_uses_injected_service(self, logger):
        """Test that the dispatcher only talks to its service."""
        fake_service = Mock()
        fake_service.inspect.return_value = ImageInfoResult(
            width=1, height=2, format="png", size_bytes=3
        )
        dispatcher = CommandDispatcher(fake_service, logger)

        response = dispatcher.dispatch("get_image_info", {"base64_data": "payload"})

        fake_service.inspect.assert_called_once_with("payload")
        assert response.result == {"width": 1, "height": 2, "format": "png", "size_bytes": 3}

    def test_command_names(self):
        """Test the published command names."""
        assert CommandDispatcher.command_names() == [
            "compare_images",
            "convert_image",
            "crop_image",
            "get_image_info",
            "resize_image",
        ]
