import logging
from unittest.mock import patch

import pytest

from image_toolkit.core.exceptions import (
    BufferConstructionError,
    DecodeError,
    EncodeError,
    ImageProcessingError,
    ImageToolkitError,
    UnsupportedFormatError,
    ValidationError,
    error_boundary,
    with_error_handling,
)


@with_error_handling
def _fail_func() -> None:
    raise ValueError("boom")


@with_error_handling
def _fail_with_toolkit_error() -> None:
    raise ValidationError("out of bounds")


def test_with_error_handling_wraps_unexpected_errors() -> None:
    with pytest.raises(ImageProcessingError, match="_fail_func failed: boom") as exc_info:
        _fail_func()
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_with_error_handling_reraises_toolkit_errors_unchanged() -> None:
    with pytest.raises(ValidationError, match="out of bounds"):
        _fail_with_toolkit_error()


def test_with_error_handling_logs_error() -> None:
    with patch("image_toolkit.core.exceptions.logger") as mock_logger:
        with pytest.raises(ImageProcessingError):
            _fail_func()
    mock_logger.error.assert_called_once()
    assert "_fail_func" in mock_logger.error.call_args[0][0]


def test_with_error_handling_keeps_logger_level() -> None:
    operations_logger = logging.getLogger("image-toolkit.operations")
    previous = operations_logger.level
    operations_logger.setLevel(logging.DEBUG)
    try:
        with pytest.raises(ValidationError):
            _fail_with_toolkit_error()
        assert operations_logger.level == logging.DEBUG
    finally:
        operations_logger.setLevel(previous)


def test_error_stages() -> None:
    assert DecodeError("x").stage == "decode"
    assert ValidationError("x").stage == "validate"
    assert UnsupportedFormatError("tiff").stage == "format"
    assert EncodeError("x").stage == "encode"
    assert BufferConstructionError("x").stage == "compare"


def test_all_errors_share_base_class() -> None:
    for error_cls in (DecodeError, ValidationError, EncodeError, BufferConstructionError):
        assert issubclass(error_cls, ImageToolkitError)


def test_unsupported_format_message() -> None:
    error = UnsupportedFormatError("tiff")
    assert str(error) == "Unsupported format: tiff"
    assert error.format_name == "tiff"


def test_error_boundary_converts_foreign_errors() -> None:
    with pytest.raises(DecodeError, match="reading header: bad magic"):
        with error_boundary(DecodeError, "reading header"):
            raise OSError("bad magic")


def test_error_boundary_keeps_toolkit_errors() -> None:
    with pytest.raises(ValidationError):
        with error_boundary(DecodeError, "reading header"):
            raise ValidationError("nope")
