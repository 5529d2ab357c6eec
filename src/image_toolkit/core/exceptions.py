"""Custom exceptions and error handling utilities for the image toolkit."""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, TypeVar

from .logging_config import get_logger

logger = get_logger("image-toolkit.operations")


class ImageToolkitError(Exception):
    """Base exception for all image toolkit errors."""

    stage = "process"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(ImageToolkitError):
    """Input bytes are not a decodable image (or not valid base64)."""

    stage = "decode"


class ValidationError(ImageToolkitError):
    """Requested geometry is out of bounds or degenerate."""

    stage = "validate"


class UnsupportedFormatError(ImageToolkitError):
    """Target format name is not one of the supported formats."""

    stage = "format"

    def __init__(self, format_name: str) -> None:
        super().__init__(f"Unsupported format: {format_name}")
        self.format_name = format_name


class EncodeError(ImageToolkitError):
    """Pixel grid cannot be serialized to the requested format."""

    stage = "encode"


class BufferConstructionError(ImageToolkitError):
    """Difference buffer length does not match the comparison canvas."""

    stage = "compare"


class ImageProcessingError(ImageToolkitError):
    """Unexpected failure while running an operation."""


class ConfigurationError(ImageToolkitError):
    """Error raised for invalid configuration options."""

    stage = "config"


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function with standardized error handling."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        try:
            return func(*args, **kwargs)
        except ImageToolkitError as exc:
            logger.error(f"{func.__name__} failed at {exc.stage} stage: {exc}")
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise ImageProcessingError(f"{func.__name__} failed: {exc}") from exc

    return wrapper  # type: ignore[return-value]


@contextmanager
def error_boundary(error_cls: type[ImageToolkitError], prefix: str) -> Iterator[None]:
    """Re-raise any non-toolkit exception as ``error_cls`` with a prefixed message."""
    try:
        yield
    except ImageToolkitError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise error_cls(f"{prefix}: {exc}") from exc
