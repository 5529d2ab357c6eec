"""Protocol definitions for dependency injection and testability."""

from typing import Any, Mapping, Protocol, Union

from .models import (
    ConvertSpec,
    CropSpec,
    ImageInfoResult,
    ProcessedImageResult,
    ResizeSpec,
)


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class ImageOperationsProtocol(Protocol):
    """The operations a command dispatcher can route to."""

    def crop(self, payload: str, spec: Union[CropSpec, Mapping[str, Any]]) -> ProcessedImageResult:
        ...

    def resize(self, payload: str, spec: Union[ResizeSpec, Mapping[str, Any]]) -> ProcessedImageResult:
        ...

    def convert(self, payload: str, spec: Union[ConvertSpec, Mapping[str, Any]]) -> ProcessedImageResult:
        ...

    def compare(self, first_payload: str, second_payload: str) -> ProcessedImageResult:
        ...

    def inspect(self, payload: str) -> ImageInfoResult:
        ...
