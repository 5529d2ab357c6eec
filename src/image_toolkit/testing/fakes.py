"""Fake implementations and image builders for testing purposes."""

import base64
import io
import time
from typing import Any, Dict, List, Optional, Tuple, Union

from PIL import Image

from ..core.observability import LogContext

Color = Union[int, Tuple[int, ...]]


class FakeLogger:
    """In-memory LoggerProtocol implementation that keeps every entry as a dict."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(
        self, level: str, message: str, context: Optional[LogContext], **kwargs: Any
    ) -> None:
        entry: Dict[str, Any] = {"level": level, "message": message, "timestamp": time.time()}
        if context is not None:
            entry.update(
                correlation_id=context.correlation_id,
                operation=context.operation,
                component=context.component,
            )
            entry.update(context.metadata)
        entry.update(kwargs)
        self.logs.append(entry)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log("DEBUG", message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log("INFO", message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log("WARNING", message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log("ERROR", message, context, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get logged messages, optionally filtered by level."""
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()

    def clear_logs(self) -> None:
        """Clear all logged messages."""
        self.logs.clear()


def create_test_image(
    width: int = 100,
    height: int = 100,
    mode: str = "RGB",
    format: str = "PNG",
    color: Optional[Color] = None,
) -> bytes:
    """
    Create a patterned test image and return its encoded bytes.

    Blue 10x10 squares are painted on a red background so crops and resizes
    have content to move around.
    """
    patterned = color is None
    if color is None:
        color = _default_color(mode, (255, 0, 0))
    image = Image.new(mode, (width, height), color=color)
    if patterned and mode in ("RGB", "RGBA"):
        accent = _default_color(mode, (0, 0, 255))
        for x in range(0, width, 20):
            for y in range(0, height, 20):
                if (x + y) % 40 == 0:
                    image.paste(accent, (x, y, min(x + 10, width), min(y + 10, height)))

    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format)
    return img_bytes.getvalue()


def create_solid_image(
    width: int, height: int, color: Color, mode: str = "RGB", format: str = "PNG"
) -> bytes:
    """Create an image filled with a single color."""
    image = Image.new(mode, (width, height), color=color)
    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format)
    return img_bytes.getvalue()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def create_test_image_base64(
    width: int = 100, height: int = 100, mode: str = "RGB", format: str = "PNG"
) -> str:
    """Base64 text of :func:`create_test_image`."""
    return to_base64(create_test_image(width, height, mode=mode, format=format))


def open_result(payload: str) -> Image.Image:
    """Decode a base64 result payload into a loaded Pillow image."""
    image = Image.open(io.BytesIO(base64.b64decode(payload)))
    image.load()
    return image


def _default_color(mode: str, rgb: Tuple[int, int, int]) -> Color:
    if mode == "RGBA":
        return rgb + (255,)
    if mode == "RGB":
        return rgb
    if mode == "LA":
        return (128, 255)
    return 128
