"""Image toolkit - crop, resize, convert, compare and inspect base64 images."""

from .core import (
    ConvertSpec,
    CropSpec,
    ImageFormat,
    ImageInfoResult,
    ProcessedImageResult,
    ResizeSpec,
    compare,
    convert,
    crop,
    inspect,
    resize,
)

__version__ = "0.1.0"

__all__ = [
    "crop",
    "resize",
    "convert",
    "compare",
    "inspect",
    "CropSpec",
    "ResizeSpec",
    "ConvertSpec",
    "ImageFormat",
    "ProcessedImageResult",
    "ImageInfoResult",
    "__version__",
]
