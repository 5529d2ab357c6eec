"""Core codec, geometry and transform components of the image toolkit."""

from .codec import (
    DecodedImage,
    decode,
    decode_base64,
    encode,
    encode_base64,
    sniff_format,
    to_data_url,
)
from .exceptions import (
    BufferConstructionError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    ImageProcessingError,
    ImageToolkitError,
    UnsupportedFormatError,
    ValidationError,
    with_error_handling,
)
from .geometry import CropBox, resolve_crop, resolve_resize
from .logging_config import get_logger, setup_logger
from .models import (
    CommandResponse,
    ConvertSpec,
    CropSpec,
    ImageFormat,
    ImageInfoResult,
    ProcessedImageResult,
    ResizeSpec,
    ToolkitConfig,
)
from .operations import compare, convert, crop, inspect, resize

__all__ = [
    "DecodedImage",
    "decode",
    "decode_base64",
    "encode",
    "encode_base64",
    "sniff_format",
    "to_data_url",
    "CropBox",
    "resolve_crop",
    "resolve_resize",
    "crop",
    "resize",
    "convert",
    "compare",
    "inspect",
    "ImageFormat",
    "CropSpec",
    "ResizeSpec",
    "ConvertSpec",
    "ProcessedImageResult",
    "ImageInfoResult",
    "CommandResponse",
    "ToolkitConfig",
    "setup_logger",
    "get_logger",
    "ImageToolkitError",
    "DecodeError",
    "ValidationError",
    "UnsupportedFormatError",
    "EncodeError",
    "BufferConstructionError",
    "ImageProcessingError",
    "ConfigurationError",
    "with_error_handling",
]
