"""The five stateless image operations.

Each operation takes base64 text, decodes it, computes, re-encodes and
returns a result record. Nothing is cached or shared between calls.
"""

from typing import Any, Mapping, Optional, Union

from .codec import DecodedImage, decode, decode_base64, encode, encode_base64, sniff_format
from .exceptions import with_error_handling
from .geometry import check_pixel_budget, resolve_crop, resolve_resize
from .image_utils import crop_pixels, difference_map, flatten_alpha, resample, to_rgb
from .logging_config import get_logger
from .models import (
    ConvertSpec,
    CropSpec,
    ImageFormat,
    ImageInfoResult,
    ProcessedImageResult,
    ResizeSpec,
    ToolkitConfig,
    parse_spec,
)

logger = get_logger("image-toolkit.operations")

LOSSLESS_FORMAT = ImageFormat.PNG
UNKNOWN_FORMAT = "unknown"


def _load(payload: str, config: Optional[ToolkitConfig]) -> DecodedImage:
    image = decode(decode_base64(payload))
    check_pixel_budget(image.width, image.height, _max_pixels(config), "Source image")
    return image


def _max_pixels(config: Optional[ToolkitConfig]) -> Optional[int]:
    return config.max_pixels if config is not None else None


def package_result(
    image: DecodedImage, image_format: ImageFormat, format_name: Optional[str] = None
) -> ProcessedImageResult:
    """
    Encode ``image`` and wrap it as a ProcessedImageResult.

    ``format_name`` is reported instead of the canonical value when given.
    """
    encoded = encode(image, image_format)
    return ProcessedImageResult(
        data=encode_base64(encoded),
        format=format_name or image_format.value,
        width=image.width,
        height=image.height,
        size_bytes=len(encoded),
    )


@with_error_handling
def crop(
    payload: str,
    spec: Union[CropSpec, Mapping[str, Any]],
    config: Optional[ToolkitConfig] = None,
) -> ProcessedImageResult:
    """Cut out an exact rectangle; the result is always PNG."""
    crop_spec = parse_spec(CropSpec, spec)
    image = _load(payload, config)
    crop_box = resolve_crop(image.width, image.height, crop_spec)
    cropped = crop_pixels(image, crop_box)
    logger.debug(f"Cropped {image.width}x{image.height} to {crop_box}")
    return package_result(cropped, LOSSLESS_FORMAT)


@with_error_handling
def resize(
    payload: str,
    spec: Union[ResizeSpec, Mapping[str, Any]],
    config: Optional[ToolkitConfig] = None,
) -> ProcessedImageResult:
    """Resample with Lanczos to the resolved size; the result is always PNG."""
    resize_spec = parse_spec(ResizeSpec, spec)
    image = _load(payload, config)
    size = resolve_resize(image.width, image.height, resize_spec)
    check_pixel_budget(size[0], size[1], _max_pixels(config), "Resize target")
    resized = resample(image, size)
    logger.debug(
        f"Resized {image.width}x{image.height} to {size[0]}x{size[1]} "
        f"(maintain_aspect_ratio={resize_spec.maintain_aspect_ratio})"
    )
    return package_result(resized, LOSSLESS_FORMAT)


@with_error_handling
def convert(
    payload: str,
    spec: Union[ConvertSpec, Mapping[str, Any]],
    config: Optional[ToolkitConfig] = None,
) -> ProcessedImageResult:
    """Re-encode into the requested format, keeping the dimensions."""
    convert_spec = parse_spec(ConvertSpec, spec)
    target = ImageFormat.from_name(convert_spec.format)
    image = _load(payload, config)
    if convert_spec.quality is not None:
        logger.debug(
            f"Quality hint {convert_spec.quality} accepted for {target.value}; "
            "encoder defaults are used"
        )
    converted = flatten_alpha(image, target)
    return package_result(converted, target, convert_spec.format.lower())


@with_error_handling
def compare(
    first_payload: str,
    second_payload: str,
    config: Optional[ToolkitConfig] = None,
) -> ProcessedImageResult:
    """
    Build an enhanced difference image of two inputs.

    Both images are stretched to the element-wise maximum of their sizes,
    flattened to RGB and differenced per channel. The result is always PNG.
    """
    first = _load(first_payload, config)
    second = _load(second_payload, config)

    canvas = (max(first.width, second.width), max(first.height, second.height))
    check_pixel_budget(canvas[0], canvas[1], _max_pixels(config), "Comparison canvas")

    first_rgb = to_rgb(resample(first, canvas))
    second_rgb = to_rgb(resample(second, canvas))
    diff = difference_map(first_rgb, second_rgb)
    logger.debug(
        f"Compared {first.width}x{first.height} with {second.width}x{second.height} "
        f"on a {canvas[0]}x{canvas[1]} canvas"
    )
    return package_result(diff, LOSSLESS_FORMAT)


@with_error_handling
def inspect(payload: str, config: Optional[ToolkitConfig] = None) -> ImageInfoResult:
    """Report dimensions, detected format and the size of the original bytes."""
    data = decode_base64(payload)
    image = decode(data)
    check_pixel_budget(image.width, image.height, _max_pixels(config), "Source image")
    detected = sniff_format(data) or image.source_format
    return ImageInfoResult(
        width=image.width,
        height=image.height,
        format=detected.value if detected is not None else UNKNOWN_FORMAT,
        size_bytes=len(data),
    )
