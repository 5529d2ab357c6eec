"""Pixel-level algorithms used by the toolkit operations."""

from typing import Tuple

import numpy as np
from PIL import Image

from .codec import DecodedImage
from .exceptions import BufferConstructionError
from .geometry import CropBox
from .models import ImageFormat

# Lanczos with a = 3; fixed for every resample.
RESAMPLE_FILTER = Image.Resampling.LANCZOS

DIFF_THRESHOLD = 10
DIFF_GAIN = 10

_ALPHA_DROP = {"LA": "L", "RGBA": "RGB"}
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def crop_pixels(image: DecodedImage, crop_box: CropBox) -> DecodedImage:
    """Copy the pixels inside ``crop_box`` without interpolation."""
    array = image.to_array()
    region = array[
        crop_box.y : crop_box.y + crop_box.height,
        crop_box.x : crop_box.x + crop_box.width,
    ]
    return DecodedImage(
        width=crop_box.width,
        height=crop_box.height,
        mode=image.mode,
        pixels=np.ascontiguousarray(region).tobytes(),
        source_format=image.source_format,
    )


def resample(image: DecodedImage, size: Tuple[int, int]) -> DecodedImage:
    """Resize to exactly ``size`` with the Lanczos filter."""
    resized = image.to_pil().resize(size, RESAMPLE_FILTER)
    return DecodedImage.from_pil(resized, source_format=image.source_format)


def to_rgb(image: DecodedImage) -> DecodedImage:
    """Force three channels, discarding alpha."""
    if image.mode == "RGB":
        return image
    return DecodedImage.from_pil(
        image.to_pil().convert("RGB"), source_format=image.source_format
    )


def flatten_alpha(image: DecodedImage, image_format: ImageFormat) -> DecodedImage:
    """Drop the alpha channel when ``image_format`` cannot store it."""
    if image_format.supports_mode(image.mode) or image.mode not in _ALPHA_DROP:
        return image
    target_mode = _ALPHA_DROP[image.mode]
    return DecodedImage.from_pil(
        image.to_pil().convert(target_mode), source_format=image.source_format
    )


def enhance_difference(diff: np.ndarray) -> np.ndarray:
    """Amplify small differences: above the threshold saturate, otherwise scale by ten."""
    diff = diff.astype(np.uint16)
    enhanced = np.where(diff > DIFF_THRESHOLD, 255, diff * DIFF_GAIN)
    return enhanced.astype(np.uint8)


def difference_map(first: DecodedImage, second: DecodedImage) -> DecodedImage:
    """
    Per-channel enhanced absolute difference of two RGB images of equal size.

    Args:
        first: RGB image
        second: RGB image with the same dimensions

    Returns:
        RGB image holding the enhanced difference

    Raises:
        BufferConstructionError: If the difference buffer does not match the canvas
    """
    if first.size != second.size:
        raise BufferConstructionError(
            f"Cannot difference {first.width}x{first.height} against "
            f"{second.width}x{second.height}"
        )
    first_array = first.to_array().astype(np.int16)
    second_array = second.to_array().astype(np.int16)
    diff = np.abs(first_array - second_array)

    buffer = enhance_difference(diff).tobytes()
    expected = first.width * first.height * 3
    if len(buffer) != expected:
        raise BufferConstructionError(
            f"Failed to create difference image: buffer holds {len(buffer)} bytes, "
            f"expected {expected}"
        )
    return DecodedImage(
        width=first.width, height=first.height, mode="RGB", pixels=buffer
    )


def format_file_size(size_bytes: int) -> str:
    """
    Human readable size with 1024-based units.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[index]}"
