"""Output geometry for crop and resize requests."""

import math
from typing import NamedTuple, Optional, Tuple

from .exceptions import ValidationError
from .models import CropSpec, ResizeSpec


class CropBox(NamedTuple):
    """Validated crop rectangle."""

    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow expects it."""
        return self.x, self.y, self.x + self.width, self.y + self.height


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def resolve_crop(source_width: int, source_height: int, spec: CropSpec) -> CropBox:
    """
    Validate a crop rectangle against the source dimensions.

    Rectangles that leave the source are rejected, never clamped.

    Raises:
        ValidationError: If the rectangle is empty or exceeds the source bounds
    """
    if spec.width == 0 or spec.height == 0:
        raise ValidationError(
            f"Crop rectangle must have a non-zero size, got {spec.width}x{spec.height}"
        )
    if spec.x + spec.width > source_width or spec.y + spec.height > source_height:
        raise ValidationError(
            f"Crop parameters exceed image dimensions: rectangle "
            f"({spec.x}, {spec.y}, {spec.width}x{spec.height}) does not fit "
            f"{source_width}x{source_height}"
        )
    return CropBox(spec.x, spec.y, spec.width, spec.height)


def resolve_resize(
    source_width: int, source_height: int, spec: ResizeSpec
) -> Tuple[int, int]:
    """
    Compute the output size for a resize.

    Without aspect locking the requested size is returned as is. With it, the
    requested size is a bounding box: the limiting axis is pinned to the
    request and the other axis is derived from the source aspect ratio.

    Raises:
        ValidationError: If a requested or derived dimension is zero
    """
    if spec.width == 0 or spec.height == 0:
        raise ValidationError(
            f"Resize target must have a non-zero size, got {spec.width}x{spec.height}"
        )
    if not spec.maintain_aspect_ratio:
        return spec.width, spec.height

    source_aspect = source_width / source_height
    target_aspect = spec.width / spec.height

    if source_aspect > target_aspect:
        width = spec.width
        height = round_half_away(width / source_aspect)
    else:
        height = spec.height
        width = round_half_away(height * source_aspect)

    if width == 0 or height == 0:
        raise ValidationError(
            f"Resizing {source_width}x{source_height} into {spec.width}x{spec.height} "
            f"collapses to {width}x{height}"
        )
    return width, height


def check_pixel_budget(
    width: int, height: int, max_pixels: Optional[int], what: str = "Image"
) -> None:
    """Reject a size whose pixel count exceeds ``max_pixels`` (None disables the check)."""
    if max_pixels is not None and width * height > max_pixels:
        raise ValidationError(
            f"{what} of {width}x{height} ({width * height} pixels) exceeds the "
            f"limit of {max_pixels} pixels"
        )
