"""Decoding and encoding between transport payloads, bytes and pixel grids."""

import base64
import binascii
import io
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from .exceptions import DecodeError, EncodeError, error_boundary
from .logging_config import get_logger
from .models import ImageFormat

logger = get_logger("image-toolkit.codec")

MODE_CHANNELS = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}

_MAGIC_PREFIXES = (
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"GIF87a", ImageFormat.GIF),
    (b"GIF89a", ImageFormat.GIF),
    (b"BM", ImageFormat.BMP),
)


@dataclass(frozen=True)
class DecodedImage:
    """A flat, row-major pixel buffer with its dimensions and layout."""

    width: int
    height: int
    mode: str
    pixels: bytes
    source_format: Optional[ImageFormat] = None

    @property
    def channels(self) -> int:
        return MODE_CHANNELS[self.mode]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def expected_length(self) -> int:
        return self.width * self.height * self.channels

    def pixel(self, row: int, col: int) -> Tuple[int, ...]:
        """Channel values at (row, col)."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"pixel ({row}, {col}) outside {self.width}x{self.height}")
        start = (row * self.width + col) * self.channels
        return tuple(self.pixels[start : start + self.channels])

    def to_pil(self) -> Image.Image:
        """Build a Pillow image, checking the buffer against the dimensions."""
        if self.mode not in MODE_CHANNELS:
            raise EncodeError(f"Unsupported pixel layout: {self.mode}")
        if self.width <= 0 or self.height <= 0:
            raise EncodeError(
                f"Cannot encode an image of size {self.width}x{self.height}"
            )
        if len(self.pixels) != self.expected_length:
            raise EncodeError(
                f"Pixel buffer holds {len(self.pixels)} bytes, expected "
                f"{self.expected_length} for {self.width}x{self.height} {self.mode}"
            )
        return Image.frombytes(self.mode, self.size, self.pixels)

    def to_array(self) -> np.ndarray:
        """View the buffer as a (height, width, channels) uint8 array."""
        array = np.frombuffer(self.pixels, dtype=np.uint8)
        return array.reshape(self.height, self.width, self.channels)

    @classmethod
    def from_pil(
        cls, image: Image.Image, source_format: Optional[ImageFormat] = None
    ) -> "DecodedImage":
        normalized = normalize_mode(image)
        return cls(
            width=normalized.width,
            height=normalized.height,
            mode=normalized.mode,
            pixels=normalized.tobytes(),
            source_format=source_format,
        )


def normalize_mode(image: Image.Image) -> Image.Image:
    """Bring any Pillow mode onto L, LA, RGB or RGBA."""
    if image.mode in MODE_CHANNELS:
        return image
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    if image.mode == "1":
        return image.convert("L")
    if image.mode in ("I", "F") or image.mode.startswith("I;16"):
        # 16-bit samples are scaled down to 8 bits.
        return image.convert("I").point(lambda value: value * (1 / 256)).convert("L")
    if image.mode == "P":
        return image.convert("RGBA" if has_alpha else "RGB")
    if image.mode == "PA":
        return image.convert("RGBA")
    return image.convert("RGBA" if has_alpha else "RGB")


def decode_base64(payload: str) -> bytes:
    """
    Decode a base64 transport payload.

    A leading data URL header (``data:image/png;base64,``) and embedded
    whitespace are tolerated.
    """
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("ascii", errors="replace")
    if not isinstance(payload, str):
        raise DecodeError(f"Expected base64 text, got {type(payload).__name__}")
    text = payload.strip()
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    text = "".join(text.split())
    if not text:
        raise DecodeError("Failed to decode base64 payload: empty input")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Failed to decode base64 payload: {exc}") from exc


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def to_data_url(payload: str, image_format: ImageFormat) -> str:
    """Wrap base64 text as a data URL suitable for an <img> source."""
    return f"data:{image_format.mime_type};base64,{payload}"


def sniff_format(data: bytes) -> Optional[ImageFormat]:
    """Identify a supported container from its leading magic bytes."""
    for prefix, image_format in _MAGIC_PREFIXES:
        if data.startswith(prefix):
            return image_format
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ImageFormat.WEBP
    return None


def open_image(data: bytes) -> Image.Image:
    """Open and fully load an image with Pillow, raising DecodeError on failure."""
    if not data:
        raise DecodeError("Failed to decode image: empty input")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as exc:  # noqa: BLE001
        # Pillow plugins report corrupt or truncated data with a mix of
        # OSError, SyntaxError, EOFError and DecompressionBombError.
        raise DecodeError(f"Failed to decode image: {exc}") from exc
    return image


def decode(data: bytes) -> DecodedImage:
    """Decode encoded image bytes into a pixel grid, detecting the format from content."""
    image = open_image(data)
    source_format = ImageFormat.from_pil_format(image.format) or sniff_format(data)
    with error_boundary(DecodeError, f"Failed to convert {image.mode} pixels"):
        decoded = DecodedImage.from_pil(image, source_format=source_format)
    logger.debug(
        f"Decoded {image.format or 'unknown'} {decoded.width}x{decoded.height} "
        f"{image.mode}->{decoded.mode} ({len(data)} bytes)"
    )
    return decoded


def encode(image: DecodedImage, image_format: ImageFormat) -> bytes:
    """Serialize a pixel grid into the target container."""
    pil_image = image.to_pil()
    if not image_format.supports_mode(image.mode):
        raise EncodeError(
            f"{image_format.pil_format} cannot store {image.mode} pixels"
        )

    save_kwargs = {}
    if image_format is ImageFormat.WEBP:
        save_kwargs["lossless"] = True

    output_stream = io.BytesIO()
    try:
        pil_image.save(output_stream, format=image_format.pil_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(
            f"Failed to encode image as {image_format.pil_format}: {exc}"
        ) from exc

    encoded = output_stream.getvalue()
    logger.debug(
        f"Encoded {image.width}x{image.height} {image.mode} as "
        f"{image_format.pil_format} ({len(encoded)} bytes)"
    )
    return encoded
