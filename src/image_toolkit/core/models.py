"""Shared data models for the image toolkit."""

import os
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError, UnsupportedFormatError, ValidationError


class ImageFormat(str, Enum):
    """Closed set of formats the toolkit can emit."""

    PNG = "png"
    JPEG = "jpg"
    WEBP = "webp"
    BMP = "bmp"
    GIF = "gif"

    @classmethod
    def from_name(cls, name: str) -> "ImageFormat":
        """Case-insensitive lookup; "jpeg" is accepted as an alias of "jpg"."""
        key = name.lower() if isinstance(name, str) else ""
        key = _FORMAT_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        raise UnsupportedFormatError(str(name))

    @classmethod
    def from_pil_format(cls, pil_format: Optional[str]) -> Optional["ImageFormat"]:
        """Map a Pillow format name ("JPEG", "PNG", ...) to a member, if supported."""
        if not pil_format:
            return None
        for member in cls:
            if member.pil_format == pil_format.upper():
                return member
        return None

    @property
    def pil_format(self) -> str:
        return _PIL_FORMATS[self]

    @property
    def mime_type(self) -> str:
        return "image/jpeg" if self is ImageFormat.JPEG else f"image/{self.value}"

    @property
    def modes(self) -> FrozenSet[str]:
        """Pixel layouts the encoder accepts."""
        return _SUPPORTED_MODES[self]

    def supports_mode(self, mode: str) -> bool:
        return mode in self.modes


_FORMAT_ALIASES = {"jpeg": "jpg"}

_PIL_FORMATS = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.WEBP: "WEBP",
    ImageFormat.BMP: "BMP",
    ImageFormat.GIF: "GIF",
}

_SUPPORTED_MODES = {
    ImageFormat.PNG: frozenset({"L", "LA", "RGB", "RGBA"}),
    ImageFormat.JPEG: frozenset({"L", "RGB"}),
    ImageFormat.WEBP: frozenset({"L", "LA", "RGB", "RGBA"}),
    ImageFormat.BMP: frozenset({"L", "RGB", "RGBA"}),
    ImageFormat.GIF: frozenset({"L", "LA", "RGB", "RGBA"}),
}


class CropSpec(BaseModel):
    """Rectangle to extract, in source pixel coordinates."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class ResizeSpec(BaseModel):
    """Target size for a resize, optionally treated as a bounding box."""

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    maintain_aspect_ratio: bool = False


class ConvertSpec(BaseModel):
    """Target format for a conversion.

    ``quality`` is accepted for JPEG callers but does not change the encoder
    output.
    """

    format: str
    quality: Optional[int] = Field(default=None, ge=0, le=100)


class ProcessedImageResult(BaseModel):
    """Result of crop, resize, convert and compare."""

    model_config = ConfigDict(frozen=True)

    data: str
    format: str
    width: int
    height: int
    size_bytes: int


class ImageInfoResult(BaseModel):
    """Result of inspecting an encoded image."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    format: str
    size_bytes: int


class CommandResponse(BaseModel):
    """Envelope returned to the command-dispatch caller."""

    ok: bool
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class ToolkitConfig(BaseModel):
    """Runtime configuration for the toolkit."""

    max_pixels: Optional[int] = Field(default=None, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolkitConfig":
        """
        Build configuration from environment variables.

        Environment Variables:
            IMAGE_TOOLKIT_MAX_PIXELS: Largest accepted width * height (unset = no limit)
            LOG_LEVEL: Logging level name
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {"log_level": env.get("LOG_LEVEL", "INFO").upper()}
        raw_max = env.get("IMAGE_TOOLKIT_MAX_PIXELS", "").strip()
        if raw_max:
            try:
                values["max_pixels"] = int(raw_max)
            except ValueError as exc:
                raise ConfigurationError(
                    f"IMAGE_TOOLKIT_MAX_PIXELS must be an integer, got {raw_max!r}"
                ) from exc
        try:
            return cls(**values)
        except pydantic.ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


SpecT = TypeVar("SpecT", bound=BaseModel)


def parse_spec(
    model_cls: Type[SpecT], spec: Union[SpecT, Mapping[str, Any]]
) -> SpecT:
    """Accept a model instance or a plain mapping and return a validated model."""
    if isinstance(spec, model_cls):
        return spec
    try:
        return model_cls.model_validate(spec)
    except pydantic.ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "spec"
            for error in exc.errors()
        )
        raise ValidationError(
            f"Invalid {model_cls.__name__} ({fields}): {exc.error_count()} error(s)"
        ) from exc
