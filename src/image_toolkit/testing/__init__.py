"""Testing utilities and fakes for the image toolkit."""

from .fakes import (
    FakeLogger,
    create_solid_image,
    create_test_image,
    create_test_image_base64,
    open_result,
    to_base64,
)

__all__ = [
    "FakeLogger",
    "create_solid_image",
    "create_test_image",
    "create_test_image_base64",
    "open_result",
    "to_base64",
]
