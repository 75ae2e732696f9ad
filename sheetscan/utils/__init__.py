"""Utility modules for the sprite sheet API."""

from sheetscan.utils.file_validation import (
    ValidationError,
    detect_image_format,
    load_pixel_buffer,
    validate_image,
)

__all__ = [
    "ValidationError",
    "detect_image_format",
    "load_pixel_buffer",
    "validate_image",
]
