"""
File validation utilities for uploaded sprite sheets.

Uploads go through layered checks before any pixel is decoded:
1. Size check
2. Magic byte detection (file signature)
3. PIL structure verification

Files are considered invalid unless proven otherwise.
"""

import logging
from typing import BinaryIO

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


# Magic byte signatures of the accepted image formats
MAGIC_BYTES = {
    b"\x89PNG\r\n\x1a\n": "png",
    b"\xff\xd8\xff": "jpeg",
    b"GIF87a": "gif",
    b"GIF89a": "gif",
    b"BM": "bmp",
    b"II*\x00": "tiff",
    b"MM\x00*": "tiff",
    b"RIFF": "webp",  # needs further validation
}


class ValidationError(Exception):
    """Raised when file validation fails."""

    pass


def detect_image_format(file_content: bytes) -> str | None:
    """
    Detect image format from magic bytes (file signature).

    Args:
        file_content: First few bytes of the file.

    Returns:
        Format name, or None if the signature is not a supported image.
    """
    for signature, image_format in MAGIC_BYTES.items():
        if file_content.startswith(signature):
            # RIFF is only accepted as WebP
            if signature == b"RIFF":
                if len(file_content) >= 12 and file_content[8:12] == b"WEBP":
                    return image_format
                continue
            return image_format

    return None


def validate_image_with_pil(file_obj: BinaryIO) -> bool:
    """
    Validate that a file is a decodable image using PIL.

    Args:
        file_obj: File object to validate (will be seeked to start).

    Returns:
        True if valid image, False otherwise.
    """
    try:
        file_obj.seek(0)
        img = Image.open(file_obj)
        img.verify()
        file_obj.seek(0)
        return True
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        logger.debug(f"PIL validation failed: {e}")
        return False


def validate_image(file_obj: BinaryIO, max_size_mb: float = 20) -> str:
    """
    Perform comprehensive image validation with multi-layer checks.

    Args:
        file_obj: File object to validate (should be at start).
        max_size_mb: Maximum file size in MB.

    Returns:
        Detected image format.

    Raises:
        ValidationError: If file fails any validation check.
    """
    # Layer 1: Size check
    file_obj.seek(0, 2)
    file_size = file_obj.tell()
    file_obj.seek(0)

    if file_size == 0:
        raise ValidationError("File is empty")

    max_size_bytes = max_size_mb * 1024 * 1024
    if file_size > max_size_bytes:
        raise ValidationError(
            f"File too large: {file_size / 1024 / 1024:.1f}MB "
            f"(max {max_size_mb}MB)"
        )

    # Layer 2: Magic bytes detection
    header = file_obj.read(32)
    file_obj.seek(0)

    image_format = detect_image_format(header)
    if image_format is None:
        raise ValidationError("Unknown or unsupported file type")

    # Layer 3: Library-specific validation
    if not validate_image_with_pil(file_obj):
        raise ValidationError("File is not a valid image")

    logger.info(f"Image validated successfully: {image_format}, {file_size / 1024:.1f}KB")
    return image_format


def load_pixel_buffer(file_obj: BinaryIO, max_size_mb: float = 20) -> np.ndarray:
    """
    Validate an uploaded image and decode it to an RGBA pixel buffer.

    Args:
        file_obj: File object holding the encoded image.
        max_size_mb: Maximum file size in MB.

    Returns:
        Read-only uint8 array of shape (height, width, 4).

    Raises:
        ValidationError: If the file is rejected or cannot be decoded.
    """
    validate_image(file_obj, max_size_mb=max_size_mb)

    try:
        with Image.open(file_obj) as img:
            buffer = np.array(img.convert("RGBA"))
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Could not decode image: {e}") from e

    buffer.flags.writeable = False
    return buffer
