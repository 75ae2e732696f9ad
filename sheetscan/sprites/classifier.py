"""
Background/foreground pixel classification.
"""

from typing import Optional
import numpy as np

from .base import BACKGROUND_MODES, BackgroundMode, BackgroundParams, InvalidParameterError


# Alpha values below this are transparent background
TRANSPARENT_ALPHA_THRESHOLD = 10


def is_background(
    x: int,
    y: int,
    buffer: np.ndarray,
    background_color: Optional[tuple[int, int, int]] = None,
    tolerance: int = 0,
    mode: BackgroundMode = "transparent",
) -> bool:
    """
    Decide whether a single pixel is background.

    Args:
        x: Column of the pixel.
        y: Row of the pixel.
        buffer: RGBA pixel buffer (height, width, 4).
        background_color: Reference RGB color for 'color' mode.
        tolerance: Maximum per-channel difference for 'color' mode.
        mode: 'transparent' or 'color'.

    Returns:
        True if the pixel is background.

    Raises:
        IndexError: If (x, y) lies outside the buffer.
        InvalidParameterError: If tolerance is negative or mode is unknown.
    """
    _check_params(tolerance, mode)

    height, width = buffer.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside {width}x{height} buffer")

    pixel = buffer[y, x]

    if mode == "transparent":
        return bool(pixel[3] < TRANSPARENT_ALPHA_THRESHOLD)

    if background_color is None:
        return False

    return all(
        abs(int(pixel[c]) - int(background_color[c])) <= tolerance
        for c in range(3)
    )


def background_mask(buffer: np.ndarray, params: Optional[BackgroundParams] = None) -> np.ndarray:
    """
    Classify every pixel of a buffer at once.

    Args:
        buffer: RGBA pixel buffer (height, width, 4).
        params: Classification parameters (defaults to transparent mode).

    Returns:
        Boolean array of shape (height, width), True where background.
    """
    params = params or BackgroundParams()
    _check_params(params.tolerance, params.mode)

    if params.mode == "transparent":
        return buffer[:, :, 3] < TRANSPARENT_ALPHA_THRESHOLD

    if params.background_color is None:
        return np.zeros(buffer.shape[:2], dtype=bool)

    reference = np.asarray(params.background_color, dtype=np.int16)
    diff = np.abs(buffer[:, :, :3].astype(np.int16) - reference)
    # Chebyshev distance: every channel must be within tolerance
    return np.all(diff <= params.tolerance, axis=2)


def foreground_mask(buffer: np.ndarray, params: Optional[BackgroundParams] = None) -> np.ndarray:
    """Inverse of background_mask."""
    return ~background_mask(buffer, params)


def _check_params(tolerance: int, mode: str) -> None:
    if tolerance < 0:
        raise InvalidParameterError(f"Tolerance must be non-negative, got {tolerance}")
    if mode not in BACKGROUND_MODES:
        raise InvalidParameterError(
            f"Unknown background mode: {mode}. Available: {list(BACKGROUND_MODES)}"
        )
