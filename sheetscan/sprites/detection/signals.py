"""
Signal extractors.

Each extractor reduces an RGBA pixel buffer to a 1-D profile along one axis:
'horizontal' yields one value per row, 'vertical' one value per column.
Transition counts and edge strength measure activity across each scan line,
so rows or columns that sit on a sprite boundary stand out. The variance
profile measures texture along each scan line.
"""

import numpy as np

from ..base import Axis, InvalidParameterError


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def luminance(buffer: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel luminance.

    Args:
        buffer: RGBA (or RGB) pixel buffer.

    Returns:
        float64 array of shape (height, width).
    """
    return buffer[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS


def transition_profile(
    buffer: np.ndarray,
    axis: Axis,
    color_threshold: float = 30.0,
    luminance_threshold: float | None = None,
) -> np.ndarray:
    """
    Count color transitions between each scan line and the previous one.

    A pixel pair counts as a transition when its Euclidean RGB distance
    exceeds color_threshold or its luminance difference exceeds
    luminance_threshold (half of color_threshold by default).

    Args:
        buffer: RGBA pixel buffer.
        axis: 'horizontal' (per row) or 'vertical' (per column).
        color_threshold: RGB distance threshold.
        luminance_threshold: Luminance difference threshold.

    Returns:
        Transition count per scan line. The first line always counts 0.
    """
    if luminance_threshold is None:
        luminance_threshold = color_threshold * 0.5

    lines = _scan_lines(buffer, axis)
    profile = np.zeros(lines.shape[0], dtype=np.float64)

    if lines.shape[0] < 2 or lines.shape[1] == 0:
        return profile

    rgb = lines[:, :, :3].astype(np.float64)
    delta = rgb[1:] - rgb[:-1]
    color_diff = np.sqrt(np.sum(delta ** 2, axis=2))

    lum = rgb @ LUMA_WEIGHTS
    lum_diff = np.abs(lum[1:] - lum[:-1])

    changed = (color_diff > color_threshold) | (lum_diff > luminance_threshold)
    profile[1:] = changed.sum(axis=1)

    return profile


def edge_profile(buffer: np.ndarray, axis: Axis) -> np.ndarray:
    """
    Measure gradient strength across each scan line.

    Uses a centered first difference perpendicular to the line; lines outside
    the image contribute luminance 0. The sum is normalized by line length.

    Args:
        buffer: RGBA pixel buffer.
        axis: 'horizontal' (per row) or 'vertical' (per column).

    Returns:
        Mean absolute gradient per scan line.
    """
    lum = _scan_lines(luminance(buffer), axis)
    line_length = lum.shape[1]

    padded = np.pad(lum, ((1, 1), (0, 0)))
    gradient = np.abs(padded[2:] - padded[:-2])

    return gradient.sum(axis=1) / max(1, line_length)


def variance_profile(buffer: np.ndarray, axis: Axis, radius: int = 3) -> np.ndarray:
    """
    Average local luminance variance along each scan line.

    Args:
        buffer: RGBA pixel buffer.
        axis: 'horizontal' (per row) or 'vertical' (per column).
        radius: Window radius; the window holds 2 * radius + 1 samples.

    Returns:
        Sum of window variances over interior positions, divided by the
        number of interior positions. Lines shorter than a window yield 0.
    """
    if radius < 1:
        raise InvalidParameterError(f"Variance radius must be >= 1, got {radius}")

    lum = _scan_lines(luminance(buffer), axis)
    num_lines, line_length = lum.shape
    window = 2 * radius + 1
    profile = np.zeros(num_lines, dtype=np.float64)

    if num_lines == 0 or line_length < window:
        return profile

    positions = line_length - 2 * radius
    center = lum[:, radius:radius + positions]

    # Deviations from the window center keep flat windows at exactly zero
    s1 = np.zeros_like(center)
    s2 = np.zeros_like(center)
    for offset in range(window):
        deviation = lum[:, offset:offset + positions] - center
        s1 += deviation
        s2 += deviation * deviation

    mean = s1 / window
    local_var = np.clip(s2 / window - mean * mean, 0.0, None)

    profile[:] = local_var.sum(axis=1) / positions
    return profile


def _scan_lines(array: np.ndarray, axis: Axis) -> np.ndarray:
    """Arrange an image so that axis 0 indexes scan lines."""
    if axis == "horizontal":
        return array
    if axis == "vertical":
        return np.swapaxes(array, 0, 1)
    raise InvalidParameterError(f"Unknown axis: {axis}. Available: ['horizontal', 'vertical']")
