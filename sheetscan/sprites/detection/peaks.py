"""
Peak pipeline: turns a 1-D signal into a division count and a confidence.

Steps:
1. Gaussian smoothing with edge-aware normalization
2. Strict local maxima
3. Topographic prominence
4. Prominence filter (fraction of the strongest peak)
5. Minimum-distance filter
6. Confidence scoring
7. Division count = surviving peaks + 1
8. Snap to common sprite cell sizes
"""

import logging
import math
from typing import Iterable, Optional, Sequence
import numpy as np
import cv2

from ..base import DivisionEstimate, Peak
from .config import DetectionConfig


logger = logging.getLogger(__name__)

COMMON_SPRITE_SIZES = (8, 16, 24, 32, 48, 64, 96, 128, 256)


def gaussian_smooth(signal: Sequence[float], sigma: float = 1.5) -> np.ndarray:
    """
    Smooth a signal with a Gaussian kernel.

    Each output sample is divided by the sum of the kernel weights that fall
    inside the signal, so samples near the ends are not damped.

    Args:
        signal: Input samples.
        sigma: Gaussian standard deviation.

    Returns:
        Smoothed signal of the same length.
    """
    data = np.asarray(signal, dtype=np.float64)
    if data.size == 0:
        return data.copy()

    radius = max(1, int(math.floor(sigma * 6 / 2)))
    kernel = cv2.getGaussianKernel(2 * radius + 1, sigma, cv2.CV_64F).ravel()

    # Work relative to the minimum so constant runs smooth to themselves exactly
    base = data.min()
    shifted = data - base

    acc = np.convolve(shifted, kernel, mode="full")[radius:radius + data.size]
    weights = np.convolve(np.ones_like(shifted), kernel, mode="full")[radius:radius + data.size]

    return acc / weights + base


def find_local_maxima(data: Sequence[float]) -> list[Peak]:
    """
    Find strict local maxima (greater than both neighbours).

    The first and last samples are never reported.
    """
    values = np.asarray(data, dtype=np.float64)
    if values.size < 3:
        return []

    inner = values[1:-1]
    is_peak = (inner > values[:-2]) & (inner > values[2:])
    indices = np.flatnonzero(is_peak) + 1

    return [Peak(index=int(i), value=float(values[i])) for i in indices]


def calculate_prominences(peaks: Iterable[Peak], data: Sequence[float]) -> list[Peak]:
    """
    Attach a prominence to every peak.

    Walking away from the peak on each side, the key col is the lowest value
    seen before reaching a sample at least as high as the peak (or the end of
    the signal). Prominence is the peak value minus the higher of the two key
    cols, floored at 0. Peaks on the first or last sample get 0.

    Args:
        peaks: Peaks to evaluate.
        data: The signal the peaks were found in.

    Returns:
        New Peak objects with prominence set.
    """
    values = np.asarray(data, dtype=np.float64)
    last = values.size - 1
    result = []

    for peak in peaks:
        if peak.index <= 0 or peak.index >= last:
            result.append(Peak(index=peak.index, value=peak.value, prominence=0.0))
            continue

        left_col = peak.value
        for i in range(peak.index - 1, -1, -1):
            if values[i] >= peak.value:
                break
            left_col = min(left_col, values[i])

        right_col = peak.value
        for i in range(peak.index + 1, last + 1):
            if values[i] >= peak.value:
                break
            right_col = min(right_col, values[i])

        prominence = max(0.0, peak.value - max(left_col, right_col))
        result.append(Peak(index=peak.index, value=peak.value, prominence=float(prominence)))

    return result


def filter_by_prominence(peaks: Sequence[Peak], ratio: float = 0.2) -> list[Peak]:
    """Keep peaks whose prominence is at least ratio * the largest prominence."""
    if not peaks:
        return []

    threshold = max(p.prominence for p in peaks) * ratio
    return [p for p in peaks if p.prominence >= threshold]


def filter_by_distance(peaks: Sequence[Peak], min_distance: int) -> list[Peak]:
    """
    Greedily keep the most prominent peaks that are far enough apart.

    Args:
        peaks: Candidate peaks.
        min_distance: Candidates closer than this to an accepted peak are dropped.

    Returns:
        Accepted peaks sorted by position.
    """
    if not peaks:
        return []

    by_prominence = sorted(peaks, key=lambda p: p.prominence, reverse=True)

    accepted: list[Peak] = []
    for peak in by_prominence:
        if all(abs(peak.index - kept.index) >= min_distance for kept in accepted):
            accepted.append(peak)

    return sorted(accepted, key=lambda p: p.index)


def score_confidence(peaks: Sequence[Peak], max_prominence: float) -> float:
    """
    Score how much a set of peaks looks like a regular grid.

    Weighted sum of:
    - peak strength: mean prominence relative to 30% of max_prominence (0.4)
    - spacing regularity: 1 - var(gaps) / mean(gaps)^2, with >= 2 peaks (0.4)
    - count bonus: 0.2 for 1-20 peaks, otherwise 0.1

    Returns:
        Confidence in [0, 1]; 0.1 when there are no peaks.
    """
    if not peaks:
        return 0.1

    confidence = 0.0

    avg_prominence = sum(p.prominence for p in peaks) / len(peaks)
    if max_prominence > 0:
        strength = min(1.0, avg_prominence / (max_prominence * 0.3))
        confidence += strength * 0.4

    if len(peaks) > 1:
        gaps = np.diff([p.index for p in peaks]).astype(np.float64)
        mean_gap = gaps.mean()
        regularity = max(0.0, 1.0 - gaps.var() / (mean_gap * mean_gap))
        confidence += regularity * 0.4

    confidence += 0.2 if 1 <= len(peaks) <= 20 else 0.1

    return min(1.0, confidence)


def snap_to_grid_size(
    divisions: int,
    size: int,
    common_sizes: Sequence[int] = COMMON_SPRITE_SIZES,
    min_cell: int = 8,
    max_cell: int = 512,
) -> int:
    """
    Snap a division count to one that produces a plausible sprite cell size.

    Order of preference:
    1. The estimate itself, when it is exactly size / common cell size (rounded)
       and divides size evenly.
    2. The first common cell size whose division count is within 1 of the
       estimate and divides size evenly.
    3. The estimate, when it divides size into cells of min_cell..max_cell.
    4. The first divisor within 2 of the estimate giving such cells.
    5. max(1, divisions).

    Applying the snap to its own output returns the same value.
    """
    if size <= 0:
        return max(1, divisions)

    if divisions > 0 and size % divisions == 0:
        if any(_round_half_up(size / c) == divisions for c in common_sizes):
            return divisions

    matched = _match_common_size(divisions, size, common_sizes)
    if matched is not None:
        logger.debug(f"Snapped {divisions} -> {matched} divisions (size {size})")
        return matched

    if divisions > 0 and size % divisions == 0 and min_cell <= size // divisions <= max_cell:
        return divisions

    for candidate in range(divisions - 2, divisions + 3):
        if candidate <= 0 or size % candidate != 0:
            continue
        if not min_cell <= size // candidate <= max_cell:
            continue
        if _match_common_size(candidate, size, common_sizes) in (None, candidate):
            logger.debug(f"Snapped {divisions} -> {candidate} divisions by divisor (size {size})")
            return candidate

    return max(1, divisions)


def estimate_divisions(
    signal: Sequence[float],
    axis_size: int,
    config: Optional[DetectionConfig] = None,
) -> DivisionEstimate:
    """
    Estimate how many cells a signal divides its axis into.

    Args:
        signal: One value per row or column.
        axis_size: Length of the axis in pixels.
        config: Pipeline constants.

    Returns:
        DivisionEstimate with divisions >= 1, confidence and surviving peaks.
    """
    config = config or DetectionConfig()
    data = np.asarray(signal, dtype=np.float64)

    if data.size == 0:
        return DivisionEstimate(divisions=1, confidence=0.0)

    smoothed = gaussian_smooth(data, config.smoothing_sigma)

    peaks = find_local_maxima(smoothed)
    if not peaks:
        return DivisionEstimate(divisions=1, confidence=0.1)

    peaks = calculate_prominences(peaks, smoothed)
    max_prominence = max(p.prominence for p in peaks)

    prominent = filter_by_prominence(peaks, config.prominence_ratio)

    min_distance = axis_size // config.min_distance_divisor
    final_peaks = filter_by_distance(prominent, min_distance)

    confidence = score_confidence(final_peaks, max_prominence)

    divisions = snap_to_grid_size(
        len(final_peaks) + 1,
        axis_size,
        config.common_sprite_sizes,
        config.min_cell_size,
        config.max_cell_size,
    )

    logger.debug(
        f"{len(peaks)} peaks -> {len(prominent)} prominent -> {len(final_peaks)} spaced "
        f"(min distance {min_distance}); {divisions} divisions, confidence {confidence:.3f}"
    )

    return DivisionEstimate(
        divisions=divisions,
        confidence=confidence,
        peaks=tuple(final_peaks),
    )


def _match_common_size(divisions: int, size: int, common_sizes: Sequence[int]) -> Optional[int]:
    """First common-size division count within 1 of divisions that divides size."""
    for cell in common_sizes:
        candidate = _round_half_up(size / cell)
        if candidate > 0 and abs(candidate - divisions) <= 1 and size % candidate == 0:
            return candidate
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
