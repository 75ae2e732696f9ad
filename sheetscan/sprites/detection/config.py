"""
Configuration for grid detection.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DetectionConfig:
    """Tunable constants of the signal extractors and the peak pipeline."""

    color_threshold: float = 30.0
    """Euclidean RGB distance above which two neighbouring pixels differ."""

    luminance_threshold: Optional[float] = None
    """Luminance difference above which two pixels differ (None = half of color_threshold)."""

    variance_radius: int = 3
    """Radius of the sliding window used by the variance profile."""

    smoothing_sigma: float = 1.5
    """Sigma of the Gaussian applied to every signal before peak finding."""

    prominence_ratio: float = 0.2
    """Peaks below this fraction of the strongest prominence are dropped."""

    min_distance_divisor: int = 50
    """Minimum peak spacing is floor(axis_size / min_distance_divisor)."""

    common_sprite_sizes: tuple[int, ...] = (8, 16, 24, 32, 48, 64, 96, 128, 256)
    """Cell sizes tried, in order, when snapping a division count."""

    min_cell_size: int = 8
    """Smallest cell size accepted without a common-size match."""

    max_cell_size: int = 512
    """Largest cell size accepted without a common-size match."""

    transition_weight: float = 1.0
    """Confidence multiplier of the transition strategy."""

    edge_weight: float = 0.9
    """Confidence multiplier of the edge strategy."""

    variance_weight: float = 0.8
    """Confidence multiplier of the variance strategy."""

    strategies: tuple[str, ...] = ("transitions", "edges", "variance")
    """Registered strategy names, in evaluation (and tie-break) order."""

    @property
    def effective_luminance_threshold(self) -> float:
        if self.luminance_threshold is None:
            return self.color_threshold * 0.5
        return self.luminance_threshold
