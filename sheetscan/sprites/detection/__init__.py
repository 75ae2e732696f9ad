"""
Sprite sheet grid detection.

Reduces an image to 1-D activity signals, finds regularly spaced peaks and
turns them into a row/column count.
"""

from .config import DetectionConfig
from .signals import edge_profile, luminance, transition_profile, variance_profile
from .peaks import (
    calculate_prominences,
    estimate_divisions,
    filter_by_distance,
    filter_by_prominence,
    find_local_maxima,
    gaussian_smooth,
    score_confidence,
    snap_to_grid_size,
)
from .registry import StrategyRegistry
from .strategies import DetectionStrategy, EdgeStrategy, TransitionStrategy, VarianceStrategy
from .detector import GridDetector, auto_detect_grid, create_detector

__all__ = [
    "DetectionConfig",
    "edge_profile",
    "luminance",
    "transition_profile",
    "variance_profile",
    "calculate_prominences",
    "estimate_divisions",
    "filter_by_distance",
    "filter_by_prominence",
    "find_local_maxima",
    "gaussian_smooth",
    "score_confidence",
    "snap_to_grid_size",
    "StrategyRegistry",
    "DetectionStrategy",
    "EdgeStrategy",
    "TransitionStrategy",
    "VarianceStrategy",
    "GridDetector",
    "auto_detect_grid",
    "create_detector",
]
