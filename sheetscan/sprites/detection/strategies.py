"""
Grid detection strategies.

Each strategy reduces the image to one signal per axis and feeds both
signals through the peak pipeline.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np

from ..base import Axis, DetectionResult
from .config import DetectionConfig
from .peaks import estimate_divisions
from .registry import StrategyRegistry
from .signals import edge_profile, transition_profile, variance_profile


class DetectionStrategy(ABC):
    """Abstract base class for grid detection strategies."""

    def __init__(self, config: Optional[DetectionConfig] = None):
        """Initialize strategy with configuration."""
        self.config = config or DetectionConfig()

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this strategy."""
        pass

    @property
    @abstractmethod
    def weight(self) -> float:
        """Multiplier applied to the averaged axis confidence."""
        pass

    @abstractmethod
    def extract(self, buffer: np.ndarray, axis: Axis) -> np.ndarray:
        """
        Reduce the buffer to a 1-D signal.

        Args:
            buffer: RGBA pixel buffer.
            axis: 'horizontal' (one value per row) or 'vertical' (per column).

        Returns:
            Signal as float64 array.
        """
        pass

    def detect(self, buffer: np.ndarray) -> DetectionResult:
        """
        Estimate rows and columns from this strategy's signals.

        Args:
            buffer: RGBA pixel buffer.

        Returns:
            DetectionResult whose confidence is the mean of both axis
            confidences times the strategy weight.
        """
        height, width = buffer.shape[:2]

        row_estimate = estimate_divisions(self.extract(buffer, "horizontal"), height, self.config)
        col_estimate = estimate_divisions(self.extract(buffer, "vertical"), width, self.config)

        confidence = (row_estimate.confidence + col_estimate.confidence) / 2 * self.weight

        return DetectionResult(
            rows=row_estimate.divisions,
            cols=col_estimate.divisions,
            confidence=confidence,
            strategy=self.name,
        )


@StrategyRegistry.register
class TransitionStrategy(DetectionStrategy):
    """Color transitions between neighbouring scan lines."""

    @property
    def name(self) -> str:
        return "transitions"

    @property
    def weight(self) -> float:
        return self.config.transition_weight

    def extract(self, buffer: np.ndarray, axis: Axis) -> np.ndarray:
        return transition_profile(
            buffer,
            axis,
            color_threshold=self.config.color_threshold,
            luminance_threshold=self.config.effective_luminance_threshold,
        )


@StrategyRegistry.register
class EdgeStrategy(DetectionStrategy):
    """Luminance gradient strength across scan lines."""

    @property
    def name(self) -> str:
        return "edges"

    @property
    def weight(self) -> float:
        return self.config.edge_weight

    def extract(self, buffer: np.ndarray, axis: Axis) -> np.ndarray:
        return edge_profile(buffer, axis)


@StrategyRegistry.register
class VarianceStrategy(DetectionStrategy):
    """Local luminance variance along scan lines."""

    @property
    def name(self) -> str:
        return "variance"

    @property
    def weight(self) -> float:
        return self.config.variance_weight

    def extract(self, buffer: np.ndarray, axis: Axis) -> np.ndarray:
        return variance_profile(buffer, axis, radius=self.config.variance_radius)
