"""
Grid detector that runs every strategy and keeps the most confident result.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union
import numpy as np
from PIL import Image

from ..base import DetectionResult, Grid, InvalidParameterError, as_pixel_buffer
from .config import DetectionConfig
from .registry import StrategyRegistry
from .strategies import DetectionStrategy


logger = logging.getLogger(__name__)


class GridDetector:
    """
    Detect the row/column lattice of a sprite sheet.

    Strategies are evaluated in order. A strategy replaces the current best
    only with strictly higher confidence, so earlier strategies win ties.
    """

    def __init__(
        self,
        config: Optional[DetectionConfig] = None,
        strategies: Optional[Sequence[DetectionStrategy]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the detector.

        Args:
            config: Shared configuration for all strategies.
            strategies: Explicit strategy instances; defaults to the
                registered strategies named in config.strategies.
            logger: Diagnostic sink; defaults to the module logger.
        """
        self.config = config or DetectionConfig()
        self.logger = logger or logging.getLogger(__name__)

        if strategies is None:
            strategies = [self._create_strategy(name) for name in self.config.strategies]
        self._strategies: list[DetectionStrategy] = list(strategies)

    @property
    def strategies(self) -> list[DetectionStrategy]:
        """Get the strategies in evaluation order."""
        return self._strategies

    def detect(self, image: Union[np.ndarray, Image.Image, Path, str]) -> DetectionResult:
        """
        Detect the grid of an image.

        Args:
            image: Image as numpy array, PIL Image, or path.

        Returns:
            The most confident DetectionResult, or {1, 1, 0.0} when no
            strategy scores above zero.
        """
        buffer = as_pixel_buffer(image)
        best = DetectionResult(rows=1, cols=1, confidence=0.0)

        if buffer.shape[0] == 0 or buffer.shape[1] == 0:
            self.logger.debug("Empty image, returning 1x1 grid")
            return best

        for result in self._run_strategies(buffer):
            if result.confidence > best.confidence:
                best = result

        self.logger.info(
            f"Detected {best.rows}x{best.cols} grid "
            f"(strategy={best.strategy}, confidence={best.confidence:.3f})"
        )
        return best

    def detect_all(self, image: Union[np.ndarray, Image.Image, Path, str]) -> list[DetectionResult]:
        """
        Run every strategy and return all results in evaluation order.

        Args:
            image: Image to analyze.

        Returns:
            One DetectionResult per strategy (empty for an empty image).
        """
        buffer = as_pixel_buffer(image)
        if buffer.shape[0] == 0 or buffer.shape[1] == 0:
            return []
        return list(self._run_strategies(buffer))

    def auto_detect_grid(self, image: Union[np.ndarray, Image.Image, Path, str]) -> Grid:
        """Detect the grid and drop the confidence."""
        result = self.detect(image)
        return Grid(rows=result.rows, cols=result.cols)

    def _run_strategies(self, buffer: np.ndarray):
        for strategy in self._strategies:
            result = strategy.detect(buffer)
            self.logger.debug(
                f"Strategy {strategy.name}: {result.rows}x{result.cols}, "
                f"confidence {result.confidence:.3f}"
            )
            yield result

    def _create_strategy(self, name: str) -> DetectionStrategy:
        strategy = StrategyRegistry.create_strategy(name, self.config)
        if strategy is None:
            raise InvalidParameterError(
                f"Unknown detection strategy: {name}. "
                f"Available: {StrategyRegistry.list_registered()}"
            )
        return strategy


def create_detector(
    color_threshold: float = 30.0,
    smoothing_sigma: float = 1.5,
    prominence_ratio: float = 0.2,
    strategies: Sequence[str] = ("transitions", "edges", "variance"),
    logger: Optional[logging.Logger] = None,
    **kwargs,
) -> GridDetector:
    """
    Factory function to create a configured grid detector.

    Args:
        color_threshold: RGB distance counted as a transition.
        smoothing_sigma: Gaussian sigma for signal smoothing.
        prominence_ratio: Relative prominence cut-off.
        strategies: Registered strategy names, in evaluation order.
        logger: Diagnostic sink.
        **kwargs: Additional DetectionConfig parameters.

    Returns:
        Configured GridDetector instance.
    """
    config = DetectionConfig(
        color_threshold=color_threshold,
        smoothing_sigma=smoothing_sigma,
        prominence_ratio=prominence_ratio,
        strategies=tuple(strategies),
        **kwargs,
    )
    return GridDetector(config, logger=logger)


def auto_detect_grid(
    image: Union[np.ndarray, Image.Image, Path, str],
    config: Optional[DetectionConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> Grid:
    """
    Detect the grid of a sprite sheet.

    Args:
        image: Image as numpy array, PIL Image, or path.
        config: Detection configuration.
        logger: Diagnostic sink.

    Returns:
        Grid with rows >= 1 and cols >= 1.
    """
    return GridDetector(config, logger=logger).auto_detect_grid(image)
