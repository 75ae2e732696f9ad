"""
Base classes for sprite region segmentation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union
import numpy as np
from PIL import Image

from ..base import (
    BackgroundMode,
    BackgroundParams,
    BoundingBox,
    InvalidParameterError,
    as_pixel_buffer,
)
from ..classifier import foreground_mask


Algorithm = Literal["floodfill", "connected_components"]

ALGORITHMS = ("floodfill", "connected_components")


@dataclass
class SegmentationOptions:
    """Configuration for sprite region segmentation."""

    mode: BackgroundMode = "transparent"
    """'transparent' (alpha test) or 'color' (distance to background_color)."""

    background_color: Optional[tuple[int, int, int]] = (255, 255, 255)
    """Reference RGB color for 'color' mode."""

    tolerance: int = 20
    """Maximum per-channel difference still treated as background."""

    min_width: int = 8
    """Regions narrower than this are discarded."""

    min_height: int = 8
    """Regions shorter than this are discarded."""

    max_sprites: int = 1000
    """Maximum number of regions returned."""

    algorithm: Algorithm = "floodfill"
    """Labeling algorithm ('floodfill' or 'connected_components')."""

    def __post_init__(self):
        if self.min_width < 0 or self.min_height < 0:
            raise InvalidParameterError(
                f"Minimum size must be non-negative, got {self.min_width}x{self.min_height}"
            )
        if self.max_sprites < 0:
            raise InvalidParameterError(f"max_sprites must be non-negative, got {self.max_sprites}")
        if self.algorithm not in ALGORITHMS:
            raise InvalidParameterError(
                f"Unknown segmentation algorithm: {self.algorithm}. Available: {list(ALGORITHMS)}"
            )
        # Validates mode and tolerance
        self.background

    @property
    def background(self) -> BackgroundParams:
        """Background classification parameters."""
        return BackgroundParams(
            mode=self.mode,
            background_color=self.background_color,
            tolerance=self.tolerance,
        )


class BaseSegmenter(ABC):
    """Abstract base class for region segmenters."""

    def __init__(
        self,
        options: Optional[SegmentationOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize segmenter with options."""
        self.options = options or SegmentationOptions()
        self.logger = logger or logging.getLogger(__name__)

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this segmentation algorithm."""
        pass

    @abstractmethod
    def label(self, foreground: np.ndarray) -> list[BoundingBox]:
        """
        Find bounding boxes of connected foreground regions.

        Args:
            foreground: Boolean mask, True where a pixel is foreground.

        Returns:
            Boxes that pass the size filter, at most max_sprites of them.
        """
        pass

    def segment(self, image: Union[np.ndarray, Image.Image, Path, str]) -> list[BoundingBox]:
        """
        Segment an image into sprite regions.

        Args:
            image: Image as numpy array, PIL Image, or path.

        Returns:
            Bounding boxes in row-major order of each region's first pixel.
        """
        buffer = as_pixel_buffer(image)
        if buffer.shape[0] == 0 or buffer.shape[1] == 0 or self.options.max_sprites == 0:
            return []

        mask = foreground_mask(buffer, self.options.background)
        boxes = self.label(mask)

        self.logger.debug(
            f"{self.name}: {len(boxes)} regions in {buffer.shape[1]}x{buffer.shape[0]} image"
        )
        return boxes

    def _accepts(self, width: int, height: int) -> bool:
        return width >= self.options.min_width and height >= self.options.min_height
