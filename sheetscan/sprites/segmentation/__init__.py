"""
Sprite region segmentation.

Labels connected non-background regions and returns their bounding boxes.
"""

import logging
from pathlib import Path
from typing import Optional, Union
import numpy as np
from PIL import Image

from ..base import BoundingBox
from .base import ALGORITHMS, BaseSegmenter, SegmentationOptions
from .components import ConnectedComponentSegmenter, UnionFind
from .flood_fill import MAX_FILL_PIXELS, FloodFillSegmenter


def create_segmenter(
    options: Optional[SegmentationOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> BaseSegmenter:
    """
    Factory function to create the segmenter named by options.algorithm.

    Args:
        options: Segmentation options.
        logger: Diagnostic sink.

    Returns:
        FloodFillSegmenter or ConnectedComponentSegmenter.
    """
    options = options or SegmentationOptions()
    if options.algorithm == "connected_components":
        return ConnectedComponentSegmenter(options, logger)
    return FloodFillSegmenter(options, logger)


def detect_sprite_bounds(
    image: Union[np.ndarray, Image.Image, Path, str],
    options: Optional[SegmentationOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> list[BoundingBox]:
    """
    Detect bounding boxes of the sprites in an image.

    Args:
        image: Image as numpy array, PIL Image, or path.
        options: Segmentation options.
        logger: Diagnostic sink.

    Returns:
        Bounding boxes in row-major order of each region's first pixel.
    """
    return create_segmenter(options, logger).segment(image)


__all__ = [
    "ALGORITHMS",
    "MAX_FILL_PIXELS",
    "BaseSegmenter",
    "SegmentationOptions",
    "ConnectedComponentSegmenter",
    "FloodFillSegmenter",
    "UnionFind",
    "create_segmenter",
    "detect_sprite_bounds",
]
