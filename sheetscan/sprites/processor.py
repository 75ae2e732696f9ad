"""
Unified sprite sheet processor.

Combines grid detection, region segmentation and content cropping behind a
single interface configured from application settings.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import numpy as np
from PIL import Image

from sheetscan.config import settings, DetectionSettings, SegmentationSettings

from .base import BoundingBox, DetectionResult, Grid, as_pixel_buffer
from .detection import DetectionConfig, GridDetector
from .regions import crop_to_content, sort_boxes
from .segmentation import SegmentationOptions, create_segmenter


logger = logging.getLogger(__name__)


@dataclass
class GridAnalysis:
    """Result of detecting the grid of a sprite sheet."""

    result: DetectionResult
    """Most confident detection."""

    candidates: list[DetectionResult]
    """Every strategy's result, in evaluation order."""

    size: tuple[int, int]
    """Image size (width, height)."""

    @property
    def grid(self) -> Grid:
        return Grid(rows=self.result.rows, cols=self.result.cols)


@dataclass
class RegionAnalysis:
    """Result of segmenting a sprite sheet into regions."""

    boxes: list[BoundingBox]
    """Detected regions, sorted as requested."""

    content_boxes: list[BoundingBox]
    """Content-cropped box per region (empty when cropping is off)."""

    size: tuple[int, int]
    """Image size (width, height)."""

    metadata: dict = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.boxes)


class SheetProcessor:
    """
    Sprite sheet processor.

    Converts settings into DetectionConfig and SegmentationOptions, then:
    1. Detects the row/column grid
    2. Segments irregular sheets into sprite regions
    3. Crops regions to their content
    """

    def __init__(
        self,
        detection_settings: Optional[DetectionSettings] = None,
        segmentation_settings: Optional[SegmentationSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the processor.

        Args:
            detection_settings: Override detection settings.
            segmentation_settings: Override segmentation settings.
            logger: Diagnostic sink passed to the detector and segmenters.
        """
        self.logger = logger or logging.getLogger(__name__)
        self._detection_settings = detection_settings or settings.detection
        self._segmentation_settings = segmentation_settings or settings.segmentation

        self.detection_config = DetectionConfig(
            color_threshold=self._detection_settings.color_threshold,
            luminance_threshold=self._detection_settings.luminance_threshold,
            variance_radius=self._detection_settings.variance_radius,
            smoothing_sigma=self._detection_settings.smoothing_sigma,
            prominence_ratio=self._detection_settings.prominence_ratio,
            min_distance_divisor=self._detection_settings.min_distance_divisor,
            common_sprite_sizes=tuple(self._detection_settings.common_sprite_sizes),
            min_cell_size=self._detection_settings.min_cell_size,
            max_cell_size=self._detection_settings.max_cell_size,
            transition_weight=self._detection_settings.transition_weight,
            edge_weight=self._detection_settings.edge_weight,
            variance_weight=self._detection_settings.variance_weight,
            strategies=tuple(self._detection_settings.strategies),
        )
        self._detector = GridDetector(self.detection_config, logger=self.logger)

    def segmentation_options(self, **overrides) -> SegmentationOptions:
        """
        Build segmentation options from settings.

        Args:
            **overrides: SegmentationOptions fields to replace; None values
                are ignored.

        Returns:
            Validated SegmentationOptions.
        """
        seg = self._segmentation_settings
        values = {
            "mode": seg.mode,
            "background_color": tuple(seg.background_color),
            "tolerance": seg.tolerance,
            "min_width": seg.min_width,
            "min_height": seg.min_height,
            "max_sprites": seg.max_sprites,
            "algorithm": seg.algorithm,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SegmentationOptions(**values)

    def analyze_grid(self, image: Union[np.ndarray, Image.Image, Path, str]) -> GridAnalysis:
        """
        Detect the grid of a sprite sheet.

        Args:
            image: Input image.

        Returns:
            GridAnalysis with the best result and every candidate.
        """
        buffer = as_pixel_buffer(image)
        height, width = buffer.shape[:2]

        candidates = self._detector.detect_all(buffer)
        best = DetectionResult(rows=1, cols=1, confidence=0.0)
        for candidate in candidates:
            if candidate.confidence > best.confidence:
                best = candidate

        self.logger.info(
            f"Grid for {width}x{height} sheet: {best.rows}x{best.cols} "
            f"(strategy={best.strategy}, confidence={best.confidence:.3f})"
        )
        return GridAnalysis(result=best, candidates=candidates, size=(width, height))

    def find_regions(
        self,
        image: Union[np.ndarray, Image.Image, Path, str],
        sort_by: Optional[str] = None,
        crop: Optional[bool] = None,
        **overrides,
    ) -> RegionAnalysis:
        """
        Segment a sprite sheet into regions.

        Args:
            image: Input image.
            sort_by: Output order (defaults to settings).
            crop: Also compute content-cropped boxes (defaults to settings).
            **overrides: SegmentationOptions fields to replace.

        Returns:
            RegionAnalysis with boxes and content boxes.
        """
        buffer = as_pixel_buffer(image)
        height, width = buffer.shape[:2]

        options = self.segmentation_options(**overrides)
        sort_by = sort_by or self._segmentation_settings.sort_by
        crop = self._segmentation_settings.crop_to_content if crop is None else crop

        segmenter = create_segmenter(options, self.logger)
        boxes = sort_boxes(segmenter.segment(buffer), sort_by)

        content_boxes = []
        if crop:
            content_boxes = [crop_to_content(buffer, box, options.background) for box in boxes]

        self.logger.info(
            f"Found {len(boxes)} regions in {width}x{height} sheet "
            f"(algorithm={options.algorithm}, mode={options.mode})"
        )

        return RegionAnalysis(
            boxes=boxes,
            content_boxes=content_boxes,
            size=(width, height),
            metadata={"algorithm": options.algorithm, "sort_by": sort_by},
        )


def create_processor(**kwargs) -> SheetProcessor:
    """
    Factory function to create a sheet processor.

    Args:
        **kwargs: Override configuration options.

    Returns:
        Configured SheetProcessor.
    """
    return SheetProcessor(**kwargs)


_processor: SheetProcessor | None = None


def get_processor() -> SheetProcessor:
    """Get the shared processor built from application settings."""
    global _processor
    if _processor is None:
        _processor = SheetProcessor()
    return _processor
