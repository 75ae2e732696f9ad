"""
Sprite sheet analysis.

This package detects the row/column grid of uniform sprite sheets and
segments irregular sheets into individual sprite regions.
"""

from .base import (
    BackgroundParams,
    BoundingBox,
    DetectionResult,
    DivisionEstimate,
    Grid,
    InvalidParameterError,
    Peak,
    SlicedRegion,
    as_pixel_buffer,
)
from .classifier import background_mask, foreground_mask, is_background
from .detection import DetectionConfig, GridDetector, auto_detect_grid, create_detector
from .segmentation import SegmentationOptions, create_segmenter, detect_sprite_bounds
from .regions import (
    cell_at,
    crop_image,
    crop_to_content,
    grid_cell_box,
    merge_boxes,
    slice_grid,
    slice_regions,
    sort_boxes,
    split_box,
)
from .processor import GridAnalysis, RegionAnalysis, SheetProcessor, create_processor, get_processor

__all__ = [
    "BackgroundParams",
    "BoundingBox",
    "DetectionResult",
    "DivisionEstimate",
    "Grid",
    "InvalidParameterError",
    "Peak",
    "SlicedRegion",
    "as_pixel_buffer",
    "background_mask",
    "foreground_mask",
    "is_background",
    "DetectionConfig",
    "GridDetector",
    "auto_detect_grid",
    "create_detector",
    "SegmentationOptions",
    "create_segmenter",
    "detect_sprite_bounds",
    "cell_at",
    "crop_image",
    "crop_to_content",
    "grid_cell_box",
    "merge_boxes",
    "slice_grid",
    "slice_regions",
    "sort_boxes",
    "split_box",
    "GridAnalysis",
    "RegionAnalysis",
    "SheetProcessor",
    "create_processor",
    "get_processor",
]
