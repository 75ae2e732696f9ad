"""Tests for settings and the unified sheet processor."""

from __future__ import annotations

import logging

import pydantic
import pytest

from sheetscan.config import DetectionSettings, SegmentationSettings, Settings
from sheetscan.sprites import BoundingBox, Grid, InvalidParameterError, SheetProcessor


@pytest.fixture
def processor() -> SheetProcessor:
    return SheetProcessor(DetectionSettings(), SegmentationSettings())


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.segmentation.algorithm == "floodfill"
        assert settings.segmentation.tolerance == 20
        assert settings.detection.strategies == ["transitions", "edges", "variance"]
        assert settings.max_upload_mb > 0

    def test_validation(self):
        with pytest.raises(pydantic.ValidationError):
            DetectionSettings(prominence_ratio=1.5)
        with pytest.raises(pydantic.ValidationError):
            SegmentationSettings(tolerance=-1)
        with pytest.raises(pydantic.ValidationError):
            SegmentationSettings(algorithm="watershed")


class TestSheetProcessor:
    def test_settings_flow_into_detection_config(self):
        processor = SheetProcessor(DetectionSettings(edge_weight=0.5, smoothing_sigma=2.0))
        assert processor.detection_config.edge_weight == 0.5
        assert processor.detection_config.smoothing_sigma == 2.0
        assert isinstance(processor.detection_config.common_sprite_sizes, tuple)

    def test_analyze_grid(self, processor, tile_sheet):
        analysis = processor.analyze_grid(tile_sheet)
        assert analysis.grid == Grid(4, 4)
        assert analysis.size == (256, 256)
        assert len(analysis.candidates) == 3
        assert analysis.result.confidence == max(c.confidence for c in analysis.candidates)

    def test_find_regions(self, processor, squares_sheet):
        analysis = processor.find_regions(squares_sheet)
        assert analysis.count == 3
        assert analysis.content_boxes == analysis.boxes
        assert analysis.metadata["algorithm"] == "floodfill"

    def test_overrides(self, processor, squares_sheet):
        analysis = processor.find_regions(
            squares_sheet,
            sort_by="none",
            crop=False,
            algorithm="connected_components",
            max_sprites=1,
        )
        assert analysis.boxes == [BoundingBox(5, 10, 10, 10)]
        assert analysis.content_boxes == []
        assert analysis.metadata["algorithm"] == "connected_components"

    def test_none_overrides_fall_back_to_settings(self, processor):
        options = processor.segmentation_options(mode=None, tolerance=None)
        assert options.mode == "transparent"
        assert options.tolerance == 20

    def test_invalid_override_raises(self, processor, squares_sheet):
        with pytest.raises(InvalidParameterError):
            processor.find_regions(squares_sheet, mode="edge")

    def test_injected_logger(self, squares_sheet, caplog):
        sink = logging.getLogger("test.processor")
        processor = SheetProcessor(logger=sink)
        with caplog.at_level(logging.INFO, logger="test.processor"):
            processor.find_regions(squares_sheet)
        assert any(r.name == "test.processor" for r in caplog.records)
