"""Tests for background/foreground pixel classification."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from sheetscan.sprites import (
    BackgroundParams,
    InvalidParameterError,
    as_pixel_buffer,
    background_mask,
    foreground_mask,
    is_background,
)


def _pixels(*rgba) -> np.ndarray:
    """One-row buffer from RGBA tuples."""
    return np.array([list(rgba)], dtype=np.uint8)


# ---------------------------------------------------------------------------
# is_background
# ---------------------------------------------------------------------------


class TestIsBackground:
    def test_transparent_mode_uses_alpha_threshold(self):
        buf = _pixels((0, 0, 0, 5), (0, 0, 0, 10), (255, 255, 255, 0))
        assert is_background(0, 0, buf) is True
        assert is_background(1, 0, buf) is False
        assert is_background(2, 0, buf) is True

    def test_color_mode_within_tolerance(self):
        buf = _pixels((250, 250, 250, 255), (240, 255, 255, 255))
        assert is_background(0, 0, buf, (255, 255, 255), 10, "color") is True
        assert is_background(1, 0, buf, (255, 255, 255), 10, "color") is False

    def test_color_mode_is_per_channel(self):
        # Each channel within 20, even though the Euclidean distance is not
        buf = _pixels((235, 235, 235, 255), (255, 255, 200, 255))
        assert is_background(0, 0, buf, (255, 255, 255), 20, "color") is True
        assert is_background(1, 0, buf, (255, 255, 255), 20, "color") is False

    def test_color_mode_ignores_alpha(self):
        buf = _pixels((255, 255, 255, 0))
        assert is_background(0, 0, buf, (0, 0, 0), 0, "color") is False

    def test_color_mode_without_reference_is_never_background(self):
        buf = _pixels((255, 255, 255, 255))
        assert is_background(0, 0, buf, None, 255, "color") is False

    def test_out_of_bounds_raises(self):
        buf = _pixels((0, 0, 0, 0))
        with pytest.raises(IndexError):
            is_background(1, 0, buf)
        with pytest.raises(IndexError):
            is_background(0, -1, buf)

    def test_negative_tolerance_raises(self):
        buf = _pixels((0, 0, 0, 0))
        with pytest.raises(InvalidParameterError):
            is_background(0, 0, buf, (0, 0, 0), -1, "color")

    def test_unknown_mode_raises(self):
        buf = _pixels((0, 0, 0, 0))
        with pytest.raises(InvalidParameterError):
            is_background(0, 0, buf, mode="edge")


# ---------------------------------------------------------------------------
# Masks
# ---------------------------------------------------------------------------


class TestMasks:
    def test_mask_matches_pointwise_classification(self):
        rng = np.random.RandomState(7)
        buf = rng.randint(0, 256, (12, 9, 4), dtype=np.uint8)

        for params in (
            BackgroundParams(),
            BackgroundParams(mode="color", background_color=(128, 128, 128), tolerance=60),
        ):
            mask = background_mask(buf, params)
            for y in range(buf.shape[0]):
                for x in range(buf.shape[1]):
                    expected = is_background(
                        x, y, buf, params.background_color, params.tolerance, params.mode
                    )
                    assert mask[y, x] == expected

    def test_foreground_is_inverse(self):
        buf = _pixels((0, 0, 0, 0), (0, 0, 0, 255))
        assert foreground_mask(buf).tolist() == [[False, True]]

    def test_params_validate(self):
        with pytest.raises(InvalidParameterError):
            BackgroundParams(tolerance=-5)
        with pytest.raises(InvalidParameterError):
            BackgroundParams(mode="edge")


# ---------------------------------------------------------------------------
# Pixel buffers
# ---------------------------------------------------------------------------


class TestPixelBuffer:
    def test_rgb_gains_opaque_alpha(self):
        rgb = np.full((3, 4, 3), 17, dtype=np.uint8)
        buf = as_pixel_buffer(rgb)
        assert buf.shape == (3, 4, 4)
        assert (buf[:, :, 3] == 255).all()

    def test_grayscale_is_replicated(self):
        gray = np.arange(6, dtype=np.uint8).reshape(2, 3)
        buf = as_pixel_buffer(gray)
        assert buf.shape == (2, 3, 4)
        assert (buf[:, :, 0] == gray).all()
        assert (buf[:, :, 2] == gray).all()

    def test_buffer_is_read_only_and_caller_array_untouched(self):
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        buf = as_pixel_buffer(rgba)
        assert not buf.flags.writeable
        assert rgba.flags.writeable

    def test_pil_image_is_converted(self):
        image = Image.new("RGB", (5, 3), (10, 20, 30))
        buf = as_pixel_buffer(image)
        assert buf.shape == (3, 5, 4)
        assert tuple(buf[0, 0]) == (10, 20, 30, 255)

    def test_rejects_bad_input(self):
        with pytest.raises(InvalidParameterError):
            as_pixel_buffer(np.zeros((2, 2, 4), dtype=np.float32))
        with pytest.raises(InvalidParameterError):
            as_pixel_buffer(np.zeros((2, 2, 2), dtype=np.uint8))
        with pytest.raises(TypeError):
            as_pixel_buffer([[0, 0]])
