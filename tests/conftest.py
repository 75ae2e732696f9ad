"""Shared fixtures: synthetic sprite sheets built from numpy arrays."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image


# ---------------------------------------------------------------------------
# Synthetic image helpers
# ---------------------------------------------------------------------------


def make_tile_sheet(rows: int = 4, cols: int = 4, tile: int = 64) -> np.ndarray:
    """Create an opaque RGBA sheet of solid tiles.

    Neighbouring tiles alternate between a dark and a bright family, so
    every seam is a strong color change. All tiles have distinct colors.
    """
    sheet = np.zeros((rows * tile, cols * tile, 4), dtype=np.uint8)
    sheet[:, :, 3] = 255
    for r in range(rows):
        for c in range(cols):
            if (r + c) % 2 == 0:
                color = (20 + 10 * r, 20 + 10 * c, 40)
            else:
                color = (200 + 10 * r, 220 - 10 * c, 180)
            sheet[r * tile:(r + 1) * tile, c * tile:(c + 1) * tile, :3] = color
    return sheet


def make_uniform(size: int = 100, color=(90, 140, 200)) -> np.ndarray:
    """Create a solid opaque RGBA image."""
    image = np.zeros((size, size, 4), dtype=np.uint8)
    image[:, :, :3] = color
    image[:, :, 3] = 255
    return image


def make_squares_sheet() -> np.ndarray:
    """Three opaque 10x10 squares on a transparent 100x30 canvas."""
    sheet = np.zeros((30, 100, 4), dtype=np.uint8)
    for x in (5, 40, 75):
        sheet[10:20, x:x + 10] = (220, 60, 60, 255)
    return sheet


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode a uint8 array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tile_sheet() -> np.ndarray:
    return make_tile_sheet()


@pytest.fixture
def uniform_image() -> np.ndarray:
    return make_uniform()


@pytest.fixture
def squares_sheet() -> np.ndarray:
    return make_squares_sheet()
