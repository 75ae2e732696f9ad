"""
Stack-based flood fill segmenter.
"""

import numpy as np

from ..base import BoundingBox
from .base import BaseSegmenter


# Pixels visited by a single fill before it gives up
MAX_FILL_PIXELS = 100_000


class FloodFillSegmenter(BaseSegmenter):
    """
    Grows 4-connected regions from every unvisited foreground pixel.

    Seeds are taken in row-major order. A fill that reaches MAX_FILL_PIXELS
    stops and reports the box accumulated so far; pixels it did not reach
    can seed later fills.
    """

    @property
    def name(self) -> str:
        return "floodfill"

    def label(self, foreground: np.ndarray) -> list[BoundingBox]:
        height, width = foreground.shape
        visited = np.zeros((height, width), dtype=bool)
        max_sprites = self.options.max_sprites
        boxes: list[BoundingBox] = []

        seeds_y, seeds_x = np.nonzero(foreground)
        for y, x in zip(seeds_y.tolist(), seeds_x.tolist()):
            if len(boxes) >= max_sprites:
                break
            if visited[y, x]:
                continue

            left, top, right, bottom = self._fill(foreground, visited, x, y)
            box_width = right - left + 1
            box_height = bottom - top + 1

            if self._accepts(box_width, box_height):
                boxes.append(BoundingBox(x=left, y=top, width=box_width, height=box_height))

        return boxes

    def _fill(
        self,
        foreground: np.ndarray,
        visited: np.ndarray,
        start_x: int,
        start_y: int,
    ) -> tuple[int, int, int, int]:
        """Fill from a seed and return (left, top, right, bottom), inclusive."""
        height, width = foreground.shape
        left = right = start_x
        top = bottom = start_y
        pixel_count = 0
        stack = [(start_x, start_y)]

        while stack and pixel_count < MAX_FILL_PIXELS:
            x, y = stack.pop()
            if visited[y, x]:
                continue

            visited[y, x] = True
            pixel_count += 1

            left = min(left, x)
            right = max(right, x)
            top = min(top, y)
            bottom = max(bottom, y)

            for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
                if 0 <= nx < width and 0 <= ny < height and foreground[ny, nx] and not visited[ny, nx]:
                    stack.append((nx, ny))

        if pixel_count >= MAX_FILL_PIXELS:
            self.logger.warning(
                f"Flood fill from ({start_x}, {start_y}) hit the {MAX_FILL_PIXELS} pixel cap"
            )

        return left, top, right, bottom
