"""
Two-pass connected component segmenter.
"""

import numpy as np

from ..base import BoundingBox
from .base import BaseSegmenter


class UnionFind:
    """Disjoint-set over integer labels whose root is the smallest member."""

    def __init__(self):
        self._parent: dict[int, int] = {}

    def add(self, label: int) -> None:
        self._parent.setdefault(label, label)

    def find(self, label: int) -> int:
        root = label
        while self._parent[root] != root:
            root = self._parent[root]

        # Path compression
        while self._parent[label] != root:
            self._parent[label], label = root, self._parent[label]

        return root

    def union(self, a: int, b: int) -> int:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a

        root, child = min(root_a, root_b), max(root_a, root_b)
        self._parent[child] = root
        return root


class ConnectedComponentSegmenter(BaseSegmenter):
    """
    Classic two-pass labeling with 4-connectivity.

    Pass 1 labels each foreground pixel from its left and top neighbours
    and records equivalences. Pass 2 resolves every label to the smallest
    equivalent label and accumulates its bounds.
    """

    @property
    def name(self) -> str:
        return "connected_components"

    def label(self, foreground: np.ndarray) -> list[BoundingBox]:
        height, width = foreground.shape
        rows = foreground.tolist()
        labels = [[0] * width for _ in range(height)]
        equivalences = UnionFind()
        next_label = 1

        # Pass 1
        for y in range(height):
            row = rows[y]
            current = labels[y]
            above = labels[y - 1] if y > 0 else None
            for x in range(width):
                if not row[x]:
                    continue

                left = current[x - 1] if x > 0 else 0
                top = above[x] if above is not None else 0

                if left == 0 and top == 0:
                    current[x] = next_label
                    equivalences.add(next_label)
                    next_label += 1
                elif left and top:
                    current[x] = min(left, top)
                    if left != top:
                        equivalences.union(left, top)
                else:
                    current[x] = left or top

        # Pass 2
        bounds: dict[int, list[int]] = {}
        for y in range(height):
            for x, label in enumerate(labels[y]):
                if label == 0:
                    continue

                root = equivalences.find(label)
                extent = bounds.get(root)
                if extent is None:
                    bounds[root] = [x, y, x, y]
                else:
                    extent[0] = min(extent[0], x)
                    extent[2] = max(extent[2], x)
                    extent[3] = y

        boxes: list[BoundingBox] = []
        for min_x, min_y, max_x, max_y in bounds.values():
            if len(boxes) >= self.options.max_sprites:
                break
            box_width = max_x - min_x + 1
            box_height = max_y - min_y + 1
            if self._accepts(box_width, box_height):
                boxes.append(BoundingBox(x=min_x, y=min_y, width=box_width, height=box_height))

        self.logger.debug(f"{next_label - 1} provisional labels, {len(bounds)} components")
        return boxes
