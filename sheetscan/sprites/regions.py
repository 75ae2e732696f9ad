"""
Region post-processing: crop, merge, split, sort and slice bounding boxes.
"""

import logging
import math
from typing import Literal, Optional, Sequence
import numpy as np
import cv2

from .base import BackgroundParams, BoundingBox, Grid, InvalidParameterError, SlicedRegion
from .classifier import foreground_mask


logger = logging.getLogger(__name__)

SortBy = Literal["position", "size", "area", "none"]

SORT_ORDERS = ("position", "size", "area", "none")


def crop_to_content(
    buffer: np.ndarray,
    box: Optional[BoundingBox] = None,
    params: Optional[BackgroundParams] = None,
    min_width: int = 1,
    min_height: int = 1,
) -> BoundingBox:
    """
    Shrink a region to the tight box around its non-background pixels.

    Args:
        buffer: RGBA pixel buffer.
        box: Region to crop; defaults to the whole buffer.
        params: Background classification parameters.
        min_width: Smallest width returned.
        min_height: Smallest height returned.

    Returns:
        Content box in buffer coordinates. A region with no content yields a
        min_width x min_height box at the region origin.
    """
    if min_width < 0 or min_height < 0:
        raise InvalidParameterError(
            f"Minimum crop size must be non-negative, got {min_width}x{min_height}"
        )

    height, width = buffer.shape[:2]
    region = (box or BoundingBox(0, 0, width, height)).clamp(width, height)

    pixels = buffer[region.y:region.y_end, region.x:region.x_end]
    mask = foreground_mask(pixels, params).astype(np.uint8)

    x, y, w, h = cv2.boundingRect(mask) if mask.size else (0, 0, 0, 0)
    if w == 0 or h == 0:
        return BoundingBox(x=region.x, y=region.y, width=min_width, height=min_height)

    cropped = BoundingBox(
        x=region.x + x,
        y=region.y + y,
        width=max(min_width, w),
        height=max(min_height, h),
    )
    return cropped.clamp(width, height)


def crop_image(buffer: np.ndarray, box: BoundingBox) -> np.ndarray:
    """
    Copy the pixels of a box out of a buffer.

    Parts of the box outside the buffer come back fully transparent.

    Returns:
        Owned uint8 array of shape (box.height, box.width, 4).
    """
    height, width = buffer.shape[:2]
    out = np.zeros((box.height, box.width, 4), dtype=np.uint8)

    src = box.clamp(width, height)
    if src.area:
        dx = src.x - box.x
        dy = src.y - box.y
        out[dy:dy + src.height, dx:dx + src.width] = buffer[src.y:src.y_end, src.x:src.x_end, :4]

    return out


def merge_boxes(
    boxes: Sequence[BoundingBox],
    indices: Optional[Sequence[int]] = None,
    padding: int = 0,
    image_size: Optional[tuple[int, int]] = None,
) -> Optional[BoundingBox]:
    """
    Merge boxes into the smallest box enclosing all of them.

    Args:
        boxes: Candidate boxes.
        indices: Positions of the boxes to merge; defaults to all. Positions
            outside the list are ignored.
        padding: Margin added on every side.
        image_size: Optional (width, height) that clamps the far edge.

    Returns:
        The merged box, or None when nothing valid is selected.
    """
    if padding < 0:
        raise InvalidParameterError(f"Padding must be non-negative, got {padding}")

    if indices is None:
        selected = list(boxes)
    else:
        selected = [boxes[i] for i in indices if 0 <= i < len(boxes)]

    if not selected:
        return None

    min_x = min(b.x for b in selected) - padding
    min_y = min(b.y for b in selected) - padding
    max_x = max(b.x_end for b in selected) + padding
    max_y = max(b.y_end for b in selected) + padding

    if image_size is not None:
        max_x = min(max_x, image_size[0])
        max_y = min(max_y, image_size[1])

    x = max(0, min_x)
    y = max(0, min_y)

    return BoundingBox(x=x, y=y, width=max(0, max_x - x), height=max(0, max_y - y))


def split_box(
    box: BoundingBox,
    rows: int,
    cols: int,
    round_to_pixels: bool = True,
    distribute_remainder: bool = True,
) -> list[BoundingBox]:
    """
    Split a box into a rows x cols grid of cells.

    With distribute_remainder the first (size % count) rows/columns get one
    extra pixel, so the cells tile the box exactly. Otherwise cells are
    size / count wide, rounded to whole pixels when round_to_pixels is set
    and left fractional when it is not.

    Returns:
        Cells in row-major order.
    """
    if rows < 1 or cols < 1:
        raise InvalidParameterError(f"Split needs at least one row and column, got {rows}x{cols}")

    cells = []

    if not distribute_remainder:
        cell_w = box.width / cols
        cell_h = box.height / rows
        for r in range(rows):
            for c in range(cols):
                cell_x = box.x + c * cell_w
                cell_y = box.y + r * cell_h
                if round_to_pixels:
                    cells.append(BoundingBox(
                        x=_round_half_up(cell_x),
                        y=_round_half_up(cell_y),
                        width=_round_half_up(cell_w),
                        height=_round_half_up(cell_h),
                    ))
                else:
                    cells.append(BoundingBox(x=cell_x, y=cell_y, width=cell_w, height=cell_h))
        return cells

    base_w, rem_w = divmod(box.width, cols)
    base_h, rem_h = divmod(box.height, rows)

    current_y = box.y
    for r in range(rows):
        cell_h = base_h + (1 if r < rem_h else 0)
        current_x = box.x
        for c in range(cols):
            cell_w = base_w + (1 if c < rem_w else 0)
            cells.append(BoundingBox(x=current_x, y=current_y, width=cell_w, height=cell_h))
            current_x += cell_w
        current_y += cell_h

    return cells


def sort_boxes(boxes: Sequence[BoundingBox], sort_by: SortBy = "position") -> list[BoundingBox]:
    """
    Order boxes.

    'position' reads top-to-bottom then left-to-right, 'size' and 'area'
    put the largest first, 'none' keeps the input order.
    """
    if sort_by == "position":
        return sorted(boxes, key=lambda b: (b.y, b.x))
    if sort_by == "size":
        return sorted(boxes, key=lambda b: b.width + b.height, reverse=True)
    if sort_by == "area":
        return sorted(boxes, key=lambda b: b.area, reverse=True)
    if sort_by == "none":
        return list(boxes)
    raise InvalidParameterError(f"Unknown sort order: {sort_by}. Available: {list(SORT_ORDERS)}")


def slice_regions(
    buffer: np.ndarray,
    boxes: Sequence[BoundingBox],
    sort_by: SortBy = "position",
    crop_to_content: bool = True,
    params: Optional[BackgroundParams] = None,
) -> list[SlicedRegion]:
    """
    Cut sprites out of a sheet.

    Args:
        buffer: RGBA pixel buffer.
        boxes: Regions to cut, usually from segmentation.
        sort_by: Output order.
        crop_to_content: Shrink each region to its non-background pixels.
        params: Background parameters used for cropping (transparent by default).

    Returns:
        SlicedRegion per box, indexed in output order.
    """
    regions = []
    for index, box in enumerate(sort_boxes(boxes, sort_by)):
        content = None
        target = box
        if crop_to_content:
            content = _crop(buffer, box, params)
            target = content

        regions.append(SlicedRegion(
            image=crop_image(buffer, target),
            bounds=box,
            index=index,
            content_bounds=content,
        ))

    logger.debug(f"Sliced {len(regions)} regions (sort_by={sort_by}, crop={crop_to_content})")
    return regions


def grid_cell_box(width: int, height: int, grid: Grid, row: int, col: int) -> BoundingBox:
    """
    Box of one grid cell.

    Cells are floor(width / cols) x floor(height / rows); the last column
    and row absorb the remainder.
    """
    if not (0 <= row < grid.rows and 0 <= col < grid.cols):
        raise InvalidParameterError(
            f"Cell ({row}, {col}) outside {grid.rows}x{grid.cols} grid"
        )

    cell_w = width // grid.cols
    cell_h = height // grid.rows
    x = col * cell_w
    y = row * cell_h

    w = width - x if col == grid.cols - 1 else cell_w
    h = height - y if row == grid.rows - 1 else cell_h

    return BoundingBox(x=x, y=y, width=w, height=h)


def slice_grid(
    buffer: np.ndarray,
    grid: Grid,
    remove_padding: bool = False,
    params: Optional[BackgroundParams] = None,
) -> list[SlicedRegion]:
    """
    Cut a sheet into uniform grid cells.

    Args:
        buffer: RGBA pixel buffer.
        grid: Row/column lattice.
        remove_padding: Crop every cell to its content.
        params: Background parameters used for cropping.

    Returns:
        One SlicedRegion per cell in row-major order, with 'row' and 'col'
        in its metadata.
    """
    height, width = buffer.shape[:2]
    regions = []

    for row in range(grid.rows):
        for col in range(grid.cols):
            box = grid_cell_box(width, height, grid, row, col)
            content = _crop(buffer, box, params) if remove_padding else None

            regions.append(SlicedRegion(
                image=crop_image(buffer, content or box),
                bounds=box,
                index=len(regions),
                content_bounds=content,
                metadata={"row": row, "col": col},
            ))

    return regions


def cell_at(x: int, y: int, width: int, height: int, grid: Grid) -> Optional[tuple[int, int]]:
    """
    Find the (row, col) of the grid cell containing a point.

    Returns:
        The cell, or None when the point lies outside the image.
    """
    if not (0 <= x < width and 0 <= y < height):
        return None

    cell_w = width // grid.cols
    cell_h = height // grid.rows

    col = min(x // cell_w, grid.cols - 1) if cell_w else grid.cols - 1
    row = min(y // cell_h, grid.rows - 1) if cell_h else grid.rows - 1

    return row, col


def _crop(
    buffer: np.ndarray,
    box: BoundingBox,
    params: Optional[BackgroundParams],
) -> BoundingBox:
    return crop_to_content(buffer, box, params)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
