"""
Value types shared by sprite sheet detection, segmentation and slicing.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, Union
import numpy as np
from PIL import Image


BackgroundMode = Literal["transparent", "color"]
Axis = Literal["horizontal", "vertical"]

BACKGROUND_MODES = ("transparent", "color")


class InvalidParameterError(ValueError):
    """Raised when a caller passes a parameter outside its valid range."""

    pass


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned region of an image, origin at the top-left corner."""

    x: int
    """Left edge."""

    y: int
    """Top edge."""

    width: int
    """Width in pixels."""

    height: int
    """Height in pixels."""

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidParameterError(
                f"Box dimensions must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def x_end(self) -> int:
        return self.x + self.width

    @property
    def y_end(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, other: "BoundingBox") -> bool:
        """Check if another box lies entirely inside this one."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.x_end <= self.x_end
            and other.y_end <= self.y_end
        )

    def clamp(self, width: int, height: int) -> "BoundingBox":
        """Clip the box to an image of the given size."""
        x0 = min(max(0, self.x), width)
        y0 = min(max(0, self.y), height)
        x1 = min(max(x0, self.x_end), width)
        y1 = min(max(y0, self.y_end), height)
        return BoundingBox(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Peak:
    """Local maximum of a 1-D signal."""

    index: int
    """Position in the signal."""

    value: float
    """Signal value at the peak."""

    prominence: float = 0.0
    """Height above the higher of the two surrounding valleys (>= 0)."""


@dataclass(frozen=True)
class DivisionEstimate:
    """Number of cells along one axis, as inferred from a signal."""

    divisions: int
    confidence: float
    peaks: tuple[Peak, ...] = ()


@dataclass(frozen=True)
class DetectionResult:
    """Grid inferred by a detection strategy."""

    rows: int
    """Number of rows (>= 1)."""

    cols: int
    """Number of columns (>= 1)."""

    confidence: float
    """Heuristic quality score in [0, 1]; only used to rank strategies."""

    strategy: str = "none"
    """Name of the strategy that produced this result."""


@dataclass(frozen=True)
class Grid:
    """Uniform row/column lattice laid over an image."""

    rows: int
    cols: int

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise InvalidParameterError(
                f"Grid needs at least one row and column, got {self.rows}x{self.cols}"
            )

    @property
    def num_cells(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class BackgroundParams:
    """Parameters deciding which pixels count as background."""

    mode: BackgroundMode = "transparent"
    """'transparent' (alpha test) or 'color' (distance to background_color)."""

    background_color: Optional[tuple[int, int, int]] = (255, 255, 255)
    """Reference RGB color for 'color' mode."""

    tolerance: int = 20
    """Maximum per-channel difference still treated as background."""

    def __post_init__(self):
        if self.mode not in BACKGROUND_MODES:
            raise InvalidParameterError(
                f"Unknown background mode: {self.mode}. Available: {list(BACKGROUND_MODES)}"
            )
        if self.tolerance < 0:
            raise InvalidParameterError(f"Tolerance must be non-negative, got {self.tolerance}")


@dataclass
class SlicedRegion:
    """A region cut out of a sprite sheet."""

    image: np.ndarray
    """RGBA pixels of the region (an owned copy)."""

    bounds: BoundingBox
    """Region in source image coordinates."""

    index: int
    """Position of the region in the returned sequence."""

    content_bounds: Optional[BoundingBox] = None
    """Tight content box in source coordinates, when cropping was applied."""

    metadata: dict = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def to_pil(self) -> Image.Image:
        """Convert region to PIL Image."""
        return Image.fromarray(self.image)


def as_pixel_buffer(image: Union[np.ndarray, Image.Image, Path, str]) -> np.ndarray:
    """
    Convert an image to a read-only RGBA pixel buffer.

    Args:
        image: Image as numpy array (HxW, HxWx3 or HxWx4), PIL Image, or path.

    Returns:
        uint8 array of shape (height, width, 4). The caller's array is never
        modified; the returned view is not writeable.

    Raises:
        InvalidParameterError: If the array has an unsupported shape or dtype.
    """
    if isinstance(image, (str, Path)):
        image = Image.open(image)

    if isinstance(image, Image.Image):
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        buffer = np.array(image)
        buffer.flags.writeable = False
        return buffer

    if not isinstance(image, np.ndarray):
        raise TypeError(f"Unsupported image type: {type(image)}")

    if image.dtype != np.uint8:
        raise InvalidParameterError(f"Pixel buffer must be uint8, got {image.dtype}")

    if image.ndim == 2:
        rgb = np.repeat(image[:, :, np.newaxis], 3, axis=2)
        alpha = np.full(image.shape, 255, dtype=np.uint8)
        buffer = np.dstack([rgb, alpha])
    elif image.ndim == 3 and image.shape[2] == 3:
        alpha = np.full(image.shape[:2], 255, dtype=np.uint8)
        buffer = np.dstack([image, alpha])
    elif image.ndim == 3 and image.shape[2] == 4:
        buffer = image.view()
    else:
        raise InvalidParameterError(f"Unsupported pixel buffer shape: {image.shape}")

    buffer.flags.writeable = False
    return buffer
