from pydantic import BaseModel, Field

from sheetscan.sprites import BoundingBox


class BoxModel(BaseModel):
    """Axis-aligned box, origin at the top-left corner."""

    x: int = Field(ge=0, description="Left edge")
    y: int = Field(ge=0, description="Top edge")
    width: int = Field(ge=0, description="Width in pixels")
    height: int = Field(ge=0, description="Height in pixels")

    @classmethod
    def from_box(cls, box: BoundingBox) -> "BoxModel":
        return cls(x=box.x, y=box.y, width=box.width, height=box.height)

    def to_box(self) -> BoundingBox:
        return BoundingBox(x=self.x, y=self.y, width=self.width, height=self.height)


class CellModel(BaseModel):
    """Split cell; coordinates are fractional when pixel rounding is off."""

    x: int | float
    y: int | float
    width: int | float
    height: int | float


class RegionsResponse(BaseModel):
    """Sprite regions found in an uploaded sheet."""

    count: int = Field(description="Number of regions")
    boxes: list[BoxModel] = Field(description="Region boxes in the requested order")
    content_boxes: list[BoxModel] = Field(
        default_factory=list, description="Content-cropped box per region (empty when cropping is off)"
    )
    width: int = Field(description="Image width")
    height: int = Field(description="Image height")


class SplitRequest(BaseModel):
    """Request to split one box into a grid of cells."""

    box: BoxModel
    rows: int = Field(description="Number of rows")
    cols: int = Field(description="Number of columns")
    round_to_pixels: bool = Field(default=True, description="Round cells to whole pixels")
    distribute_remainder: bool = Field(
        default=True, description="Give leftover pixels to the first rows/columns so cells tile the box"
    )


class SplitResponse(BaseModel):
    """Cells of a split box in row-major order."""

    boxes: list[CellModel]


class MergeRequest(BaseModel):
    """Request to merge boxes into one enclosing box."""

    boxes: list[BoxModel] = Field(description="Candidate boxes")
    indices: list[int] | None = Field(default=None, description="Boxes to merge (default: all)")
    padding: int = Field(default=0, description="Margin added on every side")


class MergeResponse(BaseModel):
    """Merged box."""

    box: BoxModel
