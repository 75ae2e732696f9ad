from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from sheetscan.config import settings
from sheetscan.schemas.regions import (
    BoxModel,
    CellModel,
    MergeRequest,
    MergeResponse,
    RegionsResponse,
    SplitRequest,
    SplitResponse,
)
from sheetscan.sprites import (
    InvalidParameterError,
    SheetProcessor,
    get_processor,
    merge_boxes,
    split_box,
)
from sheetscan.utils.file_validation import ValidationError, load_pixel_buffer

router = APIRouter(prefix="/regions", tags=["Regions"])


def parse_color(value: str | None) -> tuple[int, int, int] | None:
    """
    Parse an 'r,g,b' form value.

    Raises:
        InvalidParameterError: If the value is not three integers in 0..255.
    """
    if value is None or value == "":
        return None

    parts = [p.strip() for p in value.split(",")]
    try:
        channels = tuple(int(p) for p in parts)
    except ValueError:
        raise InvalidParameterError(f"Invalid color '{value}', expected 'r,g,b'")

    if len(channels) != 3 or not all(0 <= c <= 255 for c in channels):
        raise InvalidParameterError(f"Invalid color '{value}', expected three values in 0..255")

    return channels


@router.post("/detect", response_model=RegionsResponse)
async def detect_regions(
    file: UploadFile = File(..., description="Sprite sheet image"),
    mode: str | None = Form(default=None, description="Background mode: 'transparent' or 'color'"),
    background_color: str | None = Form(default=None, description="Background color as 'r,g,b'"),
    tolerance: int | None = Form(default=None, description="Per-channel tolerance for color mode"),
    min_width: int | None = Form(default=None, description="Minimum region width"),
    min_height: int | None = Form(default=None, description="Minimum region height"),
    max_sprites: int | None = Form(default=None, description="Maximum number of regions"),
    algorithm: str | None = Form(default=None, description="'floodfill' or 'connected_components'"),
    sort_by: str | None = Form(default=None, description="'position', 'size', 'area' or 'none'"),
    crop_to_content: bool | None = Form(default=None, description="Also return content-cropped boxes"),
    processor: SheetProcessor = Depends(get_processor),
):
    """
    Segment an irregular sprite sheet into sprite regions.

    Unset options fall back to the configured segmentation settings.
    """
    try:
        buffer = load_pixel_buffer(file.file, max_size_mb=settings.max_upload_mb)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid image file: {e}",
        )

    try:
        analysis = processor.find_regions(
            buffer,
            sort_by=sort_by,
            crop=crop_to_content,
            mode=mode,
            background_color=parse_color(background_color),
            tolerance=tolerance,
            min_width=min_width,
            min_height=min_height,
            max_sprites=max_sprites,
            algorithm=algorithm,
        )
    except InvalidParameterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    width, height = analysis.size
    return RegionsResponse(
        count=analysis.count,
        boxes=[BoxModel.from_box(b) for b in analysis.boxes],
        content_boxes=[BoxModel.from_box(b) for b in analysis.content_boxes],
        width=width,
        height=height,
    )


@router.post("/split", response_model=SplitResponse)
async def split_region(request: SplitRequest):
    """
    Split one box into a grid of cells.

    Cells are returned in row-major order.
    """
    try:
        cells = split_box(
            request.box.to_box(),
            request.rows,
            request.cols,
            round_to_pixels=request.round_to_pixels,
            distribute_remainder=request.distribute_remainder,
        )
    except InvalidParameterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return SplitResponse(
        boxes=[CellModel(x=c.x, y=c.y, width=c.width, height=c.height) for c in cells],
    )


@router.post("/merge", response_model=MergeResponse)
async def merge_regions(request: MergeRequest):
    """
    Merge boxes into the smallest box enclosing all of them.

    Returns 404 when no valid box is selected.
    """
    try:
        merged = merge_boxes(
            [b.to_box() for b in request.boxes],
            indices=request.indices,
            padding=request.padding,
        )
    except InvalidParameterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if merged is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No valid boxes selected",
        )

    return MergeResponse(box=BoxModel.from_box(merged))
