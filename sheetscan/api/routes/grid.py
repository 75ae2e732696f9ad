from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from sheetscan.config import settings
from sheetscan.schemas.grid import CandidateModel, GridResponse
from sheetscan.sprites import InvalidParameterError, SheetProcessor, get_processor
from sheetscan.utils.file_validation import ValidationError, load_pixel_buffer

router = APIRouter(prefix="/grid", tags=["Grid"])


@router.post("", response_model=GridResponse)
async def detect_grid(
    file: UploadFile = File(..., description="Sprite sheet image"),
    processor: SheetProcessor = Depends(get_processor),
):
    """
    Detect the row/column grid of a sprite sheet.

    Every detection strategy is evaluated; the most confident one wins.
    """
    try:
        buffer = load_pixel_buffer(file.file, max_size_mb=settings.max_upload_mb)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid image file: {e}",
        )

    try:
        analysis = processor.analyze_grid(buffer)
    except InvalidParameterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    width, height = analysis.size
    return GridResponse(
        rows=analysis.result.rows,
        cols=analysis.result.cols,
        confidence=analysis.result.confidence,
        strategy=analysis.result.strategy,
        width=width,
        height=height,
        candidates=[
            CandidateModel(
                strategy=c.strategy,
                rows=c.rows,
                cols=c.cols,
                confidence=c.confidence,
            )
            for c in analysis.candidates
        ],
    )
