from pydantic import BaseModel, Field


class CandidateModel(BaseModel):
    """Result of a single detection strategy."""

    strategy: str = Field(description="Strategy name")
    rows: int = Field(ge=1, description="Detected rows")
    cols: int = Field(ge=1, description="Detected columns")
    confidence: float = Field(ge=0.0, le=1.0, description="Heuristic quality score")


class GridResponse(BaseModel):
    """Grid detected in an uploaded sprite sheet."""

    rows: int = Field(ge=1, description="Number of rows")
    cols: int = Field(ge=1, description="Number of columns")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence of the selected strategy")
    strategy: str = Field(description="Strategy that produced the grid ('none' if no strategy scored)")
    width: int = Field(description="Image width")
    height: int = Field(description="Image height")
    candidates: list[CandidateModel] = Field(default_factory=list, description="Every strategy's result")
