from fastapi import APIRouter
from pydantic import BaseModel

from sheetscan.sprites.detection import StrategyRegistry

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    strategies: list[str]


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check API health.

    Returns the API status and the registered grid detection strategies.
    """
    return HealthResponse(
        status="healthy",
        strategies=StrategyRegistry.list_registered(),
    )
