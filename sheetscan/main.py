import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sheetscan.api.routes import grid, health, regions
from sheetscan.config import settings
from sheetscan.sprites.detection import StrategyRegistry

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting sprite sheet API")
    logger.info(f"Registered detection strategies: {StrategyRegistry.list_registered()}")
    logger.info(
        f"Segmentation defaults: algorithm={settings.segmentation.algorithm}, "
        f"mode={settings.segmentation.mode}, max_upload={settings.max_upload_mb}MB"
    )

    yield

    # Shutdown
    logger.info("Shutting down sprite sheet API")


app = FastAPI(
    title="Sprite Sheet API",
    description="Sprite sheet grid detection and sprite region segmentation",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(health.router)
app.include_router(grid.router)
app.include_router(regions.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Sprite Sheet API",
        "version": "1.0.0",
        "docs": "/docs",
    }
