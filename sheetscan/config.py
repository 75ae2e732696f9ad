from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DetectionSettings(BaseModel):
    """Configuration for grid detection."""

    color_threshold: float = Field(default=30.0, gt=0, description="RGB distance counted as a color transition")
    luminance_threshold: Optional[float] = Field(
        default=None, gt=0, description="Luminance difference counted as a transition (None = half of color_threshold)"
    )
    variance_radius: int = Field(default=3, ge=1, description="Radius of the sliding variance window")
    smoothing_sigma: float = Field(default=1.5, gt=0, description="Gaussian sigma applied before peak finding")
    prominence_ratio: float = Field(default=0.2, ge=0.0, le=1.0, description="Minimum prominence relative to the strongest peak")
    min_distance_divisor: int = Field(default=50, ge=1, description="Minimum peak spacing is axis size divided by this")
    common_sprite_sizes: list[int] = Field(
        default=[8, 16, 24, 32, 48, 64, 96, 128, 256], description="Cell sizes preferred when snapping"
    )
    min_cell_size: int = Field(default=8, gt=0, description="Smallest plausible cell size")
    max_cell_size: int = Field(default=512, gt=0, description="Largest plausible cell size")

    # Strategy weights
    transition_weight: float = Field(default=1.0, ge=0.0, le=1.0, description="Confidence weight of the transition strategy")
    edge_weight: float = Field(default=0.9, ge=0.0, le=1.0, description="Confidence weight of the edge strategy")
    variance_weight: float = Field(default=0.8, ge=0.0, le=1.0, description="Confidence weight of the variance strategy")

    strategies: list[str] = Field(
        default=["transitions", "edges", "variance"], description="Strategies in evaluation order"
    )


class SegmentationSettings(BaseModel):
    """Configuration for sprite region segmentation."""

    mode: Literal["transparent", "color"] = Field(default="transparent", description="Background classification mode")
    background_color: tuple[int, int, int] = Field(default=(255, 255, 255), description="Background RGB for color mode")
    tolerance: int = Field(default=20, ge=0, le=255, description="Per-channel tolerance for color mode")
    min_width: int = Field(default=8, ge=0, description="Regions narrower than this are dropped")
    min_height: int = Field(default=8, ge=0, description="Regions shorter than this are dropped")
    max_sprites: int = Field(default=1000, ge=0, description="Maximum number of regions returned")
    algorithm: Literal["floodfill", "connected_components"] = Field(
        default="floodfill", description="Labeling algorithm"
    )
    sort_by: Literal["position", "size", "area", "none"] = Field(default="position", description="Order of returned regions")
    crop_to_content: bool = Field(default=True, description="Shrink regions to their non-background pixels")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Upload Settings
    max_upload_mb: float = Field(default=20.0, gt=0, description="Largest accepted upload")

    detection: DetectionSettings = DetectionSettings()
    segmentation: SegmentationSettings = SegmentationSettings()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SHEETSCAN_"
        env_nested_delimiter = "__"


settings = Settings()
