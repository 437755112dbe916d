"""
Configuration management for Instagram Grid Maker
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, validator


class Settings(BaseSettings):
    """Application settings"""

    # Selection defaults (used when the user made no explicit choice)
    default_layout: str = Field(
        default="3x3",
        description="Grid layout used when none is selected (3x1, 3x2, 3x3)"
    )
    default_aspect: str = Field(
        default="square",
        description="Aspect mode used when none is selected (square, portrait)"
    )

    # Resampling
    resample_filter: str = Field(
        default="lanczos",
        description="Resampling filter (lanczos, bicubic, hamming, box)"
    )
    max_source_pixels: int = Field(
        default=100_000_000,
        description="Largest accepted source image, in pixels"
    )

    # Tile encoding
    jpeg_quality: int = Field(
        default=90,
        description="JPEG quality for encoded tiles (1-100); 90 is the 0.9 canvas export quality"
    )
    jpeg_optimize: bool = Field(
        default=False,
        description="Run an extra Huffman optimisation pass when encoding tiles"
    )

    # Archive
    archive_filename: str = Field(
        default="instagram-grid.zip",
        description="Suggested filename for the downloadable archive"
    )
    archive_compresslevel: int = Field(
        default=6,
        description="DEFLATE compression level (0-9)"
    )

    # Performance
    max_workers: int = Field(
        default=4,
        description="Maximum number of worker threads"
    )
    show_progress: bool = Field(
        default=False,
        description="Show tqdm progress bars while tiling and archiving"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file path"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format string"
    )

    @validator('max_workers')
    def validate_max_workers(cls, v):
        """Validate worker count"""
        if v < 1:
            raise ValueError(f"max_workers must be at least 1: {v}")
        return v

    @validator('jpeg_quality')
    def validate_jpeg_quality(cls, v):
        """Validate JPEG quality"""
        if not 1 <= v <= 100:
            raise ValueError(f"jpeg_quality must be between 1 and 100: {v}")
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Validate logging level name"""
        level = v.upper()
        if level not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"Invalid log level: {v}")
        return level

    class Config:
        env_prefix = "GRID_"
        case_sensitive = False


# Create global settings instance
settings = Settings()
