"""
Schemas for resampling module
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from pydantic import BaseModel, Field, validator
from PIL import Image

from ..common.config import settings


# Filters that average over the source footprint; nearest and bilinear
# are excluded on purpose.
RESAMPLE_FILTERS = {
    "lanczos": Image.Resampling.LANCZOS,
    "bicubic": Image.Resampling.BICUBIC,
    "hamming": Image.Resampling.HAMMING,
    "box": Image.Resampling.BOX,
}


class SourceInfo(BaseModel):
    """Header information read from an uploaded image"""
    format: str  # Pillow format name, e.g. "JPEG"
    media_type: str
    width: int
    height: int
    mode: str

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


class ResampleConfig(BaseModel):
    """Configuration for resampling operation"""
    filter_name: str = Field(
        default_factory=lambda: settings.resample_filter,
        validate_default=True,
        description="Resampling filter"
    )
    max_source_pixels: int = Field(
        default_factory=lambda: settings.max_source_pixels,
        description="Largest accepted source, in pixels"
    )
    background_color: Tuple[int, int, int] = Field(
        default=(0, 0, 0),
        description="Color transparent pixels are flattened onto"
    )
    apply_exif_orientation: bool = Field(
        default=True,
        description="Rotate the source according to its EXIF orientation tag"
    )

    @validator('filter_name')
    def validate_filter(cls, v):
        """Only quality-preserving filters are allowed"""
        name = v.lower()
        if name not in RESAMPLE_FILTERS:
            raise ValueError(f"Invalid resample filter: {v}")
        return name

    @validator('max_source_pixels')
    def validate_max_pixels(cls, v):
        if v <= 0:
            raise ValueError(f"max_source_pixels must be positive: {v}")
        return v

    @validator('background_color')
    def validate_background(cls, v):
        if any(not 0 <= c <= 255 for c in v):
            raise ValueError(f"Invalid background color: {v}")
        return v

    @property
    def resample_filter(self) -> Image.Resampling:
        """Pillow resampling constant for the configured filter"""
        return RESAMPLE_FILTERS[self.filter_name]


@dataclass
class RasterImage:
    """
    Owned pixel buffer produced by the resampler

    The holder of a RasterImage is its only owner. Tiling borrows it
    read-only; the owner calls release() once tiles are cut.
    """
    image: Optional[Image.Image]
    source_format: Optional[str] = None

    @property
    def released(self) -> bool:
        return self.image is None

    @property
    def width(self) -> int:
        return 0 if self.image is None else self.image.width

    @property
    def height(self) -> int:
        return 0 if self.image is None else self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def mode(self) -> Optional[str]:
        return None if self.image is None else self.image.mode

    def release(self):
        """Free the pixel buffer"""
        if self.image is not None:
            self.image.close()
            self.image = None
