"""
POD 2: Resampling Module
Decodes uploaded images and resamples them onto the grid geometry
"""

from .engine import ResampleEngine, resample
from .schemas import RasterImage, ResampleConfig, SourceInfo
from .validators import FormatValidator

__all__ = [
    "ResampleEngine",
    "resample",
    "RasterImage",
    "ResampleConfig",
    "SourceInfo",
    "FormatValidator"
]
