"""
POD 3: Tiling Module
Cuts the resampled raster into ordered, JPEG-encoded grid tiles
"""

from .engine import TilingEngine, tile
from .schemas import Tile, TileSequence, TilingConfig

__all__ = [
    "TilingEngine",
    "tile",
    "Tile",
    "TileSequence",
    "TilingConfig"
]
