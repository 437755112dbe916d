"""
Schemas for the planning module
"""

from enum import Enum
from typing import Tuple
from pydantic import BaseModel, Field, validator


GRID_COLUMNS = 3
TILE_WIDTH = 1080


class LayoutSpec(str, Enum):
    """Grid layouts, always three columns wide"""
    GRID_3X1 = "3x1"  # one row, 3 pieces
    GRID_3X2 = "3x2"  # two rows, 6 pieces
    GRID_3X3 = "3x3"  # three rows, 9 pieces

    @property
    def columns(self) -> int:
        return GRID_COLUMNS

    @property
    def rows(self) -> int:
        return int(self.value.split("x")[1])

    @property
    def piece_count(self) -> int:
        return self.columns * self.rows


class AspectMode(str, Enum):
    """Per-tile aspect ratio"""
    SQUARE = "square"  # 1:1, 1080x1080
    PORTRAIT = "portrait"  # 4:5, 1080x1350

    def tile_height(self, tile_width: int) -> int:
        """Tile height for the given tile width"""
        if self is AspectMode.PORTRAIT:
            return tile_width * 5 // 4
        return tile_width


class Geometry(BaseModel):
    """Fully resolved pixel dimensions for one layout/aspect selection"""
    total_width: int = Field(ge=0)
    total_height: int = Field(ge=0)
    tile_width: int = Field(ge=0)
    tile_height: int = Field(ge=0)
    columns: int = Field(ge=0)
    rows: int = Field(ge=0)

    @validator('rows')
    def validate_totals(cls, v, values):
        """Totals must be an exact multiple of the tile size"""
        columns = values.get('columns')
        if columns is not None and values.get('total_width') != columns * values.get('tile_width', 0):
            raise ValueError(
                f"total_width {values.get('total_width')} != "
                f"{columns} x {values.get('tile_width')}"
            )
        if values.get('total_height') != v * values.get('tile_height', 0):
            raise ValueError(
                f"total_height {values.get('total_height')} != "
                f"{v} x {values.get('tile_height')}"
            )
        return v

    @property
    def tile_count(self) -> int:
        """Number of tiles in the grid"""
        return self.columns * self.rows

    @property
    def size(self) -> Tuple[int, int]:
        """Total (width, height) in pixels"""
        return self.total_width, self.total_height

    @property
    def tile_size(self) -> Tuple[int, int]:
        """Tile (width, height) in pixels"""
        return self.tile_width, self.tile_height

    class Config:
        frozen = True
