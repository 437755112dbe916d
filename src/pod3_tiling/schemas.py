"""
Schemas for tiling module
"""

import base64
from datetime import datetime
from typing import Iterator, List, Optional, Tuple
from pydantic import BaseModel, Field, validator

from ..common.config import settings
from ..pod1_planning.schemas import Geometry


class TilePosition(BaseModel):
    """Position of tile in the grid"""
    row: int
    col: int

    def to_index(self, columns: int) -> int:
        """1-based posting-order index for this cell"""
        return self.row * columns + self.col + 1


class TileBounds(BaseModel):
    """Tile boundary information"""
    pixel_bounds: Tuple[int, int, int, int]  # left, upper, right, lower in pixels

    @property
    def width(self) -> int:
        """Get tile width in pixels"""
        return self.pixel_bounds[2] - self.pixel_bounds[0]

    @property
    def height(self) -> int:
        """Get tile height in pixels"""
        return self.pixel_bounds[3] - self.pixel_bounds[1]


class Tile(BaseModel):
    """One encoded grid cell"""
    index: int = Field(ge=1, description="1-based posting order")
    data: bytes = Field(repr=False)
    width: int
    height: int
    position: TilePosition
    bounds: TileBounds
    media_type: str = "image/jpeg"

    @property
    def filename(self) -> str:
        """Archive entry name for this tile"""
        return f"{self.index}.jpg"

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        """Displayable data URL for previews"""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


class TilingConfig(BaseModel):
    """Configuration for tiling operation"""
    jpeg_quality: int = Field(
        default_factory=lambda: settings.jpeg_quality,
        validate_default=True,
        description="JPEG quality (0.9 of maximum by default)"
    )
    optimize: bool = Field(
        default_factory=lambda: settings.jpeg_optimize,
        description="Optimise Huffman tables when encoding"
    )
    show_progress: bool = Field(
        default_factory=lambda: settings.show_progress,
        description="Show a progress bar while tiling"
    )

    @validator('jpeg_quality')
    def validate_quality(cls, v):
        """Validate JPEG quality"""
        if not 1 <= v <= 100:
            raise ValueError(f"JPEG quality must be between 1 and 100: {v}")
        return v


class TileSequence(BaseModel):
    """Ordered tiles of one grid, in posting order"""
    geometry: Optional[Geometry] = None
    tiles: List[Tile] = Field(default_factory=list)
    processing_time: float = 0.0  # seconds
    created_at: datetime = Field(default_factory=datetime.now)

    @validator('tiles')
    def validate_order(cls, v, values):
        """Tile at position k must carry index k + 1"""
        for position, tile in enumerate(v):
            if tile.index != position + 1:
                raise ValueError(
                    f"Tile at position {position} has index {tile.index}, expected {position + 1}"
                )

        geometry = values.get('geometry')
        if geometry is not None and v and len(v) != geometry.tile_count:
            raise ValueError(f"Expected {geometry.tile_count} tiles, got {len(v)}")
        return v

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, position: int) -> Tile:
        return self.tiles[position]

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def filenames(self) -> List[str]:
        """Archive entry names in posting order"""
        return [tile.filename for tile in self.tiles]

    def preview(self) -> List[str]:
        """Renderable data URLs in row-major grid order"""
        return [tile.to_data_url() for tile in self.tiles]

    def get_tile_by_position(self, row: int, col: int) -> Optional[Tile]:
        """Get tile by grid position"""
        for tile in self.tiles:
            if tile.position.row == row and tile.position.col == col:
                return tile
        return None
