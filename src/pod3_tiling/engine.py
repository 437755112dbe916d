"""
Tiling Engine - Core tiling functionality
"""

import io
import logging
import time
from typing import Generator, List, Optional, Tuple
from PIL import Image
from tqdm import tqdm

from .schemas import (
    Tile,
    TileBounds,
    TilePosition,
    TileSequence,
    TilingConfig
)
from ..common.exceptions import OutOfBoundsError
from ..pod1_planning.schemas import Geometry
from ..pod2_resampling.schemas import RasterImage

logger = logging.getLogger(__name__)


class TilingEngine:
    """
    Tiling engine for cutting a resampled raster into grid pieces
    Cells never overlap and cover the raster completely
    """

    def __init__(self, config: Optional[TilingConfig] = None):
        """
        Initialize tiling engine

        Args:
            config: Tiling configuration
        """
        self.config = config or TilingConfig()

    def generate_tile_positions(
        self,
        geometry: Geometry
    ) -> Generator[Tuple[TilePosition, TileBounds], None, None]:
        """
        Generate tile positions and bounds in row-major order

        Args:
            geometry: Grid geometry

        Yields:
            Tuple of (position, bounds) for each tile
        """
        for row in range(geometry.rows):
            for col in range(geometry.columns):
                x_start = col * geometry.tile_width
                y_start = row * geometry.tile_height

                position = TilePosition(row=row, col=col)
                bounds = TileBounds(
                    pixel_bounds=(
                        x_start,
                        y_start,
                        x_start + geometry.tile_width,
                        y_start + geometry.tile_height
                    )
                )

                yield position, bounds

    def _check_raster(self, raster: RasterImage, geometry: Geometry):
        """Reject rasters that cannot supply every cell"""
        if raster.released:
            raise OutOfBoundsError("Raster has already been released")

        if raster.width < geometry.total_width or raster.height < geometry.total_height:
            raise OutOfBoundsError(
                f"Raster {raster.width}x{raster.height} is smaller than grid "
                f"{geometry.total_width}x{geometry.total_height}"
            )

        if raster.size != geometry.size:
            logger.warning(
                f"Raster {raster.width}x{raster.height} is larger than grid "
                f"{geometry.total_width}x{geometry.total_height}; extra pixels are ignored"
            )

    def _extract_tile(
        self,
        image: Image.Image,
        bounds: TileBounds
    ) -> Image.Image:
        """
        Extract a single tile from the image

        Args:
            image: Source raster
            bounds: Tile bounds

        Returns:
            Cropped tile image
        """
        left, upper, right, lower = bounds.pixel_bounds
        if left < 0 or upper < 0 or right > image.width or lower > image.height:
            raise OutOfBoundsError(
                f"Tile {bounds.pixel_bounds} outside raster {image.width}x{image.height}"
            )

        return image.crop(bounds.pixel_bounds)

    def _encode_tile(self, tile_image: Image.Image) -> bytes:
        """
        Encode tile as JPEG

        Args:
            tile_image: Tile pixels

        Returns:
            JPEG bytes
        """
        if tile_image.mode != "RGB":
            tile_image = tile_image.convert("RGB")

        buffer = io.BytesIO()
        tile_image.save(
            buffer,
            format="JPEG",
            quality=self.config.jpeg_quality,
            optimize=self.config.optimize
        )
        return buffer.getvalue()

    def tile(self, raster: RasterImage, geometry: Geometry) -> TileSequence:
        """
        Cut a raster into the grid's tiles

        Args:
            raster: Resampled raster, borrowed read-only
            geometry: Grid geometry the raster was produced for

        Returns:
            TileSequence in posting order

        Raises:
            OutOfBoundsError: if the raster cannot cover the grid
        """
        start_time = time.time()
        self._check_raster(raster, geometry)

        tiles: List[Tile] = []

        with tqdm(
            total=geometry.tile_count,
            desc="Tiling",
            disable=not self.config.show_progress
        ) as pbar:
            for position, bounds in self.generate_tile_positions(geometry):
                tile_image = self._extract_tile(raster.image, bounds)
                try:
                    data = self._encode_tile(tile_image)
                finally:
                    tile_image.close()

                tile = Tile(
                    index=position.to_index(geometry.columns),
                    data=data,
                    width=bounds.width,
                    height=bounds.height,
                    position=position,
                    bounds=bounds
                )
                tiles.append(tile)
                logger.debug(f"Encoded tile {tile.index} ({tile.size_bytes} bytes)")
                pbar.update(1)

        processing_time = time.time() - start_time

        result = TileSequence(
            geometry=geometry,
            tiles=tiles,
            processing_time=processing_time
        )

        logger.info(
            f"Tiling completed: {geometry.rows}x{geometry.columns} grid, "
            f"{len(tiles)} tiles in {processing_time:.2f} seconds"
        )

        return result


def tile(
    raster: RasterImage,
    geometry: Geometry,
    config: Optional[TilingConfig] = None
) -> TileSequence:
    """Cut a raster into tiles with a default-configured engine"""
    return TilingEngine(config).tile(raster, geometry)
