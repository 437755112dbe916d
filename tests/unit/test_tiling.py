"""
Unit tests for Tiling Engine (POD3)
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from src.common.exceptions import OutOfBoundsError
from src.pod1_planning import plan_geometry, Geometry
from src.pod2_resampling import RasterImage
from src.pod3_tiling import TilingEngine, TilingConfig, Tile, TileSequence, tile
from src.pod3_tiling.schemas import TilePosition, TileBounds


SMALL_GRID = Geometry(
    total_width=30,
    total_height=20,
    tile_width=10,
    tile_height=10,
    columns=3,
    rows=2
)

CELL_COLORS = [
    (255, 0, 0), (0, 255, 0), (0, 0, 255),
    (255, 255, 0), (0, 255, 255), (255, 0, 255),
    (255, 255, 255), (0, 0, 0), (128, 128, 128),
]


def make_cell_raster(geometry: Geometry) -> RasterImage:
    """Raster where every grid cell is filled with its own color"""
    image = Image.new("RGB", geometry.size)
    for row in range(geometry.rows):
        for col in range(geometry.columns):
            color = CELL_COLORS[row * geometry.columns + col]
            box = (
                col * geometry.tile_width,
                row * geometry.tile_height,
                (col + 1) * geometry.tile_width,
                (row + 1) * geometry.tile_height
            )
            image.paste(color, box)
    return RasterImage(image=image)


class TestTilingEngine:
    """Test Tiling Engine functionality"""

    @pytest.fixture
    def engine(self):
        """Create test tiling engine"""
        return TilingEngine(TilingConfig(jpeg_quality=90))

    def test_generate_positions_row_major(self, engine):
        """Positions run left to right, then top to bottom"""
        positions = [
            (pos.row, pos.col) for pos, _ in engine.generate_tile_positions(SMALL_GRID)
        ]
        assert positions == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]

    def test_cells_partition_raster(self, engine):
        """Every pixel is covered by exactly one cell"""
        coverage = np.zeros((SMALL_GRID.total_height, SMALL_GRID.total_width), dtype=np.int32)
        for _, bounds in engine.generate_tile_positions(SMALL_GRID):
            left, upper, right, lower = bounds.pixel_bounds
            coverage[upper:lower, left:right] += 1

        assert (coverage == 1).all()

    def test_scenario_3x3_square(self, engine):
        """A 3x3 square grid yields nine 1080x1080 tiles"""
        geometry = plan_geometry("3x3", "square")
        raster = make_cell_raster(geometry)
        sequence = engine.tile(raster, geometry)

        assert len(sequence) == 9
        for tile_ in sequence:
            assert (tile_.width, tile_.height) == (1080, 1080)
            with Image.open(io.BytesIO(tile_.data)) as decoded:
                assert decoded.format == "JPEG"
                assert decoded.size == (1080, 1080)

    def test_scenario_3x1_portrait(self, engine):
        geometry = plan_geometry("3x1", "portrait")
        sequence = engine.tile(make_cell_raster(geometry), geometry)

        assert len(sequence) == 3
        assert all((t.width, t.height) == (1080, 1350) for t in sequence)

    def test_posting_order(self, engine):
        """Tile k has index k + 1 and carries its own cell's pixels"""
        geometry = plan_geometry("3x2", "square")
        sequence = engine.tile(make_cell_raster(geometry), geometry)

        for position, tile_ in enumerate(sequence):
            assert tile_.index == position + 1
            assert tile_.filename == f"{position + 1}.jpg"

            with Image.open(io.BytesIO(tile_.data)) as decoded:
                center = decoded.getpixel((540, 540))
            expected = CELL_COLORS[position]
            assert all(abs(c - e) <= 8 for c, e in zip(center, expected))

    def test_undersized_raster(self, engine):
        """A raster smaller than the grid is rejected, not clipped"""
        raster = RasterImage(image=Image.new("RGB", (29, 20)))
        with pytest.raises(OutOfBoundsError):
            engine.tile(raster, SMALL_GRID)

    def test_released_raster(self, engine):
        raster = make_cell_raster(SMALL_GRID)
        raster.release()
        with pytest.raises(OutOfBoundsError):
            engine.tile(raster, SMALL_GRID)

    def test_oversized_raster(self, engine):
        """Extra pixels beyond the grid are ignored"""
        raster = RasterImage(image=Image.new("RGB", (40, 25)))
        sequence = engine.tile(raster, SMALL_GRID)
        assert len(sequence) == 6
        assert all((t.width, t.height) == (10, 10) for t in sequence)

    def test_extract_out_of_bounds(self, engine):
        image = Image.new("RGB", (10, 10))
        with pytest.raises(OutOfBoundsError):
            engine._extract_tile(image, TileBounds(pixel_bounds=(5, 5, 15, 15)))

    def test_raster_not_modified(self, engine):
        """Tiling borrows the raster read-only"""
        raster = make_cell_raster(SMALL_GRID)
        before = raster.image.tobytes()
        engine.tile(raster, SMALL_GRID)
        assert raster.image.tobytes() == before
        assert not raster.released

    def test_module_function(self):
        sequence = tile(make_cell_raster(SMALL_GRID), SMALL_GRID)
        assert sequence.geometry == SMALL_GRID
        assert len(sequence) == 6


class TestTileSchemas:
    """Test tile models"""

    @pytest.fixture
    def sequence(self):
        return TilingEngine().tile(make_cell_raster(SMALL_GRID), SMALL_GRID)

    def test_tile_position_index(self):
        assert TilePosition(row=0, col=0).to_index(3) == 1
        assert TilePosition(row=1, col=2).to_index(3) == 6

    def test_tile_bounds_properties(self):
        bounds = TileBounds(pixel_bounds=(1080, 0, 2160, 1350))
        assert bounds.width == 1080
        assert bounds.height == 1350

    def test_data_url(self, sequence):
        url = sequence[0].to_data_url()
        prefix = "data:image/jpeg;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == sequence[0].data

    def test_preview_and_filenames(self, sequence):
        assert len(sequence.preview()) == 6
        assert sequence.filenames() == ["1.jpg", "2.jpg", "3.jpg", "4.jpg", "5.jpg", "6.jpg"]

    def test_get_tile_by_position(self, sequence):
        assert sequence.get_tile_by_position(1, 0).index == 4
        assert sequence.get_tile_by_position(5, 5) is None

    def test_out_of_order_rejected(self, sequence):
        """Sequences must be in posting order"""
        tiles = list(sequence)
        with pytest.raises(ValueError):
            TileSequence(tiles=[tiles[1], tiles[0]])

    def test_wrong_length_rejected(self, sequence):
        with pytest.raises(ValueError):
            TileSequence(geometry=SMALL_GRID, tiles=list(sequence)[:3])

    def test_empty_sequence(self):
        sequence = TileSequence()
        assert sequence.is_empty
        assert len(sequence) == 0
        assert sequence.preview() == []


class TestTilingConfig:
    """Test Tiling Configuration"""

    def test_default_quality(self):
        """Tiles are encoded at 0.9 of maximum quality"""
        assert TilingConfig().jpeg_quality == 90

    def test_invalid_quality(self):
        with pytest.raises(ValueError):
            TilingConfig(jpeg_quality=0)

        with pytest.raises(ValueError):
            TilingConfig(jpeg_quality=101)
