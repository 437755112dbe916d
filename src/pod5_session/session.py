"""
Grid Session - holds one user's selection and current tiles
"""

import logging
import time
from typing import List, Optional, Union

from ..common.config import settings
from ..common.exceptions import EmptyInputError, GridMakerError
from ..pod1_planning import AspectMode, Geometry, LayoutSpec, plan_geometry
from ..pod2_resampling import ResampleConfig, ResampleEngine
from ..pod2_resampling.engine import ImageSource
from ..pod3_tiling import TileSequence, TilingConfig, TilingEngine
from ..pod4_archiving import ArchiveBlob, ArchiveConfig, ArchiveEngine

logger = logging.getLogger(__name__)


class GridSession:
    """
    In-process orchestrator for the resize, slice and export pipeline

    Runs planner, resampler, tiler and archiver in order and keeps the
    resulting tiles until the user resets or uploads again. Uploads are
    not serialized: each one gets a generation number, and a result whose
    generation has been superseded is handed back to its caller but not
    stored.
    """

    def __init__(
        self,
        layout: Optional[Union[LayoutSpec, str]] = None,
        aspect: Optional[Union[AspectMode, str]] = None,
        resample_config: Optional[ResampleConfig] = None,
        tiling_config: Optional[TilingConfig] = None,
        archive_config: Optional[ArchiveConfig] = None
    ):
        """
        Initialize session

        Args:
            layout: Initial layout, settings.default_layout if omitted
            aspect: Initial aspect, settings.default_aspect if omitted
            resample_config: Resampling configuration
            tiling_config: Tiling configuration
            archive_config: Archive configuration
        """
        self.layout = LayoutSpec(layout or settings.default_layout)
        self.aspect = AspectMode(aspect or settings.default_aspect)

        self.resampler = ResampleEngine(resample_config)
        self.tiler = TilingEngine(tiling_config)
        self.archiver = ArchiveEngine(archive_config)

        self._tiles: Optional[TileSequence] = None
        self._generation = 0

    def select(
        self,
        layout: Optional[Union[LayoutSpec, str]] = None,
        aspect: Optional[Union[AspectMode, str]] = None
    ):
        """Change the layout and/or aspect used for the next upload"""
        if layout is not None:
            self.layout = LayoutSpec(layout)
        if aspect is not None:
            self.aspect = AspectMode(aspect)

    @property
    def tiles(self) -> Optional[TileSequence]:
        return self._tiles

    @property
    def has_tiles(self) -> bool:
        return self._tiles is not None and not self._tiles.is_empty

    @property
    def piece_count(self) -> int:
        """Pieces the current selection produces"""
        return self.layout.piece_count

    def plan(self) -> Geometry:
        """Geometry for the current selection"""
        return plan_geometry(self.layout, self.aspect)

    async def process_upload(
        self,
        source: ImageSource,
        content_type: Optional[str] = None
    ) -> TileSequence:
        """
        Resize and slice an uploaded image with the current selection

        Args:
            source: Uploaded image (bytes, path or binary file object)
            content_type: Media type declared by the host, if known

        Returns:
            TileSequence in posting order

        Raises:
            GridMakerError: any pipeline failure; session state is unchanged
        """
        self._generation += 1
        generation = self._generation
        start_time = time.time()

        geometry = self.plan()
        logger.info(
            f"Processing upload {generation}: {self.layout.value} {self.aspect.value} "
            f"-> {geometry.total_width}x{geometry.total_height}"
        )

        try:
            raster = await self.resampler.resample(source, geometry, content_type=content_type)
            try:
                sequence = self.tiler.tile(raster, geometry)
            finally:
                raster.release()
        except GridMakerError as e:
            logger.error(f"Failed to process upload {generation}: {type(e).__name__}: {e}")
            raise

        if generation != self._generation:
            logger.warning(f"Upload {generation} was superseded; discarding its tiles")
            return sequence

        self._tiles = sequence
        logger.info(
            f"Upload {generation} split into {len(sequence)} pieces "
            f"in {time.time() - start_time:.2f} seconds"
        )
        return sequence

    async def download(self) -> ArchiveBlob:
        """
        Archive the current tiles

        Returns:
            ArchiveBlob named settings.archive_filename

        Raises:
            EmptyInputError: if there are no tiles yet
            ArchiveBuildError: if the archive cannot be built
        """
        if not self.has_tiles:
            raise EmptyInputError("Nothing to download; upload an image first")

        try:
            return await self.archiver.build_archive(self._tiles)
        except GridMakerError as e:
            logger.error(f"Failed to build download: {type(e).__name__}: {e}")
            raise

    def preview(self) -> List[str]:
        """Data URLs of the current tiles, in posting order"""
        if self._tiles is None:
            return []
        return self._tiles.preview()

    def reset(self):
        """Start over: drop current tiles and any in-flight result"""
        self._generation += 1
        self._tiles = None
        logger.info("Session reset")

    def close(self):
        """Release worker threads"""
        self.resampler.cleanup()
        self.archiver.cleanup()
