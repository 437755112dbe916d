"""
Archive Engine - bundles encoded tiles into a downloadable ZIP
"""

import io
import logging
import time
import zipfile
from typing import List, Optional, Sequence, Set, Tuple, Union
import asyncio
from concurrent.futures import ThreadPoolExecutor
from tqdm import tqdm

from .schemas import ArchiveBlob, ArchiveConfig
from ..common.config import settings
from ..common.exceptions import ArchiveBuildError, EmptyInputError
from ..pod3_tiling.schemas import Tile, TileSequence

logger = logging.getLogger(__name__)


class ArchiveEngine:
    """
    Archive engine for packaging tiles under posting-order names
    Entries are named {index}.jpg so a numeric sort restores posting order
    """

    def __init__(self, config: Optional[ArchiveConfig] = None):
        """
        Initialize archive engine

        Args:
            config: Archive configuration
        """
        self.config = config or ArchiveConfig()
        self._executor = ThreadPoolExecutor(max_workers=settings.max_workers)

    def _write_entry(
        self,
        archive: zipfile.ZipFile,
        tile: Tile,
        written: Set[str],
        date_time: Tuple[int, int, int, int, int, int]
    ) -> str:
        """
        Compress one tile into the archive

        Args:
            archive: Open archive
            tile: Tile to add
            written: Entry names already in the archive
            date_time: Timestamp stored on the entry

        Returns:
            Entry name
        """
        name = tile.filename
        if not tile.data:
            raise ArchiveBuildError(f"Tile {tile.index} has no image data")
        if name in written:
            raise ArchiveBuildError(f"Duplicate archive entry: {name}")

        info = zipfile.ZipInfo(name, date_time=date_time)
        info.external_attr = 0o644 << 16
        archive.writestr(
            info,
            tile.data,
            compress_type=zipfile.ZIP_DEFLATED,
            compresslevel=self.config.compresslevel
        )
        written.add(name)
        return name

    async def build_archive(
        self,
        tiles: Union[TileSequence, Sequence[Tile]]
    ) -> ArchiveBlob:
        """
        Build an in-memory ZIP of all tiles

        Args:
            tiles: Tiles in posting order

        Returns:
            ArchiveBlob with entries 1.jpg .. N.jpg

        Raises:
            EmptyInputError: if there are no tiles
            ArchiveBuildError: if any entry cannot be written
        """
        start_time = time.time()
        tile_list: List[Tile] = list(tiles)
        if not tile_list:
            raise EmptyInputError("No tiles to archive")

        loop = asyncio.get_event_loop()
        date_time = time.localtime(start_time)[:6]
        buffer = io.BytesIO()
        entry_names: List[str] = []
        written: Set[str] = set()

        try:
            with zipfile.ZipFile(buffer, mode="w") as archive:
                with tqdm(
                    total=len(tile_list),
                    desc="Archiving",
                    disable=not self.config.show_progress
                ) as pbar:
                    for tile in tile_list:
                        name = await loop.run_in_executor(
                            self._executor,
                            self._write_entry,
                            archive,
                            tile,
                            written,
                            date_time
                        )
                        entry_names.append(name)
                        pbar.update(1)

                # Writes the central directory
                await loop.run_in_executor(self._executor, archive.close)
        except ArchiveBuildError as e:
            logger.error(f"Archive build aborted: {e}")
            raise
        except (zipfile.LargeZipFile, OSError, ValueError, RuntimeError, MemoryError) as e:
            logger.error(f"Archive build failed: {e}")
            raise ArchiveBuildError(f"Could not build archive: {e}") from e

        build_time = time.time() - start_time
        blob = ArchiveBlob(
            filename=self.config.filename,
            data=buffer.getvalue(),
            entry_names=entry_names,
            build_time=build_time
        )

        logger.info(
            f"Archived {blob.entry_count} tiles into {blob.filename} "
            f"({blob.size} bytes) in {build_time:.2f} seconds"
        )

        return blob

    def cleanup(self):
        """Cleanup resources"""
        self._executor.shutdown(wait=True)


async def build_archive(
    tiles: Union[TileSequence, Sequence[Tile]],
    config: Optional[ArchiveConfig] = None
) -> ArchiveBlob:
    """
    Build an archive with a private, short-lived engine

    Args:
        tiles: Tiles in posting order
        config: Optional archive configuration

    Returns:
        ArchiveBlob
    """
    engine = ArchiveEngine(config)
    try:
        return await engine.build_archive(tiles)
    finally:
        engine.cleanup()
