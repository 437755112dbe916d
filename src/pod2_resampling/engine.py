"""
Resample Engine - decodes an upload and resizes it onto the grid geometry
"""

import io
import logging
import time
from pathlib import Path
from typing import BinaryIO, Optional, Union
import asyncio
from concurrent.futures import ThreadPoolExecutor

from PIL import Image, ImageOps

from .schemas import RasterImage, ResampleConfig, SourceInfo
from .validators import FormatValidator
from ..common.config import settings
from ..common.exceptions import DecodeError, ResampleError
from ..pod1_planning.schemas import Geometry

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, BinaryIO]


class ResampleEngine:
    """
    Resampling engine for fitting an arbitrary image onto a fixed geometry
    The target aspect is always forced; source proportions are not kept
    """

    def __init__(self, config: Optional[ResampleConfig] = None):
        """
        Initialize resample engine

        Args:
            config: Resampling configuration
        """
        self.config = config or ResampleConfig()
        self.validator = FormatValidator(max_pixels=self.config.max_source_pixels)
        self._executor = ThreadPoolExecutor(max_workers=settings.max_workers)

    def _read_source(self, source: ImageSource) -> bytes:
        """
        Read raw bytes from the upload

        Args:
            source: Bytes, a file path, or a binary file object

        Returns:
            Encoded image bytes
        """
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)

        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Image file not found: {source}")
            return path.read_bytes()

        if hasattr(source, "read"):
            data = source.read()
            if not isinstance(data, (bytes, bytearray)):
                raise TypeError("Image file object must be opened in binary mode")
            return bytes(data)

        raise TypeError(f"Unsupported image source: {type(source).__name__}")

    def _flatten(self, image: Image.Image) -> Image.Image:
        """
        Convert to opaque RGB, compositing any alpha onto the background

        Closes the input image when a new one replaces it.

        Args:
            image: Decoded image in any Pillow mode

        Returns:
            RGB image
        """
        if image.mode == "RGB":
            return image

        if image.mode.startswith("I"):
            # 16-bit samples; convert("RGB") would clip them at 255
            wide = image.convert("I")
            scaled = wide.point(lambda v: v * (1 / 256)).convert("L")
            wide.close()
            image.close()
            image = scaled

        has_alpha = image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        )
        if not has_alpha:
            converted = image.convert("RGB")
            image.close()
            return converted

        rgba = image.convert("RGBA")
        image.close()
        flattened = Image.new("RGB", rgba.size, self.config.background_color)
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        rgba.close()
        return flattened

    def _decode(self, data: bytes) -> Image.Image:
        """
        Decode the full pixel buffer

        Args:
            data: Encoded image bytes

        Returns:
            Upright RGB image
        """
        image = None
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
            if self.config.apply_exif_orientation:
                upright = ImageOps.exif_transpose(image)
                if upright is not image:
                    image.close()
                    image = upright
        except Image.DecompressionBombError as e:
            self._close_image(image)
            raise ResampleError(f"Source image too large: {e}") from e
        except MemoryError as e:
            self._close_image(image)
            raise ResampleError("Out of memory while decoding source image") from e
        except (OSError, SyntaxError, ValueError) as e:
            self._close_image(image)
            raise DecodeError(f"Could not decode image: {e}") from e

        mode = image.mode
        try:
            return self._flatten(image)
        except MemoryError as e:
            image.close()
            raise ResampleError("Out of memory while converting source image") from e
        except (OSError, ValueError) as e:
            image.close()
            raise ResampleError(f"Unsupported pixel format {mode}: {e}") from e

    @staticmethod
    def _close_image(image: Optional[Image.Image]):
        if image is not None:
            image.close()

    def _resize(self, image: Image.Image, geometry: Geometry) -> Image.Image:
        """
        Resize the decoded image to exactly the geometry's total size

        Args:
            image: Decoded RGB image
            geometry: Target geometry

        Returns:
            Resized image
        """
        try:
            resized = image.resize(geometry.size, resample=self.config.resample_filter)
        except MemoryError as e:
            raise ResampleError(
                f"Out of memory resizing to {geometry.total_width}x{geometry.total_height}"
            ) from e
        except (OSError, ValueError) as e:
            raise ResampleError(f"Resampling failed: {e}") from e
        finally:
            image.close()

        if resized.size != geometry.size:
            resized.close()
            raise ResampleError(
                f"Resampled size {resized.size} does not match target {geometry.size}"
            )

        return resized

    async def resample(
        self,
        source: ImageSource,
        geometry: Geometry,
        content_type: Optional[str] = None
    ) -> RasterImage:
        """
        Decode a source image and resample it to the target geometry

        Args:
            source: Uploaded image (bytes, path or binary file object)
            geometry: Target geometry
            content_type: Media type declared by the host, if known

        Returns:
            RasterImage of exactly geometry.total_width x geometry.total_height

        Raises:
            UnsupportedFormatError: non-image or unsupported image input
            DecodeError: unreadable or corrupt image data
            ResampleError: resampling could not produce the target raster
        """
        start_time = time.time()
        loop = asyncio.get_event_loop()

        self.validator.validate_content_type(content_type)

        data = await loop.run_in_executor(self._executor, self._read_source, source)
        info: SourceInfo = self.validator.identify(data)

        if geometry.total_width <= 0 or geometry.total_height <= 0:
            raise ResampleError(
                f"Invalid target size {geometry.total_width}x{geometry.total_height}"
            )

        image = await loop.run_in_executor(self._executor, self._decode, data)
        resized = await loop.run_in_executor(self._executor, self._resize, image, geometry)

        processing_time = time.time() - start_time
        logger.info(
            f"Resampled {info.format} {info.width}x{info.height} to "
            f"{geometry.total_width}x{geometry.total_height} "
            f"({self.config.filter_name}) in {processing_time:.2f} seconds"
        )

        return RasterImage(image=resized, source_format=info.format)

    def cleanup(self):
        """Cleanup resources"""
        self._executor.shutdown(wait=True)


async def resample(
    source: ImageSource,
    geometry: Geometry,
    content_type: Optional[str] = None,
    config: Optional[ResampleConfig] = None
) -> RasterImage:
    """
    Resample a source image with a private, short-lived engine

    Args:
        source: Uploaded image (bytes, path or binary file object)
        geometry: Target geometry
        content_type: Media type declared by the host, if known
        config: Optional resampling configuration

    Returns:
        RasterImage matching the geometry
    """
    engine = ResampleEngine(config)
    try:
        return await engine.resample(source, geometry, content_type=content_type)
    finally:
        engine.cleanup()
