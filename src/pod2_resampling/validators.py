"""
Source format validation for uploaded images
"""

import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .schemas import SourceInfo
from ..common.exceptions import DecodeError, ResampleError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class FormatValidator:
    """
    Checks that an upload is a JPEG, PNG or WEBP image
    Reads only the image header; no pixel data is decoded here
    """

    SUPPORTED_FORMATS = {
        "JPEG": "image/jpeg",
        "PNG": "image/png",
        "WEBP": "image/webp",
    }
    MEDIA_TYPE_ALIASES = {
        "image/jpg": "image/jpeg",
        "image/pjpeg": "image/jpeg",
        "image/x-png": "image/png",
    }
    # JPEG files carrying an MPF multi-picture segment
    FORMAT_ALIASES = {
        "MPO": "JPEG",
    }

    def __init__(self, max_pixels: Optional[int] = None):
        """
        Initialize validator

        Args:
            max_pixels: Optional upper bound on source pixel count
        """
        self.max_pixels = max_pixels

    def is_supported_media_type(self, content_type: str) -> bool:
        """Check a declared media type against the supported set"""
        media_type = content_type.split(";")[0].strip().lower()
        media_type = self.MEDIA_TYPE_ALIASES.get(media_type, media_type)
        return media_type in self.SUPPORTED_FORMATS.values()

    def validate_content_type(self, content_type: Optional[str]):
        """
        Validate the media type declared by the host, if any

        Raises:
            UnsupportedFormatError: if the type is not a supported image type
        """
        if content_type is None:
            return

        if not content_type.strip().lower().startswith("image/"):
            raise UnsupportedFormatError(f"Not an image: {content_type}")

        if not self.is_supported_media_type(content_type):
            raise UnsupportedFormatError(f"Unsupported image type: {content_type}")

    def identify(self, data: bytes) -> SourceInfo:
        """
        Identify the encoded image format from its header

        Args:
            data: Encoded image bytes

        Returns:
            SourceInfo for the image

        Raises:
            DecodeError: if the bytes are empty or not a recognisable image
            UnsupportedFormatError: if the image format is not accepted
            ResampleError: if the image exceeds the pixel limit
        """
        if not data:
            raise DecodeError("Empty image data")

        try:
            with Image.open(io.BytesIO(data)) as img:
                image_format = self.FORMAT_ALIASES.get(img.format, img.format or "")
                info = SourceInfo(
                    format=image_format,
                    media_type=self.SUPPORTED_FORMATS.get(
                        image_format, Image.MIME.get(image_format, "application/octet-stream")
                    ),
                    width=img.width,
                    height=img.height,
                    mode=img.mode
                )
        except Image.DecompressionBombError as e:
            raise ResampleError(f"Source image too large: {e}") from e
        except UnidentifiedImageError as e:
            raise DecodeError("Data is not a recognisable image") from e
        except (OSError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Corrupt image header: {e}") from e

        if info.format not in self.SUPPORTED_FORMATS:
            raise UnsupportedFormatError(
                f"Unsupported image format: {info.format} "
                f"(supported: {', '.join(self.SUPPORTED_FORMATS)})"
            )

        if self.max_pixels is not None and info.pixel_count > self.max_pixels:
            raise ResampleError(
                f"Source image too large: {info.width}x{info.height} "
                f"exceeds {self.max_pixels} pixels"
            )

        logger.debug(f"Identified {info.format} source {info.width}x{info.height} ({info.mode})")
        return info
