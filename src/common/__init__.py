"""
Shared configuration, logging and error types
"""

from .config import Settings, settings
from .exceptions import (
    GridMakerError,
    UnsupportedFormatError,
    DecodeError,
    ResampleError,
    OutOfBoundsError,
    EmptyInputError,
    ArchiveBuildError
)
from .logging_config import setup_logging

__all__ = [
    "Settings",
    "settings",
    "setup_logging",
    "GridMakerError",
    "UnsupportedFormatError",
    "DecodeError",
    "ResampleError",
    "OutOfBoundsError",
    "EmptyInputError",
    "ArchiveBuildError"
]
