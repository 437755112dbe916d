"""
POD 4: Archiving Module
Packages grid tiles into a single downloadable ZIP
"""

from .engine import ArchiveEngine, build_archive
from .schemas import ArchiveBlob, ArchiveConfig

__all__ = [
    "ArchiveEngine",
    "build_archive",
    "ArchiveBlob",
    "ArchiveConfig"
]
