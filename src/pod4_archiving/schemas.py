"""
Schemas for archiving module
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, validator

from ..common.config import settings


class ArchiveConfig(BaseModel):
    """Configuration for archive assembly"""
    filename: str = Field(
        default_factory=lambda: settings.archive_filename,
        validate_default=True,
        description="Suggested download filename"
    )
    compresslevel: int = Field(
        default_factory=lambda: settings.archive_compresslevel,
        validate_default=True,
        description="DEFLATE compression level"
    )
    show_progress: bool = Field(
        default_factory=lambda: settings.show_progress,
        description="Show a progress bar while archiving"
    )

    @validator('filename')
    def validate_filename(cls, v):
        """Validate archive filename"""
        if not v.lower().endswith(".zip") or "/" in v or "\\" in v:
            raise ValueError(f"Invalid archive filename: {v}")
        return v

    @validator('compresslevel')
    def validate_compresslevel(cls, v):
        """Validate compression level"""
        if not 0 <= v <= 9:
            raise ValueError(f"Compression level must be between 0 and 9: {v}")
        return v


class ArchiveBlob(BaseModel):
    """In-memory ZIP archive ready to hand to a download collaborator"""
    filename: str
    data: bytes = Field(repr=False)
    entry_names: List[str]
    media_type: str = "application/zip"
    build_time: float = 0.0  # seconds
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def size(self) -> int:
        """Archive size in bytes"""
        return len(self.data)

    @property
    def entry_count(self) -> int:
        return len(self.entry_names)
