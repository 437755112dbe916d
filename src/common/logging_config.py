"""
Logging setup shared by the pipeline pods
"""

import logging
from pathlib import Path
from typing import Optional

from .config import settings


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure root logging from settings

    Args:
        level: Logging level name, defaults to settings.log_level
        log_file: Optional log file, defaults to settings.log_file

    Returns:
        Package logger
    """
    handlers = [logging.StreamHandler()]

    log_file = log_file or settings.log_file
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=settings.log_format,
        handlers=handlers,
        force=True
    )

    return logging.getLogger("src")
