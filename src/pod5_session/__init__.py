"""
POD 5: Session Module
Runs the full pipeline for a presentation host and keeps its state
"""

from .session import GridSession

__all__ = [
    "GridSession"
]
