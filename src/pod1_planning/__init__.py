"""
POD 1: Planning Module
Resolves layout and aspect selections into pixel geometry
"""

from .planner import plan_geometry
from .schemas import AspectMode, Geometry, LayoutSpec

__all__ = [
    "plan_geometry",
    "AspectMode",
    "Geometry",
    "LayoutSpec"
]
