"""
Dimension planner - maps a layout and aspect selection to pixel geometry
"""

from typing import Union

from .schemas import AspectMode, Geometry, LayoutSpec, TILE_WIDTH


def plan_geometry(
    layout: Union[LayoutSpec, str],
    aspect: Union[AspectMode, str]
) -> Geometry:
    """
    Compute the exact pixel geometry for a grid

    Args:
        layout: Grid layout (3x1, 3x2 or 3x3)
        aspect: Tile aspect mode (square or portrait)

    Returns:
        Geometry with tile_width fixed at 1080 and three columns

    Raises:
        ValueError: if layout or aspect is not a known value
    """
    layout = LayoutSpec(layout)
    aspect = AspectMode(aspect)

    tile_height = aspect.tile_height(TILE_WIDTH)

    return Geometry(
        total_width=layout.columns * TILE_WIDTH,
        total_height=layout.rows * tile_height,
        tile_width=TILE_WIDTH,
        tile_height=tile_height,
        columns=layout.columns,
        rows=layout.rows
    )
