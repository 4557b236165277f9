"""
Scene bounds for camera framing.

Content bounds follow floor tile coverage; environment bounds follow the
declared editor grid limit and ignore content.
"""

from typing import Optional

from loguru import logger

from scene3d.core.models import Bounds, SceneBounds, SimLimits, Units, Vector3
from scene3d.spatial.grid_index import GridIndex


DEFAULT_GRID_WIDTH = 60
DEFAULT_GRID_HEIGHT = 40


def content_bounds(index: GridIndex, units: Units) -> Bounds:
    """
    Bounds of the floor tile footprint after the origin offset.

    Tiles are taken in the offset frame (before normalization), so a layout
    drawn away from the lattice origin keeps its position. Each tile extends
    one full cell past its index, hence the +1 on the maximum corner. An
    empty layout yields a single cell at the origin.
    """
    cell = units.cell_meters
    height = units.wall_height_meters

    if not index.tiles:
        return Bounds.from_corners(Vector3(x=0.0, y=0.0, z=0.0), Vector3(x=cell, y=height, z=cell))

    shift_x, shift_y = index.normalization
    min_x = min(x for x, _ in index.tiles) + shift_x
    max_x = max(x for x, _ in index.tiles) + shift_x
    min_y = min(y for _, y in index.tiles) + shift_y
    max_y = max(y for _, y in index.tiles) + shift_y

    return Bounds.from_corners(
        Vector3(x=min_x * cell, y=0.0, z=min_y * cell),
        Vector3(x=(max_x + 1) * cell, y=height, z=(max_y + 1) * cell),
    )


def grid_extent(
    sim_limits: Optional[SimLimits],
    default_width: int = DEFAULT_GRID_WIDTH,
    default_height: int = DEFAULT_GRID_HEIGHT,
):
    """Declared grid width/height in cells, with fallbacks for missing values."""
    width = sim_limits.max_tiles_x if sim_limits is not None else None
    height = sim_limits.max_tiles_y if sim_limits is not None else None
    return (width or default_width, height or default_height)


def environment_bounds(
    sim_limits: Optional[SimLimits],
    units: Units,
    default_width: int = DEFAULT_GRID_WIDTH,
    default_height: int = DEFAULT_GRID_HEIGHT,
) -> Bounds:
    """Bounds of the declared grid, anchored at the world origin."""
    width, height = grid_extent(sim_limits, default_width, default_height)
    cell = units.cell_meters
    return Bounds.from_corners(
        Vector3(x=0.0, y=0.0, z=0.0),
        Vector3(x=width * cell, y=units.wall_height_meters, z=height * cell),
    )


def compute_bounds(
    index: GridIndex,
    units: Units,
    sim_limits: Optional[SimLimits] = None,
    default_width: int = DEFAULT_GRID_WIDTH,
    default_height: int = DEFAULT_GRID_HEIGHT,
) -> SceneBounds:
    """
    Compute content and environment bounds independently.

    Args:
        index: Grid index of the layout
        units: Unit block of the document
        sim_limits: Declared grid limit (optional)
        default_width: Fallback grid width in cells
        default_height: Fallback grid height in cells

    Returns:
        SceneBounds with both variants
    """
    bounds = SceneBounds(
        content=content_bounds(index, units),
        environment=environment_bounds(sim_limits, units, default_width, default_height),
    )
    size = bounds.content.size()
    logger.debug(f"Content bounds {size.x:.2f} x {size.z:.2f} m, center {bounds.content.center.as_tuple()}")
    return bounds
