"""
Ghost grid overlay showing the editor lattice.

Anchored at the world origin with a line on every integer coordinate,
lifted slightly above the ground to avoid z-fighting with floors.
"""

from typing import List

from scene3d.core.models import GridOverlay, OverlayLine, Vector3


def build_grid_overlay(width: int, height: int, cell_meters: float, lift: float = 0.001) -> GridOverlay:
    """
    Build overlay line segments for a width x height grid.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        cell_meters: Cell size in metres
        lift: Height of the lines above the ground plane

    Returns:
        GridOverlay with (width + 1) + (height + 1) lines
    """
    lines: List[OverlayLine] = []
    far_x = width * cell_meters
    far_z = height * cell_meters

    # Lines along Z
    for x in range(width + 1):
        world_x = x * cell_meters
        lines.append(OverlayLine(
            start=Vector3(x=world_x, y=lift, z=0.0),
            end=Vector3(x=world_x, y=lift, z=far_z),
        ))

    # Lines along X
    for y in range(height + 1):
        world_z = y * cell_meters
        lines.append(OverlayLine(
            start=Vector3(x=0.0, y=lift, z=world_z),
            end=Vector3(x=far_x, y=lift, z=world_z),
        ))

    return GridOverlay(width=width, height=height, lines=lines)
