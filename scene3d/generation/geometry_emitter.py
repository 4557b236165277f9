"""
World-space box generation from floor clusters and wall segments.

Lattice positions are scaled by cellMeters on the ground plane (X, Z);
heights come straight from the unit block. Seam handling and flush wall
placement are applied here.
"""

from typing import List, Tuple

from loguru import logger

from scene3d.core.config import PipelineOptions, SeamMode, WallAlignment
from scene3d.core.models import (
    FloorCluster,
    MeshDescriptor,
    MeshKind,
    Orientation,
    Units,
    Vector3,
    WallSegment,
    WallSide,
)
from scene3d.spatial.grid_index import GridIndex


# Direction (in units of half the wall thickness) a flush wall moves away
# from its floor side.
_FLUSH_DIRECTION = {
    WallSide.BELOW: 1.0,
    WallSide.ABOVE: -1.0,
    WallSide.LEFT: 1.0,
    WallSide.RIGHT: -1.0,
}


class GeometryEmitter:
    """
    Converts lattice entities into MeshDescriptors.

    Seam modes (one per load):
    - EPSILON: footprints grow by a small overlap so abutting boxes never gap
    - AUTO: floors are inset on exposed sides by half the wall thickness, so
      each exposed axis shrinks by one wall thickness and walls sit on top
    - CUSTOM: floors are inset on exposed sides by half the custom inset
    - NONE: exact footprints
    """

    def __init__(
        self,
        units: Units,
        options: PipelineOptions,
        seam_epsilon_cells: float = 0.001,
    ):
        """
        Initialize geometry emitter.

        Args:
            units: Unit block of the document
            options: Pipeline policy flags
            seam_epsilon_cells: Overlap for EPSILON mode, in lattice units
        """
        self.units = units
        self.options = options
        self.cell = units.cell_meters
        self.epsilon = seam_epsilon_cells * units.cell_meters

    @property
    def flush(self) -> bool:
        return self.options.wall_alignment == WallAlignment.FLUSH

    def floor_side_inset(self) -> float:
        """Inset in metres applied to each exposed floor side."""
        mode = self.options.seam_mode
        if mode == SeamMode.AUTO:
            return self.units.wall_thickness_meters / 2
        if mode == SeamMode.CUSTOM:
            return self.options.custom_inset / 2
        return 0.0

    @staticmethod
    def exposed_sides(cluster: FloorCluster, index: GridIndex) -> Tuple[bool, bool, bool, bool]:
        """
        Which cluster sides face no floor at all.

        Returns:
            (west, east, north, south) where west/east are the min/max x sides
            and north/south the min/max y sides
        """
        xs = range(cluster.min_x, cluster.max_x + 1)
        ys = range(cluster.min_y, cluster.max_y + 1)
        west = not any(index.has_floor(cluster.min_x - 1, y) for y in ys)
        east = not any(index.has_floor(cluster.max_x + 1, y) for y in ys)
        north = not any(index.has_floor(x, cluster.min_y - 1) for x in xs)
        south = not any(index.has_floor(x, cluster.max_y + 1) for x in xs)
        return west, east, north, south

    def _span(self, low: int, high_exclusive: int, inset_low: float, inset_high: float) -> Tuple[float, float]:
        """
        World (center, length) of a lattice span after insets and overlap.

        Inset edges are clamped to the span, so an oversized inset collapses
        the box to zero length without moving it outside the cluster.
        """
        lower = low * self.cell
        upper = high_exclusive * self.cell
        start = min(max(lower + inset_low, lower), upper)
        stop = min(max(upper - inset_high, lower), upper)
        length = max(stop - start, 0.0)
        center = (start + stop) / 2
        if self.options.seam_mode == SeamMode.EPSILON:
            length += self.epsilon
        return center, length

    def emit_floor(self, cluster: FloorCluster, index: GridIndex) -> MeshDescriptor:
        """
        Build the floor slab for one cluster.

        Args:
            cluster: Floor cluster in normalized lattice space
            index: Grid index used to find exposed sides

        Returns:
            MeshDescriptor of kind FLOOR
        """
        inset = self.floor_side_inset()
        if inset > 0.0:
            west, east, north, south = self.exposed_sides(cluster, index)
        else:
            west = east = north = south = False

        center_x, width = self._span(
            cluster.min_x, cluster.max_x + 1,
            inset if west else 0.0, inset if east else 0.0,
        )
        center_z, depth = self._span(
            cluster.min_y, cluster.max_y + 1,
            inset if north else 0.0, inset if south else 0.0,
        )
        thickness = self.units.floor_thickness_meters

        mesh = MeshDescriptor(
            kind=MeshKind.FLOOR,
            name=f"floor-region-{cluster.min_x}-{cluster.min_y}-{cluster.width}x{cluster.height}",
            dimensions=Vector3(x=width, y=thickness, z=depth),
            center=Vector3(x=center_x, y=thickness / 2, z=center_z),
        )
        logger.trace(
            f"[TRACE:FLOOR] {cluster} world=({center_x:.3f},{thickness / 2:.3f},{center_z:.3f}) "
            f"size=({width:.3f},{depth:.3f})"
        )
        return mesh

    def wall_offset(self, side: WallSide) -> float:
        """Signed perpendicular offset in metres for a wall segment."""
        if not self.flush or not side.is_flush:
            return 0.0
        return _FLUSH_DIRECTION[side] * self.units.wall_thickness_meters / 2

    def emit_wall(self, segment: WallSegment) -> MeshDescriptor:
        """
        Build the wall box for one classified segment.

        Args:
            segment: Wall segment with uniform side classification

        Returns:
            MeshDescriptor of kind WALL
        """
        length = segment.length * self.cell
        if self.options.seam_mode == SeamMode.EPSILON and not self.flush:
            length += self.epsilon

        along = (segment.start + segment.end) / 2 * self.cell
        across = segment.fixed * self.cell + self.wall_offset(segment.side)
        height = self.units.wall_height_meters
        thickness = self.units.wall_thickness_meters

        if segment.orientation == Orientation.HORIZONTAL:
            dimensions = Vector3(x=length, y=height, z=thickness)
            center = Vector3(x=along, y=height / 2, z=across)
            tag = "h"
        else:
            dimensions = Vector3(x=thickness, y=height, z=length)
            center = Vector3(x=across, y=height / 2, z=along)
            tag = "v"

        logger.trace(
            f"[TRACE:{segment.orientation.value}] fixed={segment.fixed} [{segment.start},{segment.end}) "
            f"side={segment.side.value} world=({center.x:.3f},{center.y:.3f},{center.z:.3f})"
        )
        return MeshDescriptor(
            kind=MeshKind.WALL,
            name=f"wall-{tag}-{segment.fixed}-{segment.start}-{segment.end}",
            dimensions=dimensions,
            center=center,
        )

    def emit_floors(self, clusters: List[FloorCluster], index: GridIndex) -> List[MeshDescriptor]:
        floors = [self.emit_floor(cluster, index) for cluster in clusters]
        logger.success(f"Generated {len(floors)} floor slabs")
        return floors

    def emit_walls(self, segments: List[WallSegment]) -> List[MeshDescriptor]:
        walls = [self.emit_wall(segment) for segment in segments]
        logger.success(f"Generated {len(walls)} wall boxes")
        return walls


def emit_geometry(
    clusters: List[FloorCluster],
    segments: List[WallSegment],
    index: GridIndex,
    units: Units,
    options: PipelineOptions,
    seam_epsilon_cells: float = 0.001,
) -> Tuple[List[MeshDescriptor], List[MeshDescriptor]]:
    """
    Convenience function to emit floors and walls.

    Returns:
        (floors, walls)
    """
    emitter = GeometryEmitter(units, options, seam_epsilon_cells=seam_epsilon_cells)
    return emitter.emit_floors(clusters, index), emitter.emit_walls(segments)
