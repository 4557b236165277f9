"""
Floor clustering from normalized floor tiles.

Partitions the floor tile set into axis-aligned rectangles with a
deterministic greedy row-major scan. The result is reproducible for a given
input but is not a minimum-count decomposition.
"""

from typing import AbstractSet, FrozenSet, List, Tuple

from loguru import logger

from scene3d.core.config import ReconstructionMode
from scene3d.core.models import Coordinate, FloorCluster
from scene3d.spatial.grid_index import GridIndex


def _is_open(index: GridIndex, x: int, y: int, covered: AbstractSet[Coordinate]) -> bool:
    """Floor tile inside the layout that no earlier cluster has taken."""
    return index.in_extent(x, y) and index.has_floor(x, y) and (x, y) not in covered


def grow_width(index: GridIndex, x: int, y: int, covered: AbstractSet[Coordinate]) -> int:
    """Count contiguous open tiles rightward from (x, y)."""
    width = 0
    while _is_open(index, x + width, y, covered):
        width += 1
    return width


def grow_height(index: GridIndex, x: int, y: int, width: int, covered: AbstractSet[Coordinate]) -> int:
    """Count rows, starting at y, whose full width-wide span is open."""
    height = 1
    while all(_is_open(index, x + dx, y + height, covered) for dx in range(width)):
        height += 1
    return height


def find_rectangle(index: GridIndex, x: int, y: int, covered: AbstractSet[Coordinate]) -> FloorCluster:
    """
    Grow the rectangle anchored at the open tile (x, y).

    Args:
        index: Grid index of the layout
        x: Anchor column (must be an open tile)
        y: Anchor row
        covered: Tiles already claimed by earlier clusters

    Returns:
        FloorCluster with inclusive bounds
    """
    width = grow_width(index, x, y, covered)
    height = grow_height(index, x, y, width, covered)
    return FloorCluster(min_x=x, max_x=x + width - 1, min_y=y, max_y=y + height - 1)


class FloorClusterer:
    """
    Greedy rectangle extraction over a GridIndex.

    Strategy (row-major, y then x):
    1. Skip tiles covered by an earlier cluster
    2. Grow width rightward along the row
    3. Grow height while the whole next row span is open floor
    4. Claim the rectangle and emit it
    """

    def __init__(self, mode: ReconstructionMode = ReconstructionMode.OPTIMIZED):
        """
        Initialize floor clusterer.

        Args:
            mode: OPTIMIZED for greedy rectangles, LITERAL for one cluster per tile
        """
        self.mode = mode

    def cluster(self, index: GridIndex) -> List[FloorCluster]:
        """
        Partition the floor tiles of an index into clusters.

        Args:
            index: Grid index with normalized tiles

        Returns:
            List of FloorCluster in emission order
        """
        logger.info(f"Clustering {len(index)} floor tiles ({self.mode.value})")

        if self.mode == ReconstructionMode.LITERAL:
            clusters = [
                FloorCluster(min_x=x, max_x=x, min_y=y, max_y=y)
                for x, y in sorted(index.tiles, key=lambda c: (c[1], c[0]))
            ]
        else:
            clusters, _ = self.scan(index)

        logger.success(f"Merged {len(index)} tiles into {len(clusters)} floor clusters")
        return clusters

    @staticmethod
    def scan(index: GridIndex) -> Tuple[List[FloorCluster], FrozenSet[Coordinate]]:
        """
        Run the row-major greedy scan.

        Returns:
            (clusters, covered) where covered is every tile claimed
        """
        covered = set()
        clusters: List[FloorCluster] = []

        for y in range(index.height):
            for x in range(index.width):
                if not _is_open(index, x, y, covered):
                    continue

                cluster = find_rectangle(index, x, y, covered)
                covered.update(cluster.cells())
                clusters.append(cluster)

                logger.trace(f"[FLOOR] {cluster}")

        return clusters, frozenset(covered)


def cluster_floors(
    index: GridIndex,
    mode: ReconstructionMode = ReconstructionMode.OPTIMIZED,
) -> List[FloorCluster]:
    """
    Convenience function to cluster floor tiles.

    Args:
        index: Grid index of the layout
        mode: Reconstruction mode

    Returns:
        List of FloorCluster objects
    """
    return FloorClusterer(mode=mode).cluster(index)
