"""
Wall run coalescing from lattice edges.

Groups same-orientation edges by their fixed coordinate and merges
consecutive free-axis values into maximal [start, end) runs.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from loguru import logger

from scene3d.core.config import ReconstructionMode
from scene3d.core.models import Coordinate, Orientation, WallRun


def _fixed_and_free(coord: Coordinate, orientation: Orientation):
    x, y = coord
    if orientation == Orientation.HORIZONTAL:
        return y, x
    return x, y


def coalesce_edges(edges: Iterable[Coordinate], orientation: Orientation) -> List[WallRun]:
    """
    Merge edges of one orientation into maximal runs.

    Args:
        edges: Edge anchors (x, y)
        orientation: Orientation shared by every edge

    Returns:
        Runs sorted by fixed coordinate, then start
    """
    by_fixed: Dict[int, set] = defaultdict(set)
    for coord in edges:
        fixed, free = _fixed_and_free(coord, orientation)
        by_fixed[fixed].add(free)

    runs: List[WallRun] = []
    for fixed in sorted(by_fixed):
        values = sorted(by_fixed[fixed])
        start = values[0]
        end = start + 1
        for value in values[1:]:
            if value == end:
                end += 1
                continue
            runs.append(WallRun(start=start, end=end, fixed=fixed, orientation=orientation))
            start = value
            end = start + 1
        runs.append(WallRun(start=start, end=end, fixed=fixed, orientation=orientation))

    return runs


def literal_runs(edges: Iterable[Coordinate], orientation: Orientation) -> List[WallRun]:
    """One unit run per distinct edge, sorted like coalesce_edges."""
    unit = set()
    for coord in edges:
        unit.add(_fixed_and_free(coord, orientation))
    return [
        WallRun(start=free, end=free + 1, fixed=fixed, orientation=orientation)
        for fixed, free in sorted(unit)
    ]


class WallCoalescer:
    """Partitions each edge orientation into runs."""

    def __init__(self, mode: ReconstructionMode = ReconstructionMode.OPTIMIZED):
        """
        Initialize wall coalescer.

        Args:
            mode: OPTIMIZED merges contiguous edges, LITERAL keeps one run per edge
        """
        self.mode = mode

    def coalesce(self, horizontal: Iterable[Coordinate], vertical: Iterable[Coordinate]) -> List[WallRun]:
        """
        Coalesce both orientations.

        Args:
            horizontal: Horizontal edge anchors
            vertical: Vertical edge anchors

        Returns:
            Horizontal runs followed by vertical runs
        """
        horizontal = list(horizontal)
        vertical = list(vertical)
        logger.info(f"Coalescing {len(horizontal)} H and {len(vertical)} V edges ({self.mode.value})")

        build = literal_runs if self.mode == ReconstructionMode.LITERAL else coalesce_edges
        h_runs = build(horizontal, Orientation.HORIZONTAL)
        v_runs = build(vertical, Orientation.VERTICAL)

        for run in h_runs + v_runs:
            logger.trace(f"[RUN] {run}")

        logger.success(
            f"Coalesced {len(horizontal) + len(vertical)} edges into "
            f"{len(h_runs)} H runs and {len(v_runs)} V runs"
        )
        return h_runs + v_runs


def coalesce_walls(
    horizontal: Iterable[Coordinate],
    vertical: Iterable[Coordinate],
    mode: ReconstructionMode = ReconstructionMode.OPTIMIZED,
) -> List[WallRun]:
    """
    Convenience function to coalesce wall edges.

    Args:
        horizontal: Horizontal edge anchors
        vertical: Vertical edge anchors
        mode: Reconstruction mode

    Returns:
        List of WallRun objects
    """
    return WallCoalescer(mode=mode).coalesce(horizontal, vertical)


def count_runs(runs: Iterable[WallRun], orientation: Orientation) -> int:
    """Number of runs with the given orientation."""
    return sum(1 for run in runs if run.orientation == orientation)
