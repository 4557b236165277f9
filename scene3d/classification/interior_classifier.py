"""
Interior side classification for wall edges.

Tests floor presence on both sides of each unit edge so walls can be placed
flush against the floor they bound. Runs are split into segments whose
edges share one classification.
"""

from typing import Dict, List

from loguru import logger

from scene3d.core.models import (
    Orientation,
    WallRun,
    WallSegment,
    WallSide,
)
from scene3d.spatial.grid_index import GridIndex


class InteriorClassifier:
    """
    Classifies wall edges by adjacent floor coverage.

    Horizontal edge (x, y): below is tile (x, y - 1), above is tile (x, y).
    Vertical edge (x, y): left is tile (x - 1, y), right is tile (x, y).

    Exactly one side with floor gives a flush classification naming that
    side. Both sides (partition) or neither side (orphan) are centered.
    """

    def __init__(self, index: GridIndex):
        """
        Initialize interior classifier.

        Args:
            index: Grid index providing floor membership
        """
        self.index = index

    def classify_edge(self, x: int, y: int, orientation: Orientation) -> WallSide:
        """
        Classify a single unit edge.

        Args:
            x: Edge anchor x (normalized)
            y: Edge anchor y (normalized)
            orientation: Edge orientation

        Returns:
            WallSide for the edge
        """
        if orientation == Orientation.HORIZONTAL:
            first = self.index.has_floor(x, y - 1)
            second = self.index.has_floor(x, y)
            first_side, second_side = WallSide.BELOW, WallSide.ABOVE
        else:
            first = self.index.has_floor(x - 1, y)
            second = self.index.has_floor(x, y)
            first_side, second_side = WallSide.LEFT, WallSide.RIGHT

        if first and second:
            return WallSide.BOTH
        if first:
            return first_side
        if second:
            return second_side
        return WallSide.NONE

    def segment_run(self, run: WallRun) -> List[WallSegment]:
        """
        Split a run into maximal segments of uniform classification.

        Args:
            run: Coalesced wall run

        Returns:
            Segments covering the run in order
        """
        segments: List[WallSegment] = []
        start = run.start
        current = None

        for value, (x, y) in zip(range(run.start, run.end), run.edges()):
            side = self.classify_edge(x, y, run.orientation)
            if current is None:
                current = side
            elif side != current:
                segments.append(WallSegment(
                    start=start, end=value, fixed=run.fixed,
                    orientation=run.orientation, side=current,
                ))
                start = value
                current = side

        segments.append(WallSegment(
            start=start, end=run.end, fixed=run.fixed,
            orientation=run.orientation, side=current,
        ))
        return segments

    def classify(self, runs: List[WallRun]) -> List[WallSegment]:
        """
        Classify and segment every run.

        Args:
            runs: Wall runs from the coalescer

        Returns:
            List of WallSegment in run order
        """
        logger.info(f"Classifying interior sides for {len(runs)} wall runs")

        segments: List[WallSegment] = []
        for run in runs:
            segments.extend(self.segment_run(run))

        counts = self.summarize(segments)
        orphans = counts.get(WallSide.NONE, 0)
        if orphans:
            logger.warning(f"{orphans} wall edge(s) have no adjacent floor, placing centered")

        logger.success(
            f"Classified {sum(counts.values())} edges into {len(segments)} segments "
            f"({counts.get(WallSide.BOTH, 0)} partition edges)"
        )
        return segments

    @staticmethod
    def summarize(segments: List[WallSegment]) -> Dict[WallSide, int]:
        """Edge count per classification."""
        counts: Dict[WallSide, int] = {}
        for segment in segments:
            counts[segment.side] = counts.get(segment.side, 0) + segment.length
        return counts


def classify_runs(index: GridIndex, runs: List[WallRun]) -> List[WallSegment]:
    """Convenience function to classify and segment wall runs."""
    return InteriorClassifier(index).classify(runs)
