"""Tests for wall run coalescing."""
import random

from scene3d.core.config import ReconstructionMode
from scene3d.core.models import Orientation, WallRun
from scene3d.detection.wall_runs import (
    WallCoalescer,
    coalesce_edges,
    coalesce_walls,
    count_runs,
    literal_runs,
)

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


class TestCoalesceEdges:

    def test_gap_splits_run(self):
        runs = coalesce_edges([(0, 5), (1, 5), (2, 5), (5, 5)], H)
        assert runs == [
            WallRun(start=0, end=3, fixed=5, orientation=H),
            WallRun(start=5, end=6, fixed=5, orientation=H),
        ]

    def test_input_order_irrelevant(self):
        runs = coalesce_edges([(2, 5), (0, 5), (1, 5)], H)
        assert runs == [WallRun(start=0, end=3, fixed=5, orientation=H)]

    def test_vertical_groups_by_x(self):
        runs = coalesce_edges([(3, 0), (3, 1), (4, 1)], V)
        assert runs == [
            WallRun(start=0, end=2, fixed=3, orientation=V),
            WallRun(start=1, end=2, fixed=4, orientation=V),
        ]

    def test_rows_kept_apart(self):
        runs = coalesce_edges([(0, 0), (1, 1)], H)
        assert len(runs) == 2

    def test_duplicates_do_not_extend(self):
        runs = coalesce_edges([(0, 0), (0, 0), (1, 0)], H)
        assert runs == [WallRun(start=0, end=2, fixed=0, orientation=H)]

    def test_empty(self):
        assert coalesce_edges([], H) == []

    def test_count_runs(self):
        runs = coalesce_walls([(0, 5), (1, 5), (2, 5), (5, 5)], [(3, 0), (3, 1)])
        assert count_runs(runs, H) == 2
        assert count_runs(runs, V) == 1


class TestPartitionProperty:

    def test_union_and_maximality(self):
        rng = random.Random(3)
        edges = {(rng.randrange(0, 30), rng.randrange(0, 6)) for _ in range(80)}
        runs = coalesce_edges(edges, H)

        covered = [edge for run in runs for edge in run.edges()]
        assert len(covered) == len(set(covered))
        assert set(covered) == edges

        for a in runs:
            for b in runs:
                if a is not b and a.fixed == b.fixed:
                    assert a.end != b.start

    def test_deterministic(self):
        edges = [(4, 1), (2, 1), (3, 1), (9, 2)]
        assert coalesce_edges(edges, V) == coalesce_edges(list(edges), V)


class TestWallCoalescer:

    def test_both_orientations(self):
        runs = coalesce_walls([(0, 0), (1, 0)], [(0, 0), (0, 1), (0, 3)])
        assert [r.orientation for r in runs] == [H, V, V]
        assert runs[0].length == 2

    def test_literal_mode(self):
        coalescer = WallCoalescer(mode=ReconstructionMode.LITERAL)
        runs = coalescer.coalesce([(1, 0), (0, 0)], [])
        assert runs == [
            WallRun(start=0, end=1, fixed=0, orientation=H),
            WallRun(start=1, end=2, fixed=0, orientation=H),
        ]

    def test_literal_runs_dedupes(self):
        assert len(literal_runs([(0, 0), (0, 0)], V)) == 1
