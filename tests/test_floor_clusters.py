"""Tests for greedy floor clustering."""
import random

from scene3d.core.config import ReconstructionMode
from scene3d.core.models import FloorCluster
from scene3d.detection.floor_clusters import (
    FloorClusterer,
    cluster_floors,
    find_rectangle,
    grow_width,
)

from conftest import room_tiles


def _covered(clusters):
    cells = []
    for cluster in clusters:
        cells.extend(cluster.cells())
    return cells


class TestGreedyScan:

    def test_square_is_one_cluster(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0), (0, 1), (1, 1)])
        clusters = cluster_floors(index)
        assert clusters == [FloorCluster(min_x=0, max_x=1, min_y=0, max_y=1)]

    def test_l_shape(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0), (0, 1)])
        clusters = cluster_floors(index)
        assert clusters == [
            FloorCluster(min_x=0, max_x=1, min_y=0, max_y=0),
            FloorCluster(min_x=0, max_x=0, min_y=1, max_y=1),
        ]

    def test_t_shape_follows_scan_not_minimum(self, make_index):
        # A stem above a bar: greedy takes the stem down through the bar first
        index = make_index(floor=[(1, 0), (0, 1), (1, 1), (2, 1)])
        clusters = cluster_floors(index)
        assert clusters == [
            FloorCluster(min_x=1, max_x=1, min_y=0, max_y=1),
            FloorCluster(min_x=0, max_x=0, min_y=1, max_y=1),
            FloorCluster(min_x=2, max_x=2, min_y=1, max_y=1),
        ]

    def test_height_requires_full_row(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (0, 2), (1, 2), (2, 2)])
        clusters = cluster_floors(index)
        assert clusters[0] == FloorCluster(min_x=0, max_x=2, min_y=0, max_y=0)
        assert clusters[1] == FloorCluster(min_x=0, max_x=1, min_y=1, max_y=2)
        assert clusters[2] == FloorCluster(min_x=2, max_x=2, min_y=2, max_y=2)

    def test_full_room(self, make_index):
        index = make_index(floor=room_tiles(4, 3))
        clusters = cluster_floors(index)
        assert len(clusters) == 1
        assert clusters[0].width == 4
        assert clusters[0].height == 3

    def test_empty_layout(self, make_index):
        assert cluster_floors(make_index(floor=[])) == []


class TestHelpers:

    def test_grow_width_stops_at_covered(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0), (2, 0)])
        assert grow_width(index, 0, 0, set()) == 3
        assert grow_width(index, 0, 0, {(1, 0)}) == 1

    def test_find_rectangle_respects_covered(self, make_index):
        index = make_index(floor=room_tiles(2, 2))
        rect = find_rectangle(index, 0, 0, {(1, 1)})
        assert rect == FloorCluster(min_x=0, max_x=1, min_y=0, max_y=0)

    def test_scan_returns_covered_set(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0), (0, 1)])
        clusters, covered = FloorClusterer.scan(index)
        assert covered == frozenset(index.tiles)
        assert len(clusters) == 2


class TestPartitionProperty:
    """Clusters cover every tile exactly once."""

    def _random_tiles(self, seed):
        rng = random.Random(seed)
        return [(x, y) for y in range(12) for x in range(15) if rng.random() < 0.6]

    def test_union_equals_tiles_without_overlap(self, make_index):
        for seed in range(5):
            index = make_index(floor=self._random_tiles(seed))
            cells = _covered(cluster_floors(index))
            assert len(cells) == len(set(cells))
            assert set(cells) == set(index.tiles)

    def test_deterministic(self, make_index):
        tiles = self._random_tiles(42)
        first = cluster_floors(make_index(floor=tiles))
        second = cluster_floors(make_index(floor=tiles))
        assert first == second


class TestLiteralMode:

    def test_one_cluster_per_tile(self, make_index):
        index = make_index(floor=room_tiles(2, 2))
        clusters = FloorClusterer(mode=ReconstructionMode.LITERAL).cluster(index)
        assert len(clusters) == 4
        assert all(c.area == 1 for c in clusters)
        assert [(c.min_x, c.min_y) for c in clusters] == [(0, 0), (1, 0), (0, 1), (1, 1)]
