"""Tests for interior side classification."""
from scene3d.classification.interior_classifier import (
    InteriorClassifier,
    classify_runs,
)
from scene3d.core.models import Orientation, WallRun, WallSegment, WallSide

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


class TestClassifyEdge:

    def test_floor_below_only(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0)]))
        assert classifier.classify_edge(0, 1, H) == WallSide.BELOW

    def test_floor_above_only(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0)]))
        assert classifier.classify_edge(0, 0, H) == WallSide.ABOVE

    def test_floor_left_only(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0)]))
        assert classifier.classify_edge(1, 0, V) == WallSide.LEFT

    def test_floor_right_only(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0)]))
        assert classifier.classify_edge(0, 0, V) == WallSide.RIGHT

    def test_partition(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0), (1, 0)]))
        assert classifier.classify_edge(1, 0, V) == WallSide.BOTH
        assert not WallSide.BOTH.is_flush

    def test_orphan(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0)]))
        assert classifier.classify_edge(5, 5, H) == WallSide.NONE
        assert not WallSide.NONE.is_flush


class TestSegmentRun:

    def test_uniform_run_is_one_segment(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0), (1, 0), (2, 0)]))
        run = WallRun(start=0, end=3, fixed=1, orientation=H)
        assert classifier.segment_run(run) == [
            WallSegment(start=0, end=3, fixed=1, orientation=H, side=WallSide.BELOW),
        ]

    def test_split_where_side_changes(self, make_index):
        classifier = InteriorClassifier(make_index(floor=[(0, 0), (1, 0)]))
        run = WallRun(start=0, end=3, fixed=1, orientation=H)
        assert classifier.segment_run(run) == [
            WallSegment(start=0, end=2, fixed=1, orientation=H, side=WallSide.BELOW),
            WallSegment(start=2, end=3, fixed=1, orientation=H, side=WallSide.NONE),
        ]

    def test_vertical_run_split(self, make_index):
        # Column x=1 between (0, y) and (1, y): floor both sides at y=0, left only at y=1
        classifier = InteriorClassifier(make_index(floor=[(0, 0), (1, 0), (0, 1)]))
        run = WallRun(start=0, end=2, fixed=1, orientation=V)
        sides = [s.side for s in classifier.segment_run(run)]
        assert sides == [WallSide.BOTH, WallSide.LEFT]

    def test_segments_cover_runs(self, make_index):
        index = make_index(floor=[(0, 0), (1, 0)])
        runs = [WallRun(start=0, end=4, fixed=1, orientation=H)]
        segments = classify_runs(index, runs)
        assert sum(s.length for s in segments) == 4
        assert segments[0].start == 0 and segments[-1].end == 4


class TestLogging:

    def test_orphans_warned(self, make_index, log_records):
        classify_runs(make_index(floor=[(0, 0)]), [WallRun(start=4, end=6, fixed=4, orientation=H)])
        assert any(level == "WARNING" and "no adjacent floor" in msg for level, msg in log_records)

    def test_summary_counts(self):
        segments = [
            WallSegment(start=0, end=2, fixed=0, orientation=H, side=WallSide.ABOVE),
            WallSegment(start=2, end=3, fixed=0, orientation=H, side=WallSide.BOTH),
        ]
        assert InteriorClassifier.summarize(segments) == {WallSide.ABOVE: 2, WallSide.BOTH: 1}
