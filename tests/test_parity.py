"""Tests for the warn-only parity check."""
import pytest

from scene3d.core.models import ParityBlock, ParityStatus, Units
from scene3d.validation.parity import ParityValidator, validate_parity


def _declared(**overrides):
    values = dict(tiles=2, edgesH=1, edgesV=0, floorArea=2, edgeLenH=1, edgeLenV=0)
    values.update(overrides)
    return ParityBlock.model_validate(values)


@pytest.fixture
def index(make_index):
    return make_index(floor=[(0, 0), (1, 0)], horizontal=[(0, 0)])


class TestParity:

    def test_ok(self, index, units):
        report = validate_parity(index, units, _declared())
        assert report.status == ParityStatus.OK
        assert report.ok
        assert report.mismatches == []

    def test_single_field_mismatch(self, index, units):
        report = validate_parity(index, units, _declared(edgesV=3))
        assert report.status == ParityStatus.MISMATCH
        assert report.failed_fields() == ["edgesV"]
        assert report.mismatches[0].expected == 3
        assert report.mismatches[0].actual == 0

    def test_several_fields_reported(self, index, units):
        report = validate_parity(index, units, _declared(tiles=5, floorArea=5))
        assert report.failed_fields() == ["tiles", "floorArea"]

    def test_unavailable(self, index, units):
        report = validate_parity(index, units, None)
        assert report.status == ParityStatus.UNAVAILABLE
        assert report.actual["tiles"] == 2

    def test_derived_metrics_scale_with_cell(self, index):
        units = Units(cell_meters=2.0, wall_height_meters=3.0,
                      wall_thickness_meters=0.2, floor_thickness_meters=0.1)
        actual = ParityValidator.actual_metrics(index, units)
        assert actual["floorArea"] == pytest.approx(8.0)
        assert actual["edgeLenH"] == pytest.approx(2.0)

    def test_duplicates_not_double_counted(self, make_index, units):
        index = make_index(floor=[(0, 0), (0, 0), (1, 0)], horizontal=[(0, 0)])
        assert validate_parity(index, units, _declared()).ok

    def test_mismatch_logged(self, index, units, log_records):
        validate_parity(index, units, _declared(tiles=9))
        assert any(level == "ERROR" and "tiles: expected 9, got 2" in msg for level, msg in log_records)

    def test_missing_declared_field_is_mismatch(self, index, units, log_records):
        declared = ParityBlock.model_validate({"tiles": 2, "edgesH": 1, "edgesV": 0})
        report = validate_parity(index, units, declared)
        assert report.status == ParityStatus.MISMATCH
        assert report.failed_fields() == ["floorArea", "edgeLenH", "edgeLenV"]
        assert all(m.expected is None for m in report.mismatches)
        assert any("floorArea: expected nothing, got 2" in msg for _, msg in log_records)
