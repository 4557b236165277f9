"""
Parity cross-check between reconstructed input and declared counts.

Warn-only: mismatches are reported and logged but never block geometry.
"""

from typing import Dict, List, Optional

from loguru import logger

from scene3d.core.models import (
    ParityBlock,
    ParityMismatch,
    ParityReport,
    ParityStatus,
    Units,
)
from scene3d.spatial.grid_index import GridIndex


# Document field name -> ParityBlock attribute, in report order
PARITY_FIELDS = {
    "tiles": "tiles",
    "edgesH": "edges_h",
    "edgesV": "edges_v",
    "floorArea": "floor_area",
    "edgeLenH": "edge_len_h",
    "edgeLenV": "edge_len_v",
}


class ParityValidator:
    """Compares actual lattice metrics with a declared parity block."""

    def __init__(self, tolerance: float = 1e-6):
        """
        Initialize parity validator.

        Args:
            tolerance: Absolute tolerance for derived (real-valued) fields
        """
        self.tolerance = tolerance

    @staticmethod
    def actual_metrics(index: GridIndex, units: Units) -> Dict[str, float]:
        """
        Metrics of the deduplicated lattice.

        Area and lengths are in world units; on a unit-cell lattice they equal
        the tile and edge counts.
        """
        cell = units.cell_meters
        tiles = len(index.tiles)
        edges_h = len(index.horizontal)
        edges_v = len(index.vertical)
        return {
            "tiles": tiles,
            "edgesH": edges_h,
            "edgesV": edges_v,
            "floorArea": tiles * cell * cell,
            "edgeLenH": edges_h * cell,
            "edgeLenV": edges_v * cell,
        }

    def validate(self, index: GridIndex, units: Units, declared: Optional[ParityBlock]) -> ParityReport:
        """
        Cross-check the lattice against declared parity.

        Args:
            index: Grid index of the layout
            units: Unit block of the document
            declared: Parity block from the document metadata (optional)

        Returns:
            ParityReport listing every mismatching field
        """
        actual = self.actual_metrics(index, units)

        if declared is None:
            logger.info("Parity data unavailable")
            return ParityReport(status=ParityStatus.UNAVAILABLE, actual=actual)

        mismatches: List[ParityMismatch] = []
        for field, attr in PARITY_FIELDS.items():
            declared_value = getattr(declared, attr)
            value = float(actual[field])
            if declared_value is None:
                mismatches.append(ParityMismatch(field=field, expected=None, actual=value))
            elif abs(float(declared_value) - value) > self.tolerance:
                mismatches.append(ParityMismatch(field=field, expected=float(declared_value), actual=value))

        if mismatches:
            logger.error(f"Parity check FAILED: {len(mismatches)} field(s) differ")
            for mismatch in mismatches:
                logger.error(f"  - {mismatch}")
            return ParityReport(status=ParityStatus.MISMATCH, actual=actual, mismatches=mismatches)

        logger.success("Parity OK")
        return ParityReport(status=ParityStatus.OK, actual=actual)


def validate_parity(index: GridIndex, units: Units, declared: Optional[ParityBlock]) -> ParityReport:
    """Convenience function to run the parity check."""
    return ParityValidator().validate(index, units, declared)
