"""
Warn-only structural checks for scene.3d.v1 documents.

Reports shape and range problems that do not prevent reconstruction:
missing optional sections, version pattern, unit ranges, and lattice
coordinates outside the editor extent.
"""

import re
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel

from scene3d.core.config import Config


_VERSION_PATTERN = re.compile(r"^1\.[0-9]+$")
_TOP_LEVEL = ("meta", "units", "tiles", "edges", "originOffset")


class StructureIssue(BaseModel):
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class StructureValidator:
    """Collects StructureIssues for a raw document mapping."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        self.coordinate_min = self.config.get_structure_rule("coordinate_min", 0)
        self.coordinate_max = self.config.get_structure_rule("coordinate_max", 1000)
        self.unit_ranges = self.config.get_structure_rule("unit_ranges", {})

    def validate(self, raw: Dict[str, Any]) -> List[StructureIssue]:
        issues: List[StructureIssue] = []

        if not isinstance(raw, dict):
            return [StructureIssue(path="$", message="Root must be an object")]

        for prop in _TOP_LEVEL:
            if prop not in raw:
                issues.append(StructureIssue(path=f"$.{prop}", message=f"Missing required property '{prop}'"))

        if isinstance(raw.get("meta"), dict):
            self._validate_meta(raw["meta"], issues)
        if isinstance(raw.get("units"), dict):
            self._validate_units(raw["units"], issues)
        if isinstance(raw.get("tiles"), dict):
            self._validate_coordinates(raw["tiles"], ("floor",), "$.tiles", issues)
        if isinstance(raw.get("edges"), dict):
            self._validate_coordinates(raw["edges"], ("horizontal", "vertical"), "$.edges", issues)

        return issues

    def _validate_meta(self, meta: Dict[str, Any], issues: List[StructureIssue]) -> None:
        version = meta.get("version")
        if version is None:
            issues.append(StructureIssue(path="$.meta.version", message="Missing required property"))
        elif not isinstance(version, str) or not _VERSION_PATTERN.match(version):
            issues.append(StructureIssue(path="$.meta.version", message='Must match pattern "1.x"'))

        name = meta.get("name")
        if name is not None and (not isinstance(name, str) or not 0 < len(name) <= 100):
            issues.append(StructureIssue(path="$.meta.name", message="Must be string with 1-100 characters"))

    def _validate_units(self, units: Dict[str, Any], issues: List[StructureIssue]) -> None:
        for prop, rule in self.unit_ranges.items():
            path = f"$.units.{prop}"
            if prop not in units:
                issues.append(StructureIssue(path=path, message="Missing required property"))
                continue

            value = units[prop]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                issues.append(StructureIssue(path=path, message="Must be a number"))
                continue

            low = rule.get("min")
            exclusive = rule.get("exclusive", False)
            if low is not None and (value <= low if exclusive else value < low):
                issues.append(StructureIssue(path=path, message=f"Must be {'>' if exclusive else '>='} {low}"))

            high = rule.get("max")
            if high is not None and value > high:
                issues.append(StructureIssue(path=path, message=f"Must be <= {high}"))

    def _validate_coordinates(self, section: Dict[str, Any], keys, base: str, issues: List[StructureIssue]) -> None:
        for key in keys:
            path = f"{base}.{key}"
            coords = section.get(key)
            if coords is None:
                issues.append(StructureIssue(path=path, message="Missing required property"))
                continue
            if not isinstance(coords, list):
                issues.append(StructureIssue(path=path, message="Must be an array"))
                continue

            for index, coord in enumerate(coords):
                item = f"{path}[{index}]"
                if not isinstance(coord, (list, tuple)):
                    issues.append(StructureIssue(path=item, message="Must be an array"))
                    continue
                if len(coord) != 2:
                    issues.append(StructureIssue(path=item, message="Must have exactly 2 elements"))
                    continue
                for axis, value in enumerate(coord):
                    if isinstance(value, bool) or not isinstance(value, int):
                        issues.append(StructureIssue(path=f"{item}[{axis}]", message="Must be an integer"))
                    elif not self.coordinate_min <= value <= self.coordinate_max:
                        issues.append(StructureIssue(
                            path=f"{item}[{axis}]",
                            message=f"Must be between {self.coordinate_min} and {self.coordinate_max}",
                        ))


def validate_structure(raw: Dict[str, Any], config: Optional[Config] = None) -> List[StructureIssue]:
    """
    Run the structural checks and log every issue as a warning.

    Args:
        raw: Raw document mapping
        config: Configuration (packaged defaults if None)

    Returns:
        List of StructureIssue (empty when the document is clean)
    """
    issues = StructureValidator(config).validate(raw)

    if issues:
        logger.warning(f"Structural validation found {len(issues)} issue(s)")
        for issue in issues[:20]:
            logger.warning(f"  - {issue}")
        if len(issues) > 20:
            logger.warning(f"  ... and {len(issues) - 20} more")
    else:
        logger.debug("Structural validation passed")

    return issues
