"""
Scene document parser for the scene.3d.v1 format.

Accepts an already-parsed mapping, a local JSON file, or an http(s) URL and
produces a validated SceneDocument with fail-fast validation.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import requests
from loguru import logger
from pydantic import ValidationError

from scene3d.core.config import Config
from scene3d.core.models import (
    AXES_SUFFIX,
    SCENE_SCHEMA,
    SceneDocument,
    SceneMetadata,
    ValidationResult,
)


SceneSource = Union[str, Path, Mapping[str, Any]]

_FALLBACK_UNITS = {
    "wallHeightMeters": "wall_height_meters",
    "wallThicknessMeters": "wall_thickness_meters",
    "floorThicknessMeters": "floor_thickness_meters",
}


class SceneFormatError(ValueError):
    """Raised when a scene document cannot be loaded."""


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


class SceneParser:
    """Parser for scene.3d.v1 documents with fail-fast validation."""

    def __init__(self, source: SceneSource, config: Optional[Config] = None, timeout: float = 30.0):
        """
        Initialize scene parser.

        Args:
            source: Parsed document, path to a JSON file, or http(s) URL
            config: Configuration for unit fallbacks (packaged defaults if None)
            timeout: Fetch timeout in seconds for URL sources
        """
        self.source = source
        self.config = config if config is not None else Config()
        self.timeout = timeout
        self.raw: Optional[Dict[str, Any]] = None
        self.document: Optional[SceneDocument] = None
        self.metadata: Optional[SceneMetadata] = None

    @property
    def source_label(self) -> str:
        if isinstance(self.source, Mapping):
            return "<in-memory>"
        return str(self.source)

    def parse(self) -> ValidationResult:
        """
        Read the document and run fail-fast validation.

        Returns:
            ValidationResult indicating if the document can be reconstructed

        Raises:
            FileNotFoundError: If a local document doesn't exist
            requests.RequestException: If a URL fetch fails
            SceneFormatError: If the payload is not a JSON object
        """
        logger.info(f"Parsing scene document: {self.source_label}")

        self.raw = self._read()
        self.metadata = self._extract_metadata(self.raw)

        validation = self._validate(self.raw)

        if validation.should_abort():
            logger.error(
                f"Scene validation failed with {len(validation.critical_errors)} "
                f"critical errors"
            )
            for error in validation.critical_errors:
                logger.error(f"  - {error}")
        else:
            for warning in validation.warnings:
                logger.warning(warning)
            logger.success(
                f"Scene validation passed (with {len(validation.warnings)} warnings)"
            )

        return validation

    def _read(self) -> Dict[str, Any]:
        """Load the raw document from whatever the source is."""
        if isinstance(self.source, Mapping):
            return dict(self.source)

        source = str(self.source)
        if _is_url(source):
            payload = self._fetch(source)
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Scene file not found: {path}")
            payload = path.read_text(encoding="utf-8")

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise SceneFormatError(f"Scene document is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SceneFormatError("Scene document root must be an object")
        return data

    def _fetch(self, url: str) -> str:
        logger.debug(f"Fetching scene from {url}")
        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    def _extract_metadata(self, raw: Dict[str, Any]) -> SceneMetadata:
        meta = raw.get("meta") if isinstance(raw.get("meta"), dict) else {}
        return SceneMetadata(
            source=self.source_label,
            schema_id=meta.get("schema"),
            axes=meta.get("axes"),
            version=meta.get("version"),
            name=meta.get("name"),
            has_parity=isinstance(meta.get("parity"), dict),
            has_sim_limits=isinstance(meta.get("simLimits"), dict),
        )

    def _validate(self, raw: Dict[str, Any]) -> ValidationResult:
        """
        Fail-fast checks, then model construction.

        Critical:
        - units.cellMeters missing or not positive
        - meta.axes missing or not ending in the ground-plane suffix
        - meta.schema not the scene.3d.v1 identifier
        - document shape rejected by the models

        Warnings:
        - missing optional unit fields (filled from config defaults)
        """
        assert self.metadata is not None

        critical_errors: List[str] = []
        warnings: List[str] = []

        meta = raw.get("meta")
        units = raw.get("units")
        if not isinstance(meta, dict):
            meta = {}
        if not isinstance(units, dict):
            units = {}

        if not units.get("cellMeters"):
            critical_errors.append("Missing required field: units.cellMeters")

        axes = meta.get("axes")
        if not axes:
            critical_errors.append("Missing required field: meta.axes")
        elif not isinstance(axes, str) or not axes.endswith(AXES_SUFFIX):
            critical_errors.append(
                f"Unsupported axes format: {axes}. Expected format: *{AXES_SUFFIX}"
            )

        if meta.get("schema") != SCENE_SCHEMA:
            critical_errors.append(f"Invalid document: expected {SCENE_SCHEMA} schema")

        if not critical_errors:
            payload = dict(raw)
            payload["units"] = dict(units)
            for key, param in _FALLBACK_UNITS.items():
                if key not in payload["units"]:
                    fallback = self.config.get_geometry_default(param)
                    payload["units"][key] = fallback
                    warnings.append(f"units.{key} missing, using {fallback}")

            try:
                self.document = SceneDocument.model_validate(payload)
            except ValidationError as e:
                for err in e.errors():
                    location = ".".join(str(part) for part in err["loc"])
                    critical_errors.append(f"Malformed document at {location}: {err['msg']}")

        return ValidationResult(
            is_valid=len(critical_errors) == 0,
            critical_errors=critical_errors,
            warnings=warnings,
            metadata=self.metadata,
        )


def parse_scene(
    source: SceneSource,
    config: Optional[Config] = None,
    timeout: float = 30.0,
) -> SceneParser:
    """
    Parse a scene document with fail-fast validation.

    Args:
        source: Parsed document, path to a JSON file, or http(s) URL
        config: Configuration (packaged defaults if None)
        timeout: Fetch timeout in seconds for URL sources

    Returns:
        SceneParser instance holding the validated document

    Raises:
        FileNotFoundError: If a local file doesn't exist
        requests.RequestException: If a URL fetch fails
        SceneFormatError: If validation fails (critical errors)
    """
    parser = SceneParser(source, config=config, timeout=timeout)
    validation = parser.parse()

    if validation.should_abort():
        error_msg = "\n".join(validation.critical_errors)
        raise SceneFormatError(
            f"Scene validation failed with critical errors:\n{error_msg}"
        )

    return parser
