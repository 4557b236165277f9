"""
Configuration management for scene3d.

Loads geometry defaults and structural rules from JSON, and turns external
option strings (query-parameter style) into an explicit PipelineOptions
object that is passed into each load.
"""

import json
import math
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field


DEFAULT_CONFIG_PATH = Path(__file__).parent / "scene_defaults.json"


class WallAlignment(str, Enum):
    """Where a wall box sits relative to its lattice edge."""
    FLUSH = "flush"        # offset toward the side without floor
    CENTERED = "centered"  # straddles the edge


class SeamMode(str, Enum):
    """How abutting boxes are kept from showing hairline gaps."""
    NONE = "none"
    AUTO = "auto"        # floor inset derived from wall thickness
    CUSTOM = "custom"    # caller-supplied floor inset
    EPSILON = "epsilon"  # small overlap added to footprints


class ReconstructionMode(str, Enum):
    OPTIMIZED = "optimized"  # clustered floors, coalesced walls
    LITERAL = "literal"      # one box per tile and per edge


class PipelineOptions(BaseModel):
    """Explicit per-load policy flags."""
    wall_alignment: WallAlignment = WallAlignment.FLUSH
    seam_mode: SeamMode = SeamMode.AUTO
    custom_inset: float = Field(default=0.0, ge=0.0)  # metres, used by SeamMode.CUSTOM
    reconstruction: ReconstructionMode = ReconstructionMode.OPTIMIZED
    include_grid_overlay: bool = False


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Config:
    """Configuration manager for geometry defaults and option parsing."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to JSON config file. If None, uses the packaged defaults.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = json.load(f)

        logger.debug(f"Loaded config: {self._config.get('name', 'Unknown')}")

    def get_geometry_default(self, param_name: str, default: Any = None) -> Any:
        """
        Get a geometry default parameter.

        Args:
            param_name: Parameter name
            default: Default value if not found

        Returns:
            Parameter value or default
        """
        return self._config.get("geometry_defaults", {}).get(param_name, default)

    def get_pipeline_default(self, option: str, default: Any = None) -> Any:
        """Get the default string for an external option key."""
        return self._config.get("pipeline_defaults", {}).get(option, default)

    def get_structure_rule(self, rule_name: str, default: Any = None) -> Any:
        """Get a structural validation rule."""
        return self._config.get("structure_rules", {}).get(rule_name, default)

    def default_options(self) -> PipelineOptions:
        """PipelineOptions built from the configured defaults only."""
        return self.options_from_params({})

    def options_from_params(self, params: Mapping[str, str]) -> PipelineOptions:
        """
        Build PipelineOptions from external option strings.

        Recognized keys: ``align`` (flush|centered), ``inset``
        (none|auto|epsilon|<metres>), ``mode`` (optimized|literal) and
        ``grid`` (boolean). Unrecognized values fall back to the configured
        default with a warning.

        Args:
            params: Mapping of option name to raw string value

        Returns:
            PipelineOptions instance
        """
        align = self._parse_choice(params, "align", WallAlignment)
        mode = self._parse_choice(params, "mode", ReconstructionMode)
        seam_mode, custom_inset = self._parse_inset(params)
        grid = self._parse_flag(params, "grid")

        options = PipelineOptions(
            wall_alignment=align,
            seam_mode=seam_mode,
            custom_inset=custom_inset,
            reconstruction=mode,
            include_grid_overlay=grid,
        )
        logger.debug(f"Pipeline options: {options.model_dump(mode='json')}")
        return options

    def _raw_option(self, params: Mapping[str, str], key: str) -> str:
        default = str(self.get_pipeline_default(key, ""))
        value = params.get(key)
        if value is None:
            return default
        return str(value).strip().lower()

    def _parse_choice(self, params: Mapping[str, str], key: str, enum_cls):
        value = self._raw_option(params, key)
        try:
            return enum_cls(value)
        except ValueError:
            default = enum_cls(self.get_pipeline_default(key))
            logger.warning(f"Unrecognized {key}={value!r}, using {default.value!r}")
            return default

    def _parse_inset(self, params: Mapping[str, str]):
        value = self._raw_option(params, "inset")
        if value in (SeamMode.NONE.value, SeamMode.AUTO.value, SeamMode.EPSILON.value):
            return SeamMode(value), 0.0

        try:
            inset = float(value)
        except ValueError:
            inset = -1.0

        if math.isfinite(inset) and inset >= 0.0:
            return SeamMode.CUSTOM, inset

        default = self.get_pipeline_default("inset", SeamMode.AUTO.value)
        logger.warning(f"Unrecognized inset={value!r}, using {default!r}")
        if default in (SeamMode.NONE.value, SeamMode.AUTO.value, SeamMode.EPSILON.value):
            return SeamMode(default), 0.0
        return SeamMode.CUSTOM, float(default)

    def _parse_flag(self, params: Mapping[str, str], key: str) -> bool:
        value = self._raw_option(params, key)
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        default = str(self.get_pipeline_default(key, "0")).lower()
        logger.warning(f"Unrecognized {key}={value!r}, using {default!r}")
        return default in _TRUE_VALUES


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a specific file.

    Args:
        config_path: Path to JSON config file (packaged defaults if None)

    Returns:
        Config instance
    """
    return Config(config_path)
