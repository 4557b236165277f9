"""
scene3d - Lattice Floor Plan Reconstruction

Converts grid-based scene.3d.v1 layouts into merged floor slabs and
coalesced wall boxes positioned in world units.
"""

__version__ = "0.1.0"

from scene3d.core.config import Config, PipelineOptions, load_config
from scene3d.parsers.scene_parser import SceneFormatError, parse_scene
from scene3d.spatial.grid_index import GridIndex
from scene3d.detection.floor_clusters import cluster_floors
from scene3d.detection.wall_runs import coalesce_walls
from scene3d.classification.interior_classifier import classify_runs
from scene3d.generation.geometry_emitter import emit_geometry
from scene3d.generation.bounds import compute_bounds
from scene3d.validation.parity import validate_parity
from scene3d.pipeline import load_scene, load_scene_with_params

__all__ = [
    "Config",
    "PipelineOptions",
    "load_config",
    "SceneFormatError",
    "parse_scene",
    "GridIndex",
    "cluster_floors",
    "coalesce_walls",
    "classify_runs",
    "emit_geometry",
    "compute_bounds",
    "validate_parity",
    "load_scene",
    "load_scene_with_params",
]
