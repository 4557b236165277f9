"""
Scene reconstruction pipeline.

Document -> GridIndex -> floor clusters / wall runs -> interior sides ->
box geometry -> bounds and parity. Every load works on its own copies;
nothing is cached between calls.
"""

from typing import Mapping, Optional

from loguru import logger

from scene3d.classification.interior_classifier import InteriorClassifier
from scene3d.core.config import Config, PipelineOptions
from scene3d.core.models import Orientation, SceneResult
from scene3d.detection.floor_clusters import FloorClusterer
from scene3d.detection.wall_runs import WallCoalescer, count_runs
from scene3d.generation.bounds import compute_bounds, grid_extent
from scene3d.generation.geometry_emitter import GeometryEmitter
from scene3d.generation.grid_overlay import build_grid_overlay
from scene3d.parsers.scene_parser import SceneSource, parse_scene
from scene3d.spatial.grid_index import GridIndex
from scene3d.validation.parity import ParityValidator
from scene3d.validation.structure import validate_structure


def load_scene(
    source: SceneSource,
    options: Optional[PipelineOptions] = None,
    config: Optional[Config] = None,
    timeout: float = 30.0,
) -> SceneResult:
    """
    Load a scene.3d.v1 document and reconstruct its box primitives.

    Args:
        source: Parsed document, path to a JSON file, or http(s) URL
        options: Policy flags (configured defaults if None)
        config: Configuration (packaged defaults if None)
        timeout: Fetch timeout in seconds for URL sources

    Returns:
        SceneResult with floors, walls, bounds and parity report

    Raises:
        SceneFormatError: Missing units.cellMeters or meta.axes, bad axes
            suffix, wrong schema, or malformed document
        FileNotFoundError: If a local document doesn't exist
        requests.RequestException: If a URL fetch fails
    """
    config = config if config is not None else Config()
    options = options if options is not None else config.default_options()

    parser = parse_scene(source, config=config, timeout=timeout)
    document = parser.document
    assert document is not None

    validate_structure(parser.raw, config)

    units = document.units
    index = GridIndex.from_document(document)

    clusters = FloorClusterer(mode=options.reconstruction).cluster(index)
    runs = WallCoalescer(mode=options.reconstruction).coalesce(index.horizontal, index.vertical)
    segments = InteriorClassifier(index).classify(runs)

    emitter = GeometryEmitter(
        units,
        options,
        seam_epsilon_cells=config.get_geometry_default("seam_epsilon_cells", 0.001),
    )
    floors = emitter.emit_floors(clusters, index)
    walls = emitter.emit_walls(segments)

    default_width = config.get_geometry_default("fallback_grid_width", 60)
    default_height = config.get_geometry_default("fallback_grid_height", 40)
    bounds = compute_bounds(index, units, document.meta.sim_limits, default_width, default_height)

    overlay = None
    if options.include_grid_overlay:
        grid_w, grid_h = grid_extent(document.meta.sim_limits, default_width, default_height)
        overlay = build_grid_overlay(
            grid_w, grid_h, units.cell_meters,
            lift=config.get_geometry_default("overlay_lift_meters", 0.001),
        )

    parity = ParityValidator().validate(index, units, document.meta.parity)

    offset = document.origin_offset
    logger.info(
        f"[SCENE:v1] tiles={len(index.tiles)}, edgesH={len(index.horizontal)}, "
        f"edgesV={len(index.vertical)}, hRuns={count_runs(runs, Orientation.HORIZONTAL)}, "
        f"vRuns={count_runs(runs, Orientation.VERTICAL)}, w×h={index.width}×{index.height}, "
        f"cell={units.cell_meters}m, originOffset=({offset.x},{offset.y})"
    )
    logger.success(f"Reconstructed {len(floors)} floors and {len(walls)} walls")

    return SceneResult(
        floors=floors,
        walls=walls,
        clusters=clusters,
        runs=runs,
        bounds=bounds,
        parity=parity,
        overlay=overlay,
        options=options,
        metadata=parser.metadata,
    )


def load_scene_with_params(
    source: SceneSource,
    params: Mapping[str, str],
    config: Optional[Config] = None,
    timeout: float = 30.0,
) -> SceneResult:
    """
    Load a scene with options given as external strings (align, inset, mode, grid).

    Unrecognized values fall back to defaults with a warning.
    """
    config = config if config is not None else Config()
    return load_scene(source, options=config.options_from_params(params), config=config, timeout=timeout)
