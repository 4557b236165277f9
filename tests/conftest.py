"""
Shared test fixtures for scene reconstruction tests.
"""
from typing import Dict, Iterable, Optional, Tuple

import pytest
from loguru import logger

from scene3d.core.config import Config, PipelineOptions
from scene3d.core.models import OriginOffset, Units
from scene3d.spatial.grid_index import GridIndex


def make_scene(
    floor: Iterable[Tuple[int, int]] = (),
    horizontal: Iterable[Tuple[int, int]] = (),
    vertical: Iterable[Tuple[int, int]] = (),
    offset: Tuple[int, int] = (0, 0),
    cell: float = 1.0,
    parity: Optional[Dict[str, float]] = None,
    sim_limits: Optional[Dict[str, int]] = None,
) -> dict:
    """Build a scene.3d.v1 document as it would come out of json.load."""
    meta = {
        "schema": "scene.3d.v1",
        "version": "1.0",
        "name": "test-layout",
        "axes": "right_handed_XY_ground",
    }
    if parity is not None:
        meta["parity"] = parity
    if sim_limits is not None:
        meta["simLimits"] = sim_limits

    return {
        "meta": meta,
        "units": {
            "cellMeters": cell,
            "wallHeightMeters": 3.0,
            "wallThicknessMeters": 0.2,
            "floorThicknessMeters": 0.1,
        },
        "tiles": {"floor": [list(c) for c in floor]},
        "edges": {
            "horizontal": [list(c) for c in horizontal],
            "vertical": [list(c) for c in vertical],
        },
        "originOffset": {"x": offset[0], "y": offset[1]},
    }


def room_tiles(width: int, height: int):
    return [(x, y) for y in range(height) for x in range(width)]


def room_walls(width: int, height: int):
    """Perimeter edges of a width x height room anchored at (0, 0)."""
    horizontal = [(x, 0) for x in range(width)] + [(x, height) for x in range(width)]
    vertical = [(0, y) for y in range(height)] + [(width, y) for y in range(height)]
    return horizontal, vertical


@pytest.fixture
def units():
    """Unit block with a 1 m cell."""
    return Units(
        cell_meters=1.0,
        wall_height_meters=3.0,
        wall_thickness_meters=0.2,
        floor_thickness_meters=0.1,
    )


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def default_options():
    return PipelineOptions()


@pytest.fixture
def make_index():
    """Factory for GridIndex instances from plain coordinate lists."""
    def _make(floor=(), horizontal=(), vertical=(), offset=(0, 0)):
        return GridIndex(
            floor=list(floor),
            horizontal=list(horizontal),
            vertical=list(vertical),
            origin_offset=OriginOffset(x=offset[0], y=offset[1]),
        )
    return _make


@pytest.fixture
def room_scene():
    """A 3x2 room enclosed by perimeter walls."""
    horizontal, vertical = room_walls(3, 2)
    return make_scene(floor=room_tiles(3, 2), horizontal=horizontal, vertical=vertical)


@pytest.fixture
def log_records():
    """Capture loguru records as (level, message) tuples."""
    records = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)
