"""
Lattice index for floor tiles and wall edges.

Applies the document origin offset, re-bases every coordinate so the
minimum floor tile sits at (0, 0), and answers floor membership queries
in O(1).
"""

from typing import FrozenSet, Iterable, List, Optional, Tuple

from loguru import logger

from scene3d.core.models import (
    Coordinate,
    NormalizedLayout,
    OriginOffset,
    SceneDocument,
)


def _dedupe(coords: List[Coordinate], label: str) -> List[Coordinate]:
    """Drop repeated coordinates, keeping the first occurrence in order."""
    seen = set()
    unique: List[Coordinate] = []
    for x, y in coords:
        key = (int(x), int(y))
        if key in seen:
            continue
        seen.add(key)
        unique.append(key)

    dropped = len(coords) - len(unique)
    if dropped:
        logger.warning(f"Ignored {dropped} duplicate {label} coordinate(s)")
    return unique


def _translate(coords: Iterable[Coordinate], dx: int, dy: int) -> List[Coordinate]:
    return [(x + dx, y + dy) for x, y in coords]


class GridIndex:
    """
    Normalized view of a scene lattice.

    Tiles and edges share one coordinate frame: offset first, then the
    minimum of the offset floor tiles is subtracted from every tile and
    edge. With no floor tiles the layout degenerates to an empty 1x1
    layout and nothing is subtracted.
    """

    def __init__(
        self,
        floor: Iterable[Coordinate],
        horizontal: Iterable[Coordinate] = (),
        vertical: Iterable[Coordinate] = (),
        origin_offset: Optional[OriginOffset] = None,
    ):
        """
        Initialize grid index.

        Args:
            floor: Raw floor tile coordinates
            horizontal: Raw horizontal edge anchors
            vertical: Raw vertical edge anchors
            origin_offset: Translation applied before normalization
        """
        offset = origin_offset if origin_offset is not None else OriginOffset()
        self.origin_offset = offset

        offset_tiles = _translate(_dedupe(list(floor), "floor tile"), offset.x, offset.y)
        offset_h = _translate(_dedupe(list(horizontal), "horizontal edge"), offset.x, offset.y)
        offset_v = _translate(_dedupe(list(vertical), "vertical edge"), offset.x, offset.y)

        self.layout = self._normalize(offset_tiles)
        shift_x, shift_y = self.layout.shift_x, self.layout.shift_y

        self.tiles: List[Coordinate] = list(self.layout.cells)
        self.horizontal: List[Coordinate] = _translate(offset_h, -shift_x, -shift_y)
        self.vertical: List[Coordinate] = _translate(offset_v, -shift_x, -shift_y)

        self._tile_set: FrozenSet[Coordinate] = frozenset(self.tiles)

        logger.debug(
            f"Indexed {len(self.tiles)} tiles, {len(self.horizontal)} H edges, "
            f"{len(self.vertical)} V edges on {self.width}x{self.height} layout"
        )

    @classmethod
    def from_document(cls, document: SceneDocument) -> "GridIndex":
        """Build an index from a parsed scene document."""
        return cls(
            floor=document.tiles.floor,
            horizontal=document.edges.horizontal,
            vertical=document.edges.vertical,
            origin_offset=document.origin_offset,
        )

    @staticmethod
    def _normalize(offset_tiles: List[Coordinate]) -> NormalizedLayout:
        if not offset_tiles:
            return NormalizedLayout(width=1, height=1, cells=[])

        min_x = min(x for x, _ in offset_tiles)
        max_x = max(x for x, _ in offset_tiles)
        min_y = min(y for _, y in offset_tiles)
        max_y = max(y for _, y in offset_tiles)

        return NormalizedLayout(
            width=max_x - min_x + 1,
            height=max_y - min_y + 1,
            cells=[(x - min_x, y - min_y) for x, y in offset_tiles],
            shift_x=min_x,
            shift_y=min_y,
        )

    @property
    def width(self) -> int:
        return self.layout.width

    @property
    def height(self) -> int:
        return self.layout.height

    @property
    def normalization(self) -> Tuple[int, int]:
        """Minimum offset tile coordinate subtracted during normalization."""
        return (self.layout.shift_x, self.layout.shift_y)

    @property
    def tile_set(self) -> FrozenSet[Coordinate]:
        return self._tile_set

    def in_extent(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def has_floor(self, x: int, y: int) -> bool:
        """True if a floor tile exists at the normalized coordinate."""
        return (x, y) in self._tile_set

    def __len__(self) -> int:
        return len(self.tiles)

    def __contains__(self, coord: Coordinate) -> bool:
        return tuple(coord) in self._tile_set
