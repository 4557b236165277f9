"""
Core data models for scene3d.

All models use Pydantic for validation and serialization. Document models
accept the camelCase keys of the scene.3d.v1 JSON format through aliases.
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from scene3d.core.config import PipelineOptions


SCENE_SCHEMA = "scene.3d.v1"
AXES_SUFFIX = "_XY_ground"

Coordinate = Tuple[int, int]


class _DocumentModel(BaseModel):
    """Base for models parsed from the input document."""
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Input document
# ---------------------------------------------------------------------------

class ParityBlock(_DocumentModel):
    """
    Declared expected counts embedded in the document metadata.

    Every field is optional; an absent field is reported as a mismatch by
    the parity check rather than rejecting the document.
    """
    tiles: Optional[int] = None
    edges_h: Optional[int] = Field(default=None, alias="edgesH")
    edges_v: Optional[int] = Field(default=None, alias="edgesV")
    floor_area: Optional[float] = Field(default=None, alias="floorArea")
    edge_len_h: Optional[float] = Field(default=None, alias="edgeLenH")
    edge_len_v: Optional[float] = Field(default=None, alias="edgeLenV")


class SimLimits(_DocumentModel):
    """Declared maximum grid extent of the authoring editor."""
    max_tiles_x: Optional[int] = Field(default=None, alias="maxTilesX")
    max_tiles_y: Optional[int] = Field(default=None, alias="maxTilesY")


class SceneMeta(_DocumentModel):
    """Document metadata block."""
    schema_id: str = Field(alias="schema")
    axes: str
    version: Optional[str] = None
    name: Optional[str] = None
    parity: Optional[ParityBlock] = None
    sim_limits: Optional[SimLimits] = Field(default=None, alias="simLimits")


class Units(_DocumentModel):
    """Scale from lattice units to world metres."""
    cell_meters: float = Field(gt=0.0, alias="cellMeters")
    wall_height_meters: float = Field(alias="wallHeightMeters")
    wall_thickness_meters: float = Field(alias="wallThicknessMeters")
    floor_thickness_meters: float = Field(alias="floorThicknessMeters")


class TileSection(_DocumentModel):
    floor: List[Coordinate] = Field(default_factory=list)


class EdgeSection(_DocumentModel):
    horizontal: List[Coordinate] = Field(default_factory=list)
    vertical: List[Coordinate] = Field(default_factory=list)


class OriginOffset(_DocumentModel):
    """Integer translation applied to every raw coordinate."""
    x: int = 0
    # Older exports wrote the ground-plane depth axis as "z"
    y: int = Field(default=0, validation_alias=AliasChoices("y", "z"))


class SceneDocument(_DocumentModel):
    """A parsed scene.3d.v1 document."""
    meta: SceneMeta
    units: Units
    tiles: TileSection = Field(default_factory=TileSection)
    edges: EdgeSection = Field(default_factory=EdgeSection)
    origin_offset: OriginOffset = Field(default_factory=OriginOffset, alias="originOffset")


class SceneMetadata(BaseModel):
    """Metadata about the source document."""
    source: str
    schema_id: Optional[str] = None
    axes: Optional[str] = None
    version: Optional[str] = None
    name: Optional[str] = None

    # Quality metrics
    has_parity: bool = False
    has_sim_limits: bool = False


class ValidationResult(BaseModel):
    """Result of fail-fast validation."""
    is_valid: bool
    critical_errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    metadata: SceneMetadata

    def should_abort(self) -> bool:
        """Check if critical errors require aborting."""
        return len(self.critical_errors) > 0


# ---------------------------------------------------------------------------
# Lattice-space entities
# ---------------------------------------------------------------------------

class NormalizedLayout(BaseModel):
    """Floor tiles re-based so the minimum tile sits at (0, 0)."""
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    cells: List[Coordinate] = Field(default_factory=list)
    shift_x: int = 0  # subtracted from every offset coordinate
    shift_y: int = 0

    @property
    def is_empty(self) -> bool:
        return len(self.cells) == 0


class FloorCluster(BaseModel):
    """Axis-aligned rectangle of floor tiles, bounds inclusive."""
    model_config = ConfigDict(frozen=True)

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def area(self) -> int:
        return self.width * self.height

    def cells(self) -> Iterator[Coordinate]:
        """Iterate covered tiles in row-major order."""
        for y in range(self.min_y, self.max_y + 1):
            for x in range(self.min_x, self.max_x + 1):
                yield (x, y)

    def __str__(self) -> str:
        return f"FloorCluster(({self.min_x},{self.min_y}) {self.width}x{self.height})"


class Orientation(str, Enum):
    """Wall edge orientation on the lattice."""
    HORIZONTAL = "H"  # spans (x, y) -> (x + 1, y), fixed coordinate is y
    VERTICAL = "V"    # spans (x, y) -> (x, y + 1), fixed coordinate is x


class WallRun(BaseModel):
    """Maximal contiguous run of same-orientation edges, span [start, end)."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    fixed: int
    orientation: Orientation

    @field_validator("end")
    @classmethod
    def validate_span(cls, v: int, info: ValidationInfo) -> int:
        start = info.data.get("start")
        if start is not None and v <= start:
            raise ValueError("Run end must be greater than start")
        return v

    @property
    def length(self) -> int:
        return self.end - self.start

    def edges(self) -> Iterator[Coordinate]:
        """Iterate the unit edges of the run as (x, y) anchors."""
        for value in range(self.start, self.end):
            if self.orientation == Orientation.HORIZONTAL:
                yield (value, self.fixed)
            else:
                yield (self.fixed, value)

    def __str__(self) -> str:
        axis = "y" if self.orientation == Orientation.HORIZONTAL else "x"
        return f"WallRun({self.orientation.value} {axis}={self.fixed} [{self.start},{self.end}))"


class WallSide(str, Enum):
    """Which side of an edge has floor coverage."""
    BELOW = "below"  # horizontal, tile at (x, y - 1) only
    ABOVE = "above"  # horizontal, tile at (x, y) only
    LEFT = "left"    # vertical, tile at (x - 1, y) only
    RIGHT = "right"  # vertical, tile at (x, y) only
    BOTH = "both"    # partition wall
    NONE = "none"    # orphaned edge

    @property
    def is_flush(self) -> bool:
        return self not in (WallSide.BOTH, WallSide.NONE)


class WallSegment(BaseModel):
    """Part of a run whose edges share one side classification."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    fixed: int
    orientation: Orientation
    side: WallSide

    @property
    def length(self) -> int:
        return self.end - self.start


# ---------------------------------------------------------------------------
# World-space output
# ---------------------------------------------------------------------------

class Vector3(BaseModel):
    """3D vector in world space (Y up, ground plane XZ)."""
    x: float
    y: float
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


class MeshKind(str, Enum):
    FLOOR = "floor"
    WALL = "wall"


class MeshDescriptor(BaseModel):
    """Box primitive ready for rendering."""
    kind: MeshKind
    name: str
    dimensions: Vector3  # (width, height, depth) in metres
    center: Vector3

    def min_corner(self) -> Vector3:
        return Vector3(
            x=self.center.x - self.dimensions.x / 2,
            y=self.center.y - self.dimensions.y / 2,
            z=self.center.z - self.dimensions.z / 2,
        )

    def max_corner(self) -> Vector3:
        return Vector3(
            x=self.center.x + self.dimensions.x / 2,
            y=self.center.y + self.dimensions.y / 2,
            z=self.center.z + self.dimensions.z / 2,
        )


class Bounds(BaseModel):
    """Axis-aligned world bounds."""
    min: Vector3
    max: Vector3
    center: Vector3

    @classmethod
    def from_corners(cls, min_corner: Vector3, max_corner: Vector3) -> "Bounds":
        center = Vector3(
            x=(min_corner.x + max_corner.x) / 2,
            y=(min_corner.y + max_corner.y) / 2,
            z=(min_corner.z + max_corner.z) / 2,
        )
        return cls(min=min_corner, max=max_corner, center=center)

    def size(self) -> Vector3:
        return Vector3(
            x=self.max.x - self.min.x,
            y=self.max.y - self.min.y,
            z=self.max.z - self.min.z,
        )


class SceneBounds(BaseModel):
    """Content bounds (tile coverage) and environment bounds (grid limit)."""
    content: Bounds
    environment: Bounds


class ParityStatus(str, Enum):
    OK = "ok"
    MISMATCH = "mismatch"
    UNAVAILABLE = "unavailable"


class ParityMismatch(BaseModel):
    field: str
    expected: Optional[float] = None  # None when the document omits the field
    actual: float

    def __str__(self) -> str:
        expected = "nothing" if self.expected is None else f"{self.expected:g}"
        return f"{self.field}: expected {expected}, got {self.actual:g}"


class ParityReport(BaseModel):
    """Outcome of the declared-count cross-check. Diagnostic only."""
    status: ParityStatus
    actual: Dict[str, float] = Field(default_factory=dict)
    mismatches: List[ParityMismatch] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ParityStatus.OK

    def failed_fields(self) -> List[str]:
        return [m.field for m in self.mismatches]


class OverlayLine(BaseModel):
    start: Vector3
    end: Vector3


class GridOverlay(BaseModel):
    """Ghost grid line segments covering the declared grid extent."""
    width: int
    height: int
    lines: List[OverlayLine] = Field(default_factory=list)


class SceneResult(BaseModel):
    """Everything a single load produces."""
    floors: List[MeshDescriptor] = Field(default_factory=list)
    walls: List[MeshDescriptor] = Field(default_factory=list)
    clusters: List[FloorCluster] = Field(default_factory=list)
    runs: List[WallRun] = Field(default_factory=list)
    bounds: SceneBounds
    parity: ParityReport
    overlay: Optional[GridOverlay] = None
    options: PipelineOptions
    metadata: SceneMetadata

    @property
    def meshes(self) -> List[MeshDescriptor]:
        return self.floors + self.walls
