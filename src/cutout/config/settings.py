"""Configuration settings for cutout.

Every algorithm has its own parameter model carrying only the fields it
uses. Models in the same family share a ``kind`` discriminator so they can
be combined into tagged unions (e.g. ``SimplifyConfig``) and selected by
value instead of by runtime property lookup.

Numeric fields declare ``ge``/``le`` bounds and, where useful to an editor
slider, a ``step`` hint in ``json_schema_extra``.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


def _step(value: float) -> dict[str, float]:
    return {"step": value}


# ---------------------------------------------------------------------------
# Contour extraction
# ---------------------------------------------------------------------------


class _ContourBase(BaseModel):
    alpha_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Pixels with alpha at or above this value are solid",
        json_schema_extra=_step(0.01),
    )
    max_resolution: int = Field(
        default=0,
        ge=0,
        le=16384,
        description="Downscale so the larger image side fits this size (0 = no limit)",
        json_schema_extra=_step(1),
    )


class MooreNeighborConfig(_ContourBase):
    """Moore-Neighbor boundary tracing (single shape)."""

    kind: Literal["moore_neighbor"] = "moore_neighbor"


class MarchingSquaresConfig(_ContourBase):
    """Marching Squares tracing (multiple shapes)."""

    kind: Literal["marching_squares"] = "marching_squares"


ContourConfig = Annotated[
    Union[MooreNeighborConfig, MarchingSquaresConfig],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------


class RDPConfig(BaseModel):
    """Ramer-Douglas-Peucker simplification."""

    kind: Literal["rdp"] = "rdp"
    epsilon: float = Field(
        default=1.0,
        ge=0.0,
        le=100.0,
        description="Maximum perpendicular deviation of removed points",
        json_schema_extra=_step(0.1),
    )


class ReumannWitkamConfig(BaseModel):
    """Reumann-Witkam corridor simplification."""

    kind: Literal["reumann_witkam"] = "reumann_witkam"
    epsilon: float = Field(
        default=1.0,
        ge=0.0,
        le=100.0,
        description="Half-width of the corridor around the key line",
        json_schema_extra=_step(0.1),
    )
    start_index: int = Field(
        default=0,
        ge=0,
        description="Vertex the forward pass starts from",
        json_schema_extra=_step(1),
    )


class VWStopCriterion(str, Enum):
    """When Visvalingam-Whyatt stops removing points."""

    POINT_COUNT = "point_count"
    PROPORTION = "proportion"
    AREA = "area"


class VisvalingamWhyattConfig(BaseModel):
    """Visvalingam-Whyatt effective-area simplification."""

    kind: Literal["visvalingam_whyatt"] = "visvalingam_whyatt"
    stop_criterion: VWStopCriterion = Field(
        default=VWStopCriterion.AREA,
        description="Stopping rule",
    )
    min_area: float = Field(
        default=0.5,
        ge=0.0,
        le=10000.0,
        description="Stop once the smallest effective area exceeds this value",
        json_schema_extra=_step(0.1),
    )
    target_points: int = Field(
        default=0,
        ge=0,
        description="Stop at this many points (point_count criterion)",
        json_schema_extra=_step(1),
    )
    target_proportion: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Stop at this fraction of the original count (proportion criterion)",
        json_schema_extra=_step(0.01),
    )


SimplifyConfig = Annotated[
    Union[RDPConfig, ReumannWitkamConfig, VisvalingamWhyattConfig],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------


class OutwardSmoothConfig(BaseModel):
    """Outward expansion followed by constrained Laplacian smoothing."""

    kind: Literal["outward"] = "outward"
    expansion_radius: float = Field(
        default=2.0,
        ge=0.0,
        le=100.0,
        description="Distance every vertex is pushed outward before smoothing",
        json_schema_extra=_step(0.1),
    )
    miter_limit: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Maximum miter length multiplier at acute corners",
        json_schema_extra=_step(0.1),
    )
    iterations: int = Field(
        default=3,
        ge=0,
        le=50,
        description="Number of smoothing rounds",
        json_schema_extra=_step(1),
    )
    smooth_strength: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="How far each vertex moves toward its neighbours' midpoint",
        json_schema_extra=_step(0.01),
    )
    use_density: bool = Field(
        default=True,
        description="Smooth harder where vertices are unusually close together",
    )
    density_strength: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of the density factor",
        json_schema_extra=_step(0.01),
    )
    preserve_corners: bool = Field(
        default=True,
        description="Leave sharp corners in place",
    )
    corner_threshold: float = Field(
        default=60.0,
        ge=0.0,
        le=180.0,
        description="Interior angles below this many degrees count as corners",
        json_schema_extra=_step(1.0),
    )
    constrain_smoothing: bool = Field(
        default=True,
        description="Reject moves that would re-enter the original polygon",
    )


# ---------------------------------------------------------------------------
# Destruction: seed patterns
# ---------------------------------------------------------------------------


class RandomSeeds(BaseModel):
    """Uniform rejection sampling."""

    kind: Literal["random"] = "random"


class GridSeeds(BaseModel):
    """Evenly spaced rows and columns with per-cell jitter."""

    kind: Literal["grid"] = "grid"
    rows: int = Field(default=3, ge=1, le=64, json_schema_extra=_step(1))
    cols: int = Field(default=3, ge=1, le=64, json_schema_extra=_step(1))
    jitter: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Jitter as a fraction of the cell size",
        json_schema_extra=_step(0.01),
    )


class _RingSeeds(BaseModel):
    origin: tuple[float, float] | None = Field(
        default=None,
        description="Pattern centre (default: polygon bounds centre)",
    )
    ring_count: int = Field(default=3, ge=1, le=32, json_schema_extra=_step(1))
    ring_size: float | None = Field(
        default=None,
        gt=0.0,
        description="Ring spacing (default: max radius / ring count)",
        json_schema_extra=_step(1.0),
    )
    points_per_ring: int = Field(default=8, ge=3, le=128, json_schema_extra=_step(1))
    radial_variation: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Angular and radial jitter",
        json_schema_extra=_step(0.01),
    )


class RadialSeeds(_RingSeeds):
    """Concentric rings, denser toward the outside."""

    kind: Literal["radial"] = "radial"


class SpiderwebSeeds(_RingSeeds):
    """Centre point plus spokes crossing concentric rings."""

    kind: Literal["spiderweb"] = "spiderweb"


class PoissonSeeds(BaseModel):
    """Poisson-disk dart throwing with an active list."""

    kind: Literal["poisson"] = "poisson"
    attempts: int = Field(
        default=30,
        ge=1,
        le=200,
        description="Candidates tried around an active point before retiring it",
        json_schema_extra=_step(1),
    )


SeedPattern = Annotated[
    Union[RandomSeeds, GridSeeds, RadialSeeds, SpiderwebSeeds, PoissonSeeds],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Destruction: slice patterns
# ---------------------------------------------------------------------------


class RadialSlices(BaseModel):
    """Cuts through a common origin at even angles."""

    kind: Literal["radial"] = "radial"
    slice_count: int = Field(default=6, ge=1, le=64, json_schema_extra=_step(1))
    origin: tuple[float, float] | None = Field(
        default=None,
        description="Centre of the cuts (default: polygon bounds centre)",
    )
    randomness: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Angular jitter as a fraction of the angle step",
        json_schema_extra=_step(0.01),
    )


class ParallelSlices(BaseModel):
    """Evenly spaced cuts at a common angle."""

    kind: Literal["parallel"] = "parallel"
    slice_count: int = Field(default=4, ge=1, le=256, json_schema_extra=_step(1))
    angle: float = Field(
        default=0.0,
        ge=-360.0,
        le=360.0,
        description="Cut direction in degrees",
        json_schema_extra=_step(1.0),
    )
    angle_randomness: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Per-cut angular jitter (1.0 = up to 45 degrees)",
        json_schema_extra=_step(0.01),
    )


class GridSlices(BaseModel):
    """Vertical and horizontal cuts with positional and angular jitter."""

    kind: Literal["grid"] = "grid"
    vertical_slices: int = Field(default=2, ge=0, le=64, json_schema_extra=_step(1))
    horizontal_slices: int = Field(default=2, ge=0, le=64, json_schema_extra=_step(1))
    vertical_offset: float = Field(
        default=0.0,
        description="Shift of the vertical cuts from the left bound",
        json_schema_extra=_step(1.0),
    )
    horizontal_offset: float = Field(
        default=0.0,
        description="Shift of the horizontal cuts from the top bound",
        json_schema_extra=_step(1.0),
    )
    vertical_jitter: float = Field(default=0.0, ge=0.0, le=1.0, json_schema_extra=_step(0.01))
    horizontal_jitter: float = Field(default=0.0, ge=0.0, le=1.0, json_schema_extra=_step(0.01))
    vertical_angle_randomness: float = Field(
        default=0.0, ge=0.0, le=1.0, json_schema_extra=_step(0.01)
    )
    horizontal_angle_randomness: float = Field(
        default=0.0, ge=0.0, le=1.0, json_schema_extra=_step(0.01)
    )


class ChaoticSlices(BaseModel):
    """Cuts at random angles through random offsets."""

    kind: Literal["chaotic"] = "chaotic"
    slice_count: int = Field(default=5, ge=1, le=64, json_schema_extra=_step(1))


class ManualSlices(BaseModel):
    """Caller-supplied cut segments."""

    kind: Literal["manual"] = "manual"
    segments: list[tuple[tuple[float, float], tuple[float, float]]] = Field(
        default_factory=list,
        description="Cut segments as ((x1, y1), (x2, y2))",
    )


SlicePattern = Annotated[
    Union[RadialSlices, ParallelSlices, GridSlices, ChaoticSlices, ManualSlices],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Destruction: algorithms
# ---------------------------------------------------------------------------


class _FractureBase(BaseModel):
    seed: int = Field(
        default=0,
        description="Random seed; randomize per event for variation",
    )
    min_area: float = Field(
        default=1.0,
        ge=0.0,
        description="Polygons smaller than this are not fractured",
        json_schema_extra=_step(0.1),
    )


class VoronoiConfig(_FractureBase):
    """Voronoi fracture."""

    kind: Literal["voronoi"] = "voronoi"
    fragment_count: int = Field(default=10, ge=2, le=1000, json_schema_extra=_step(1))
    min_cell_distance: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Minimum seed spacing as a fraction of the smaller bounds side",
        json_schema_extra=_step(0.01),
    )
    edge_padding: float = Field(
        default=0.0,
        ge=0.0,
        description="Inset of the seed sampling area from the bounds",
        json_schema_extra=_step(1.0),
    )
    pattern: SeedPattern = Field(default_factory=RandomSeeds)


class SliceConfig(_FractureBase):
    """Single-line slice."""

    kind: Literal["slice"] = "slice"
    line_start: tuple[float, float] = (0.0, 0.0)
    line_end: tuple[float, float] = (0.0, 0.0)


class MultiSliceConfig(_FractureBase):
    """Sequential cuts from a pattern or a manual list."""

    kind: Literal["multi_slice"] = "multi_slice"
    pattern: SlicePattern = Field(default_factory=ParallelSlices)


FractureConfig = Annotated[
    Union[VoronoiConfig, SliceConfig, MultiSliceConfig],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class CutoutSettings(BaseModel):
    """Main application settings.

    Describes the full pipeline: contour -> simplify -> smooth ->
    post_simplify, with an optional fracture step. Setting a stage to
    None skips it.
    """

    contour: ContourConfig = Field(default_factory=MarchingSquaresConfig)
    simplify: SimplifyConfig | None = Field(default_factory=RDPConfig)
    smooth: OutwardSmoothConfig | None = Field(default_factory=OutwardSmoothConfig)
    post_simplify: SimplifyConfig | None = Field(default_factory=lambda: RDPConfig(epsilon=0.5))
    fracture: FractureConfig | None = None
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> CutoutSettings:
    """Get default application settings."""
    return CutoutSettings()
