"""Static algorithm registry.

Maps (family, key) to the algorithm's configuration model, a factory that
builds the algorithm from a configuration, and parameter metadata derived
from the model's fields (name, type, range, step). The registry is built
once at import time and is read-only.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from cutout.config import (
    MarchingSquaresConfig,
    MooreNeighborConfig,
    MultiSliceConfig,
    OutwardSmoothConfig,
    RDPConfig,
    ReumannWitkamConfig,
    SliceConfig,
    VisvalingamWhyattConfig,
    VoronoiConfig,
)
from cutout.core.marching_squares import MarchingSquares
from cutout.core.moore_neighbor import MooreNeighbor
from cutout.core.simplify import RamerDouglasPeucker, ReumannWitkam, VisvalingamWhyatt
from cutout.core.slice import MultiSliceFracture, SliceFracture
from cutout.core.smooth import OutwardSmoother
from cutout.core.voronoi import VoronoiFracture
from cutout.exceptions import ConfigurationError, UnknownAlgorithmError


class AlgorithmFamily(str, Enum):
    CONTOUR = "contour"
    SIMPLIFY = "simplify"
    SMOOTH = "smooth"
    DESTRUCTION = "destruction"


@dataclass(frozen=True)
class ParameterSpec:
    """Introspectable description of one tunable parameter."""

    name: str
    type_name: str
    default: Any
    minimum: float | None = None
    maximum: float | None = None
    step: float | None = None
    description: str | None = None


@dataclass(frozen=True)
class AlgorithmEntry:
    """One registered algorithm."""

    family: AlgorithmFamily
    key: str
    display_name: str
    config_model: type[BaseModel]
    factory: Callable[[Any], Any]
    parameters: tuple[ParameterSpec, ...]

    def create(self, config: BaseModel | None = None) -> Any:
        """Build the algorithm, using the model's defaults if no config is given."""
        if config is None:
            config = self.config_model()
        elif not isinstance(config, self.config_model):
            raise ConfigurationError(
                f"{self.key} expects {self.config_model.__name__}, got {type(config).__name__}"
            )
        return self.factory(config)


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def _parameter_spec(name: str, field: FieldInfo) -> ParameterSpec:
    minimum = maximum = None
    for constraint in field.metadata:
        if getattr(constraint, "ge", None) is not None:
            minimum = constraint.ge
        elif getattr(constraint, "gt", None) is not None:
            minimum = constraint.gt
        if getattr(constraint, "le", None) is not None:
            maximum = constraint.le
        elif getattr(constraint, "lt", None) is not None:
            maximum = constraint.lt

    extra = field.json_schema_extra if isinstance(field.json_schema_extra, dict) else {}
    default = field.get_default(call_default_factory=True)

    return ParameterSpec(
        name=name,
        type_name=_type_name(field.annotation),
        default=default,
        minimum=minimum,
        maximum=maximum,
        step=extra.get("step"),
        description=field.description,
    )


def parameters_of(model: type[BaseModel]) -> tuple[ParameterSpec, ...]:
    """Describe the tunable fields of a configuration model (``kind`` excluded)."""
    return tuple(
        _parameter_spec(name, field) for name, field in model.model_fields.items() if name != "kind"
    )


def _entry(
    family: AlgorithmFamily,
    display_name: str,
    config_model: type[BaseModel],
    factory: Callable[[Any], Any],
) -> AlgorithmEntry:
    key = config_model.model_fields["kind"].default
    return AlgorithmEntry(
        family=family,
        key=key,
        display_name=display_name,
        config_model=config_model,
        factory=factory,
        parameters=parameters_of(config_model),
    )


_ENTRIES = (
    _entry(AlgorithmFamily.CONTOUR, "Moore-Neighbor", MooreNeighborConfig, MooreNeighbor),
    _entry(AlgorithmFamily.CONTOUR, "Marching Squares", MarchingSquaresConfig, MarchingSquares),
    _entry(AlgorithmFamily.SIMPLIFY, "Ramer-Douglas-Peucker", RDPConfig, RamerDouglasPeucker),
    _entry(AlgorithmFamily.SIMPLIFY, "Reumann-Witkam", ReumannWitkamConfig, ReumannWitkam),
    _entry(AlgorithmFamily.SIMPLIFY, "Visvalingam-Whyatt", VisvalingamWhyattConfig, VisvalingamWhyatt),
    _entry(AlgorithmFamily.SMOOTH, "Outward Smoothing", OutwardSmoothConfig, OutwardSmoother),
    _entry(AlgorithmFamily.DESTRUCTION, "Voronoi", VoronoiConfig, VoronoiFracture),
    _entry(AlgorithmFamily.DESTRUCTION, "Slice", SliceConfig, SliceFracture),
    _entry(AlgorithmFamily.DESTRUCTION, "Multi-Slice", MultiSliceConfig, MultiSliceFracture),
)

REGISTRY: Mapping[tuple[AlgorithmFamily, str], AlgorithmEntry] = MappingProxyType(
    {(e.family, e.key): e for e in _ENTRIES}
)


def get_entry(family: AlgorithmFamily | str, key: str) -> AlgorithmEntry:
    """Look up a registered algorithm.

    Raises:
        UnknownAlgorithmError: If no such algorithm is registered
    """
    try:
        family = AlgorithmFamily(family)
    except ValueError as e:
        raise UnknownAlgorithmError(str(family), key) from e

    entry = REGISTRY.get((family, key))
    if entry is None:
        raise UnknownAlgorithmError(family.value, key)
    return entry


def list_algorithms(family: AlgorithmFamily | str | None = None) -> list[AlgorithmEntry]:
    """List registered algorithms, optionally for one family, in registration order."""
    if family is None:
        return list(REGISTRY.values())
    family = AlgorithmFamily(family)
    return [e for e in REGISTRY.values() if e.family == family]


def create(family: AlgorithmFamily | str, config: BaseModel) -> Any:
    """Build the algorithm a configuration selects through its ``kind``."""
    return get_entry(family, getattr(config, "kind", "")).create(config)
