"""Polygon-with-holes representation.

A shape is an outer boundary plus any number of hole rings to be subtracted
from the filled area. It is the input type of every destruction algorithm.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from cutout.domain.polygon import Point, Polygon


@dataclass
class PolygonWithHoles:
    """An outer polygon with optional holes.

    Holes are expected to lie (fully or partially) inside the outer
    boundary. This is assumed, not enforced.

    Attributes:
        outer: Outer boundary
        holes: Hole rings subtracted from the outer area
    """

    outer: Polygon
    holes: list[Polygon] = field(default_factory=list)

    @classmethod
    def from_rings(cls, rings: Sequence[Polygon | Iterable[Point]]) -> "PolygonWithHoles":
        """Build from an ordered ring list where index 0 is the outer boundary.

        An empty ring list produces an empty outer polygon.
        """
        polygons = [r if isinstance(r, Polygon) else Polygon(points=list(r)) for r in rings]
        if not polygons:
            return cls(outer=Polygon(points=[]))
        return cls(outer=polygons[0], holes=polygons[1:])

    def rings(self) -> list[Polygon]:
        """Return the ordered ring list (outer first, then holes)."""
        return [self.outer, *self.holes]

    @property
    def is_empty(self) -> bool:
        return len(self.outer.points) == 0

    def net_area(self) -> float:
        """Filled area: outer area minus the area of every hole."""
        return self.outer.area() - sum(h.area() for h in self.holes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "outer": self.outer.to_dict(),
            "holes": [h.to_dict() for h in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PolygonWithHoles":
        """Deserialize from dictionary."""
        return cls(
            outer=Polygon.from_dict(data["outer"]),
            holes=[Polygon.from_dict(h) for h in data.get("holes", [])],
        )
