"""Core geometric types for polygon representation.

This module defines the fundamental geometric types used throughout cutout:
- Point: An immutable 2D point
- Bounds: An axis-aligned bounding rectangle
- Polygon: A closed ring of points
- WindingDirection: Enum for ring winding direction
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class WindingDirection(Enum):
    """Polygon winding direction.

    Cutout follows the host engine convention:
    - Clockwise rings (negative signed area) are solid
    - Counter-clockwise rings (positive signed area) are holes
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in pixel space
        y: Y coordinate in pixel space
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned bounding rectangle.

    Attributes:
        min_x: Left edge
        min_y: Top edge (smallest y)
        max_x: Right edge
        max_y: Bottom edge (largest y)
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "Bounds":
        """Calculate the bounds of a point sequence.

        Returns an empty rectangle at the origin for an empty sequence.
        """
        if not points:
            return cls(0.0, 0.0, 0.0, 0.0)

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def corners(self) -> list[Point]:
        """Return the four corners in ring order, starting at (min_x, min_y)."""
        return [
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        ]

    def grow(self, amount: float) -> "Bounds":
        """Grow (or shrink, for negative amounts) the rectangle on all sides.

        A shrink never produces a negative size: the collapsed axis keeps its
        new minimum with zero extent.
        """
        min_x = self.min_x - amount
        min_y = self.min_y - amount
        width = max(0.0, self.width + amount * 2.0)
        height = max(0.0, self.height + amount * 2.0)
        return Bounds(min_x, min_y, min_x + width, min_y + height)

    def intersects(self, other: "Bounds") -> bool:
        """Check whether two rectangles overlap with positive area."""
        return (
            self.min_x < other.max_x
            and self.max_x > other.min_x
            and self.min_y < other.max_y
            and self.max_y > other.min_y
        )

    def contains(self, point: Point) -> bool:
        """Check whether a point lies inside the rectangle (edges included)."""
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y


@dataclass
class Polygon:
    """A closed polygon ring.

    The last point connects implicitly back to the first; it is never
    repeated. The winding sign is meaningful (see WindingDirection).

    Attributes:
        points: List of points forming the ring
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False, compare=False)
    _cached_bbox: Bounds | None = field(default=None, repr=False, init=False, compare=False)

    @classmethod
    def from_tuples(cls, coords: Iterable[Sequence[float]]) -> "Polygon":
        """Build a polygon from (x, y) pairs."""
        return cls(points=[Point(float(c[0]), float(c[1])) for c in coords])

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        Negative area means clockwise (solid), positive means
        counter-clockwise (hole). Result is cached.
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3:
            self._cached_area = 0.0
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        self._cached_area = area / 2.0
        return self._cached_area

    def area(self) -> float:
        """Unsigned area of the ring."""
        return abs(self.signed_area())

    @property
    def winding(self) -> WindingDirection | None:
        """Winding direction, or None for degenerate (zero-area) rings."""
        area = self.signed_area()
        if area < 0:
            return WindingDirection.CLOCKWISE
        if area > 0:
            return WindingDirection.COUNTER_CLOCKWISE
        return None

    @property
    def is_hole(self) -> bool:
        return self.signed_area() > 0

    def bounding_box(self) -> Bounds:
        """Calculate bounding box of the ring. Result is cached."""
        if self._cached_bbox is None:
            self._cached_bbox = Bounds.from_points(self.points)
        return self._cached_bbox

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is inside the ring using ray casting.

        Edges use a half-open rule in y so that a ray passing exactly
        through a shared vertex is counted once.
        """
        n = len(self.points)
        if n < 3:
            return False

        inside = False
        j = n - 1

        for i in range(n):
            xi, yi = self.points[i].x, self.points[i].y
            xj, yj = self.points[j].x, self.points[j].y

            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside

            j = i

        return inside

    def reversed(self) -> "Polygon":
        """Return a copy with opposite winding."""
        return Polygon(points=list(reversed(self.points)))

    def copy(self) -> "Polygon":
        return Polygon(points=list(self.points))

    def to_tuples(self) -> list[tuple[float, float]]:
        return [p.to_tuple() for p in self.points]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        """Deserialize from dictionary."""
        return cls(points=[Point.from_dict(p) for p in data["points"]])
