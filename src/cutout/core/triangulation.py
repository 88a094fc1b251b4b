"""Polygon triangulation with a chain of fallbacks.

Strategies are tried in order, moving on only when the previous one
produced no triangles:

1. Constrained Delaunay triangulation of the ring as given
2. The same on the reversed ring
3. The same on a cleaned copy (near-duplicate vertices merged)
4. Ear clipping on the cleaned copy
5. A fan over the convex hull of the points

The last tier always succeeds for non-collinear input but may not follow
the true outline of a concave polygon.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import shapely
from shapely.geometry import MultiPoint
from shapely.geometry import Polygon as ShapelyPolygon

from cutout.core.geometry import cross, distance, signed_area
from cutout.domain import Point
from cutout.exceptions import TriangulationError

logger = logging.getLogger(__name__)

MERGE_DISTANCE = 1e-3


@dataclass
class Triangulation:
    """Triangles over a vertex list.

    Attributes:
        vertices: Vertices referenced by ``indices``
        indices: Flat list of vertex indices, three per triangle
        method: Name of the strategy that produced the triangles
    """

    vertices: list[Point] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    method: str = "none"

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def triangles(self) -> list[tuple[Point, Point, Point]]:
        return [
            (self.vertices[self.indices[i]], self.vertices[self.indices[i + 1]], self.vertices[self.indices[i + 2]])
            for i in range(0, len(self.indices), 3)
        ]

    def area(self) -> float:
        """Total unsigned area of all triangles."""
        return sum(abs(signed_area(list(tri))) for tri in self.triangles())


def clean_points(points: Sequence[Point], merge_distance: float = MERGE_DISTANCE) -> list[Point]:
    """Merge consecutive points closer than ``merge_distance``.

    The closing pair (last, first) is merged as well.
    """
    cleaned: list[Point] = []
    for p in points:
        if cleaned and distance(cleaned[-1], p) < merge_distance:
            continue
        cleaned.append(p)
    while len(cleaned) > 1 and distance(cleaned[-1], cleaned[0]) < merge_distance:
        cleaned.pop()
    return cleaned


def _constrained_delaunay(points: Sequence[Point]) -> list[int]:
    if len(points) < 3:
        return []
    poly = ShapelyPolygon([(p.x, p.y) for p in points])
    if not poly.is_valid or poly.area <= 0:
        return []

    lookup = {(p.x, p.y): i for i, p in enumerate(points)}
    indices: list[int] = []
    for tri in shapely.constrained_delaunay_triangles(poly).geoms:
        coords = list(tri.exterior.coords)[:3]
        try:
            indices.extend(lookup[(x, y)] for x, y in coords)
        except KeyError:
            # Triangulator introduced a vertex we cannot index
            return []
    return indices


def _point_in_triangle(p: Point, a: Point, b: Point, c: Point) -> bool:
    d1 = cross(a, b, p)
    d2 = cross(b, c, p)
    d3 = cross(c, a, p)
    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0
    return not (has_neg and has_pos)


def ear_clip(points: Sequence[Point]) -> list[int]:
    """Triangulate a simple polygon by ear clipping.

    A vertex is convex when its turn has the same sign as the ring's
    winding; it is an ear when no other remaining vertex lies inside the
    triangle it forms with its neighbours. Ears are removed one at a time
    and the neighbours re-classified on the next pass.

    Raises:
        TriangulationError: If the ring is degenerate or no ear can be found
    """
    n = len(points)
    if n < 3:
        raise TriangulationError(f"need at least 3 points, got {n}")

    area = signed_area(points)
    if area == 0:
        raise TriangulationError("zero-area polygon")
    orientation = 1.0 if area > 0 else -1.0

    remaining = list(range(n))
    indices: list[int] = []

    while len(remaining) > 3:
        count = len(remaining)
        for k in range(count):
            i_prev = remaining[k - 1]
            i_curr = remaining[k]
            i_next = remaining[(k + 1) % count]
            a, b, c = points[i_prev], points[i_curr], points[i_next]

            if cross(a, b, c) * orientation <= 0:
                continue  # reflex or collinear

            if any(
                _point_in_triangle(points[j], a, b, c)
                for j in remaining
                if j not in (i_prev, i_curr, i_next)
            ):
                continue

            indices.extend((i_prev, i_curr, i_next))
            remaining.pop(k)
            break
        else:
            raise TriangulationError(f"no ear found with {count} vertices left")

    indices.extend(remaining)
    return indices


def _convex_hull_fan(points: Sequence[Point]) -> Triangulation:
    hull = MultiPoint([(p.x, p.y) for p in points]).convex_hull
    if not isinstance(hull, ShapelyPolygon):
        return Triangulation()

    coords = list(hull.exterior.coords)[:-1]
    vertices = [Point(float(x), float(y)) for x, y in coords]
    indices: list[int] = []
    for i in range(1, len(vertices) - 1):
        indices.extend((0, i, i + 1))
    return Triangulation(vertices=vertices, indices=indices, method="convex_hull")


def triangulate(points: Sequence[Point]) -> Triangulation:
    """Triangulate a polygon ring, falling back through simpler strategies.

    Args:
        points: Polygon ring

    Returns:
        Triangulation; empty only when every strategy failed (e.g. all
        points collinear)
    """
    points = list(points)
    if len(points) < 3:
        return Triangulation()

    indices = _constrained_delaunay(points)
    if indices:
        return Triangulation(vertices=points, indices=indices, method="constrained_delaunay")

    reversed_points = points[::-1]
    indices = _constrained_delaunay(reversed_points)
    if indices:
        return Triangulation(
            vertices=reversed_points, indices=indices, method="constrained_delaunay_reversed"
        )

    cleaned = clean_points(points)
    indices = _constrained_delaunay(cleaned)
    if indices:
        return Triangulation(vertices=cleaned, indices=indices, method="constrained_delaunay_cleaned")

    try:
        indices = ear_clip(cleaned)
    except TriangulationError as e:
        logger.debug("Ear clipping failed: %s", e.reason)
    else:
        if indices:
            return Triangulation(vertices=cleaned, indices=indices, method="ear_clipping")

    logger.warning("Triangulation falling back to convex hull (%d points)", len(points))
    return _convex_hull_fan(points)
