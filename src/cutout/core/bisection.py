"""Polygon bisection along an infinite line.

Two paths:

- Fast path for convex polygons without holes: a single walk over the
  ring classifying every vertex by its signed distance to the line.
- Robust path for concave polygons or polygons with holes: the outer ring
  is intersected with two huge quads, one on each side of the line, and the
  holes are subtracted from the resulting pieces.

"Left" is the side where cross(line direction, point - line_start) > 0.
Both paths keep the winding sign of the outer ring and drop pieces with
fewer than 3 points.
"""

import logging
from collections.abc import Sequence

from cutout.core import boolean
from cutout.core.geometry import distance, is_convex, normalize
from cutout.domain import Point, Polygon, PolygonWithHoles

logger = logging.getLogger(__name__)

SIDE_EPSILON = 1e-6
MIN_LINE_LENGTH = 1e-6


def _side_distances(points: Sequence[Point], start: Point, dx: float, dy: float) -> list[float]:
    return [dx * (p.y - start.y) - dy * (p.x - start.x) for p in points]


def bisect_convex(
    points: Sequence[Point], line_start: Point, line_end: Point
) -> tuple[list[list[Point]], list[list[Point]]]:
    """Split a convex ring along a line in one pass.

    Vertices within ``SIDE_EPSILON`` of the line are shared by both sides.
    If every vertex is on one side, the whole ring is returned on that side.
    """
    dx, dy = normalize(line_end.x - line_start.x, line_end.y - line_start.y)
    if dx == 0.0 and dy == 0.0:
        return [], []

    sides = _side_distances(points, line_start, dx, dy)

    if all(d >= -SIDE_EPSILON for d in sides):
        return [list(points)], []
    if all(d <= SIDE_EPSILON for d in sides):
        return [], [list(points)]

    left: list[Point] = []
    right: list[Point] = []
    n = len(points)

    for i in range(n):
        j = (i + 1) % n
        p, q = points[i], points[j]
        dp, dq = sides[i], sides[j]

        if dp > SIDE_EPSILON:
            left.append(p)
        elif dp < -SIDE_EPSILON:
            right.append(p)
        else:
            left.append(p)
            right.append(p)

        if (dp > SIDE_EPSILON and dq < -SIDE_EPSILON) or (dp < -SIDE_EPSILON and dq > SIDE_EPSILON):
            t = dp / (dp - dq)
            crossing = Point(p.x + (q.x - p.x) * t, p.y + (q.y - p.y) * t)
            left.append(crossing)
            right.append(crossing)

    return (
        [left] if len(left) >= 3 else [],
        [right] if len(right) >= 3 else [],
    )


def _half_plane_quads(
    bounds_points: Sequence[Point], line_start: Point, dx: float, dy: float
) -> tuple[list[Point], list[Point]]:
    xs = [p.x for p in bounds_points]
    ys = [p.y for p in bounds_points]
    width = max(xs) - min(xs)
    height = max(ys) - min(ys)
    center = Point((max(xs) + min(xs)) / 2.0, (max(ys) + min(ys)) / 2.0)
    extent = 10.0 * (width + height + distance(line_start, center) + 1.0)

    a = Point(line_start.x - dx * extent, line_start.y - dy * extent)
    b = Point(line_start.x + dx * extent, line_start.y + dy * extent)
    nx, ny = -dy * extent, dx * extent

    left_quad = [a, b, Point(b.x + nx, b.y + ny), Point(a.x + nx, a.y + ny)]
    right_quad = [a, Point(a.x - nx, a.y - ny), Point(b.x - nx, b.y - ny), b]
    return left_quad, right_quad


def bisect_robust(
    shape: PolygonWithHoles, line_start: Point, line_end: Point
) -> tuple[list[list[Point]], list[list[Point]]]:
    """Split a shape with boolean intersections against two half-plane quads."""
    dx, dy = normalize(line_end.x - line_start.x, line_end.y - line_start.y)
    if dx == 0.0 and dy == 0.0:
        return [], []

    outer = shape.outer.points
    left_quad, right_quad = _half_plane_quads(outer, line_start, dx, dy)

    left = boolean.subtract_holes(boolean.intersect(outer, left_quad), shape.holes)
    right = boolean.subtract_holes(boolean.intersect(outer, right_quad), shape.holes)

    return (
        [r for r in left if len(r) >= 3],
        [r for r in right if len(r) >= 3],
    )


def bisect(
    shape: PolygonWithHoles, line_start: Point, line_end: Point
) -> tuple[list[Polygon], list[Polygon]]:
    """Split a polygon with holes along the infinite line through two points.

    Args:
        shape: Polygon to split
        line_start: First point on the line
        line_end: Second point on the line

    Returns:
        (left fragments, right fragments). Both are empty for a degenerate
        polygon or a zero-length line.
    """
    if len(shape.outer.points) < 3:
        return [], []
    if distance(line_start, line_end) < MIN_LINE_LENGTH:
        return [], []

    holes = [h for h in shape.holes if len(h.points) >= 3]
    if holes or not is_convex(shape.outer.points):
        left, right = bisect_robust(PolygonWithHoles(shape.outer, holes), line_start, line_end)
    else:
        left, right = bisect_convex(shape.outer.points, line_start, line_end)

    return (
        [Polygon(points=r) for r in left],
        [Polygon(points=r) for r in right],
    )
