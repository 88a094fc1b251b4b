"""Geometric primitives shared by the pipeline.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (ray casting algorithm)
- Point-to-segment and point-to-line distances
- Line and segment intersection
- Convexity testing
- Half-plane clipping (Sutherland-Hodgman, single plane)

All functions are pure, stateless, and designed for use in parallel processing.
"""

import math
from collections.abc import Sequence

from cutout.domain import Point

EPSILON = 1e-9


def signed_area(points: Sequence[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Negative area: clockwise winding (solid)
    - Positive area: counter-clockwise winding (hole)

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]
        >>> signed_area(square)
        1.0
        >>> signed_area(square[::-1])
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting.

    Casts a horizontal ray to the right and counts edge crossings. Each edge
    includes its lower endpoint and excludes its upper one, so a ray passing
    exactly through a shared vertex is counted once.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def point_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Perpendicular distance from a point to a line segment.

    Falls back to point-to-point distance when the segment has zero length.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy

    if length_sq < EPSILON:
        return distance(point, start)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    proj_x = start.x + t * dx
    proj_y = start.y + t * dy
    return math.hypot(point.x - proj_x, point.y - proj_y)


def point_line_distance(point: Point, start: Point, end: Point) -> float:
    """Perpendicular distance from a point to the infinite line through two points.

    Computed as cross-product magnitude over line length. Falls back to
    point-to-point distance when the two points coincide.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)

    if length < EPSILON:
        return distance(point, start)

    cross = dx * (point.y - start.y) - dy * (point.x - start.x)
    return abs(cross) / length


def triangle_area(a: Point, b: Point, c: Point) -> float:
    """Unsigned area of the triangle (a, b, c)."""
    return abs((b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y)) / 2.0


def cross(o: Point, a: Point, b: Point) -> float:
    """Z component of (a - o) x (b - o)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Intersect the infinite line p1-p2 with the infinite line p3-p4.

    Returns:
        Intersection point, or None if the lines are parallel
    """
    d1x = p2.x - p1.x
    d1y = p2.y - p1.y
    d2x = p4.x - p3.x
    d2y = p4.y - p3.y

    denom = d1x * d2y - d1y * d2x
    if abs(denom) < EPSILON:
        return None

    t = ((p3.x - p1.x) * d2y - (p3.y - p1.y) * d2x) / denom
    return Point(p1.x + t * d1x, p1.y + t * d1y)


def segment_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Find the intersection point of two line segments.

    Returns:
        Point at intersection if segments intersect, None otherwise
    """
    d1x = p2.x - p1.x
    d1y = p2.y - p1.y
    d2x = p4.x - p3.x
    d2y = p4.y - p3.y

    denom = d1x * d2y - d1y * d2x
    if abs(denom) < EPSILON:
        return None

    t = ((p3.x - p1.x) * d2y - (p3.y - p1.y) * d2x) / denom
    u = ((p3.x - p1.x) * d1y - (p3.y - p1.y) * d1x) / denom

    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return Point(p1.x + t * d1x, p1.y + t * d1y)

    return None


def segment_crossings(polygon: Sequence[Point], start: Point, end: Point) -> int:
    """Count how many polygon edges the segment start-end crosses."""
    n = len(polygon)
    count = 0
    for i in range(n):
        if segment_intersection(start, end, polygon[i], polygon[(i + 1) % n]) is not None:
            count += 1
    return count


def is_convex(points: Sequence[Point], tolerance: float = 1e-6) -> bool:
    """Check whether a polygon is convex.

    Consecutive edge cross products must keep one sign. Near-collinear
    triples (|cross| below tolerance) are skipped. Exits on the first sign
    flip.
    """
    n = len(points)
    if n < 3:
        return False
    if n == 3:
        return True

    sign = 0
    for i in range(n):
        c = cross(points[i], points[(i + 1) % n], points[(i + 2) % n])
        if abs(c) < tolerance:
            continue
        current = 1 if c > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False

    return True


def clip_half_plane(points: Sequence[Point], origin: Point, normal: Point) -> list[Point]:
    """Clip a polygon against one half-plane.

    Keeps the part of the polygon on the side the normal points toward,
    i.e. where dot(p - origin, normal) >= 0. Intersection points are inserted
    wherever an edge crosses the boundary line.

    Args:
        points: Polygon ring to clip
        origin: Any point on the boundary line
        normal: Direction of the kept side (need not be unit length)

    Returns:
        The clipped ring (possibly empty)
    """
    n = len(points)
    if n == 0:
        return []

    # Boundary direction, perpendicular to the normal
    line_end = Point(origin.x - normal.y, origin.y + normal.x)

    def side(p: Point) -> float:
        return (p.x - origin.x) * normal.x + (p.y - origin.y) * normal.y

    result: list[Point] = []
    prev = points[-1]
    prev_inside = side(prev) >= 0

    for current in points:
        current_inside = side(current) >= 0

        if current_inside:
            if not prev_inside:
                hit = line_intersection(prev, current, origin, line_end)
                if hit is not None:
                    result.append(hit)
            result.append(current)
        elif prev_inside:
            hit = line_intersection(prev, current, origin, line_end)
            if hit is not None:
                result.append(hit)

        prev = current
        prev_inside = current_inside

    return result


def normalize(dx: float, dy: float) -> tuple[float, float]:
    length = math.hypot(dx, dy)
    if length < EPSILON:
        return (0.0, 0.0)
    return (dx / length, dy / length)
