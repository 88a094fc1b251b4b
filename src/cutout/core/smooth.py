"""Outward polygon smoothing.

Two passes:

1. Every vertex is pushed outward along the average of its two edge
   normals, scaled by the miter factor (clamped by ``miter_limit``).
2. ``iterations`` rounds of Laplacian smoothing pull each vertex toward
   the midpoint of its neighbours. Sharp corners can be skipped, and with
   ``constrain_smoothing`` a move is rejected if the vertex would land
   inside the original polygon or its new edges would cut through it.

With ``constrain_smoothing`` the result always contains the original.
"""

import logging
import math

from shapely.geometry import LineString
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.prepared import prep

from cutout.config import OutwardSmoothConfig
from cutout.core.geometry import EPSILON, distance, normalize, point_in_polygon, signed_area
from cutout.domain import Point, Polygon

logger = logging.getLogger(__name__)


def expand_outward(points: list[Point], radius: float, miter_limit: float) -> list[Point]:
    """Offset every vertex outward by ``radius`` using miter-corrected normals."""
    n = len(points)
    if radius == 0 or n < 3:
        return list(points)

    # Outward normal of edge (dx, dy) is s * (dy, -dx)
    s = 1.0 if signed_area(points) > 0 else -1.0

    normals: list[tuple[float, float]] = []
    for i in range(n):
        a, b = points[i], points[(i + 1) % n]
        dx, dy = normalize(b.x - a.x, b.y - a.y)
        normals.append((s * dy, -s * dx))

    expanded: list[Point] = []
    for i in range(n):
        n_in = normals[i - 1]
        n_out = normals[i]
        ax, ay = normalize(n_in[0] + n_out[0], n_in[1] + n_out[1])
        if ax == 0.0 and ay == 0.0:
            # Edges fold back on each other
            ax, ay = n_out

        dot = ax * n_out[0] + ay * n_out[1]
        miter = 1.0 / dot if dot > EPSILON else miter_limit
        miter = min(miter, miter_limit)

        p = points[i]
        expanded.append(Point(p.x + ax * radius * miter, p.y + ay * radius * miter))

    return expanded


def interior_angle(prev: Point, current: Point, nxt: Point) -> float:
    """Unsigned angle at ``current`` in degrees (180 for a straight line)."""
    ax, ay = prev.x - current.x, prev.y - current.y
    bx, by = nxt.x - current.x, nxt.y - current.y
    la = math.hypot(ax, ay)
    lb = math.hypot(bx, by)
    if la < EPSILON or lb < EPSILON:
        return 180.0
    cos_angle = max(-1.0, min(1.0, (ax * bx + ay * by) / (la * lb)))
    return math.degrees(math.acos(cos_angle))


class OutwardSmoother:
    """Expand-then-smooth polygon smoother."""

    name = "Outward Smoothing"

    def __init__(self, config: OutwardSmoothConfig) -> None:
        self.config = config

    def smooth(self, polygon: Polygon) -> Polygon:
        """Return a smoothed copy of the polygon.

        Polygons with fewer than 3 points are returned unchanged.
        """
        original = polygon.points
        if len(original) < 3:
            return polygon.copy()

        cfg = self.config
        constrained = cfg.constrain_smoothing

        points = expand_outward(original, cfg.expansion_radius, cfg.miter_limit)
        if constrained:
            # A deep concavity can push an offset vertex into another part of the shape
            points = [
                orig if point_in_polygon(p, original) else p
                for p, orig in zip(points, original)
            ]

        guard = prep(ShapelyPolygon([(p.x, p.y) for p in original])) if constrained else None
        rejected = 0

        for _ in range(cfg.iterations):
            n = len(points)
            avg_edge = sum(distance(points[i], points[(i + 1) % n]) for i in range(n)) / n

            for i in range(n):
                prev = points[i - 1]
                current = points[i]
                nxt = points[(i + 1) % n]

                if cfg.preserve_corners and interior_angle(prev, current, nxt) < cfg.corner_threshold:
                    continue

                factor = cfg.smooth_strength
                if cfg.use_density and avg_edge > EPSILON:
                    local = (distance(prev, current) + distance(current, nxt)) / 2.0
                    if local < avg_edge:
                        factor *= 1.0 + cfg.density_strength * (1.0 - local / avg_edge)
                factor = min(factor, 1.0)

                mid_x = (prev.x + nxt.x) / 2.0
                mid_y = (prev.y + nxt.y) / 2.0
                candidate = Point(
                    current.x + (mid_x - current.x) * factor,
                    current.y + (mid_y - current.y) * factor,
                )

                if guard is not None:
                    if point_in_polygon(candidate, original):
                        rejected += 1
                        continue
                    path = LineString([(prev.x, prev.y), (candidate.x, candidate.y), (nxt.x, nxt.y)])
                    if guard.crosses(path):
                        rejected += 1
                        continue

                points[i] = candidate

        if rejected:
            logger.debug("Outward smoothing rejected %d moves", rejected)
        return Polygon(points=points)
