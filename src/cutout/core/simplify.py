"""Polygon simplification algorithms.

Three interchangeable simplifiers share the ``Simplifier`` interface:

- Ramer-Douglas-Peucker: recursive chord splitting
- Reumann-Witkam: single forward pass with a corridor around a key line
- Visvalingam-Whyatt: repeated removal of the smallest effective triangle

Polygons with fewer than 3 points pass through unchanged. A result that
would collapse below 3 points is replaced by the unchanged input.
"""

import heapq
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from cutout.config import RDPConfig, ReumannWitkamConfig, VisvalingamWhyattConfig, VWStopCriterion
from cutout.core.geometry import point_line_distance, triangle_area
from cutout.domain import Point, Polygon

logger = logging.getLogger(__name__)


def rdp(points: Sequence[Point], epsilon: float) -> list[Point]:
    """Ramer-Douglas-Peucker simplification of an open traversal.

    The first and last points are always kept. Uses an explicit stack
    instead of recursion so long contours cannot overflow.

    Args:
        points: Points to simplify
        epsilon: Maximum perpendicular distance of a removed point from its
            replacing chord; 0 or less keeps every point

    Returns:
        Simplified points
    """
    n = len(points)
    if n < 3 or epsilon <= 0:
        return list(points)

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]

    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_dist = -1.0
        max_index = first
        for i in range(first + 1, last):
            d = point_line_distance(points[i], points[first], points[last])
            if d > max_dist:
                max_dist = d
                max_index = i

        if max_dist > epsilon:
            keep[max_index] = True
            stack.append((first, max_index))
            stack.append((max_index, last))

    return [p for p, k in zip(points, keep) if k]


def reumann_witkam(points: Sequence[Point], epsilon: float, start_index: int = 0) -> list[Point]:
    """Reumann-Witkam simplification.

    From the key point, the line through the key point and its successor
    defines a corridor of half-width ``epsilon``. Following points are
    absorbed while they stay inside the corridor (distance to the infinite
    line); the last absorbed point becomes the next key point.

    Args:
        points: Closed ring to simplify
        epsilon: Corridor half-width
        start_index: Vertex the pass starts from (wrapped to the ring)

    Returns:
        Simplified ring, starting at ``start_index``; the closing point is
        never duplicated
    """
    n = len(points)
    if n < 3 or epsilon <= 0:
        return list(points)

    start = start_index % n
    ordered = list(points[start:]) + list(points[:start])

    result = [ordered[0]]
    key = 0

    while key < n - 1:
        line_end = key + 1
        j = line_end + 1
        while j < n and point_line_distance(ordered[j], ordered[key], ordered[line_end]) <= epsilon:
            j += 1

        next_key = j - 1
        if next_key <= key:
            # Never stall on the same key point
            next_key = key + 1

        result.append(ordered[next_key])
        key = next_key

    return result


def visvalingam_whyatt(
    points: Sequence[Point],
    criterion: VWStopCriterion = VWStopCriterion.AREA,
    min_area: float = 0.5,
    target_points: int = 0,
    target_proportion: float = 0.5,
) -> list[Point]:
    """Visvalingam-Whyatt simplification of a closed ring.

    Repeatedly removes the point whose triangle with its current
    neighbours has the smallest area, then recomputes the areas of the two
    neighbours only. Stale heap entries are skipped lazily.

    Args:
        points: Closed ring to simplify
        criterion: Stopping rule
        min_area: AREA criterion; stop once the smallest area exceeds this
        target_points: POINT_COUNT criterion; stop at this many points
        target_proportion: PROPORTION criterion; stop at this fraction of
            the input count

    Returns:
        Simplified ring with at least 3 points, in input order
    """
    n = len(points)
    if n <= 3:
        return list(points)

    if criterion == VWStopCriterion.POINT_COUNT:
        target = max(3, target_points)
    elif criterion == VWStopCriterion.PROPORTION:
        target = max(3, round(n * target_proportion))
    else:
        target = 3

    prev = [(i - 1) % n for i in range(n)]
    nxt = [(i + 1) % n for i in range(n)]
    removed = [False] * n
    areas = [triangle_area(points[prev[i]], points[i], points[nxt[i]]) for i in range(n)]
    heap = [(a, i) for i, a in enumerate(areas)]
    heapq.heapify(heap)
    count = n

    while count > target and heap:
        area, i = heapq.heappop(heap)
        if removed[i] or area != areas[i]:
            continue
        if criterion == VWStopCriterion.AREA and area > min_area:
            break

        removed[i] = True
        count -= 1
        p, q = prev[i], nxt[i]
        nxt[p] = q
        prev[q] = p

        for k in (p, q):
            areas[k] = triangle_area(points[prev[k]], points[k], points[nxt[k]])
            heapq.heappush(heap, (areas[k], k))

    return [p for p, r in zip(points, removed) if not r]


class Simplifier(ABC):
    """Base class for polygon simplifiers."""

    name: str = ""

    def simplify(self, polygon: Polygon) -> Polygon:
        """Return a simplified copy of the polygon."""
        if len(polygon.points) < 3:
            return polygon.copy()

        points = self._simplify_points(polygon.points)
        if len(points) < 3:
            logger.debug("%s collapsed %d points, keeping input", self.name, len(polygon.points))
            return polygon.copy()
        return Polygon(points=points)

    @abstractmethod
    def _simplify_points(self, points: list[Point]) -> list[Point]:
        pass


class RamerDouglasPeucker(Simplifier):
    name = "Ramer-Douglas-Peucker"

    def __init__(self, config: RDPConfig) -> None:
        self.config = config

    def _simplify_points(self, points: list[Point]) -> list[Point]:
        return rdp(points, self.config.epsilon)


class ReumannWitkam(Simplifier):
    name = "Reumann-Witkam"

    def __init__(self, config: ReumannWitkamConfig) -> None:
        self.config = config

    def _simplify_points(self, points: list[Point]) -> list[Point]:
        return reumann_witkam(points, self.config.epsilon, self.config.start_index)


class VisvalingamWhyatt(Simplifier):
    name = "Visvalingam-Whyatt"

    def __init__(self, config: VisvalingamWhyattConfig) -> None:
        self.config = config

    def _simplify_points(self, points: list[Point]) -> list[Point]:
        return visvalingam_whyatt(
            points,
            criterion=self.config.stop_criterion,
            min_area=self.config.min_area,
            target_points=self.config.target_points,
            target_proportion=self.config.target_proportion,
        )
