"""Moore-Neighbor boundary tracing.

Traces the outline of a single solid shape through the centres of its edge
pixels. Only the first shape in scan order is traced; use Marching Squares
for images with several disconnected shapes.
"""

import logging

from cutout.core.bitmap import Bitmap
from cutout.core.contour import ContourAlgorithm
from cutout.domain import Point, Polygon

logger = logging.getLogger(__name__)

# Moore neighbourhood, clockwise (y-up) starting at the left neighbour
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
)


def find_start_pixel(bitmap: Bitmap) -> tuple[int, int] | None:
    """Find the topmost, then leftmost, edge pixel."""
    for y in range(bitmap.height):
        for x in range(bitmap.width):
            if bitmap.is_edge(x, y):
                return (x, y)
    return None


def _next_direction(bitmap: Bitmap, x: int, y: int, direction: int) -> int | None:
    """First solid neighbour, scanning clockwise from two steps past ``direction``."""
    scan_start = (direction + 6) % 8
    for step in range(8):
        d = (scan_start + step) % 8
        if bitmap.is_solid(x + DIRECTIONS[d][0], y + DIRECTIONS[d][1]):
            return d
    return None


def trace_moore_neighbor(bitmap: Bitmap) -> Polygon:
    """Walk the boundary of the first solid shape.

    Each neighbour scan starts two steps past the direction the walker came
    from and takes the first solid neighbour in clockwise order. The walk
    ends back at the start pixel once at least 3 points were recorded, when
    a pixel has no solid neighbour, or after width * height steps. An early
    return to the start only ends the walk if leaving again would repeat
    the first move, so a two-pixel shape gives its two pixel centres.

    Returns:
        The boundary (clockwise, negative signed area); empty when the
        bitmap has no solid pixel
    """
    start = find_start_pixel(bitmap)
    if start is None:
        return Polygon(points=[])

    x, y = start
    points = [Point(float(x), float(y))]
    direction = 0
    first_move: int | None = None
    max_steps = bitmap.width * bitmap.height

    for _ in range(max_steps):
        d = _next_direction(bitmap, x, y, direction)
        if d is None:
            # Isolated pixel
            break
        if first_move is None:
            first_move = d

        x += DIRECTIONS[d][0]
        y += DIRECTIONS[d][1]
        direction = d

        if (x, y) == start:
            if len(points) >= 3:
                break
            if _next_direction(bitmap, x, y, direction) == first_move:
                break
        points.append(Point(float(x), float(y)))
    else:
        logger.warning("Moore-Neighbor trace hit the step limit (%d)", max_steps)

    return Polygon(points=points)


class MooreNeighbor(ContourAlgorithm):
    """Moore-Neighbor contour extraction (one contour per call)."""

    name = "Moore-Neighbor"

    def trace(self, bitmap: Bitmap) -> list[Polygon]:
        return [trace_moore_neighbor(bitmap)]
