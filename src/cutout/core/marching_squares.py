"""Marching Squares contour extraction.

Cells are 2x2 pixel windows. Cell (cx, cy) has corners at pixel centres
(cx, cy), (cx+1, cy), (cx+1, cy+1) and (cx, cy+1); cells run from -1 to
width-1 / height-1 so shapes touching the image border are closed.

Each connected (4-neighbour) solid region yields one outline. Outlines keep
the solid side on the walker's left in screen space, which makes them
clockwise (negative signed area) in the pixel coordinate system.
"""

import logging
from collections import deque

import numpy as np
from numpy.typing import NDArray

from cutout.core.bitmap import Bitmap
from cutout.core.contour import ContourAlgorithm
from cutout.domain import Point, Polygon

logger = logging.getLogger(__name__)

TOP, RIGHT, BOTTOM, LEFT = 0, 1, 2, 3

# Corner bits
TOP_LEFT, TOP_RIGHT, BOTTOM_RIGHT, BOTTOM_LEFT = 8, 4, 2, 1

# Configuration index -> {entry edge: exit edge}. Saddles (5, 10) are two
# separate corners; the centre is treated as empty.
EDGE_TABLE: tuple[dict[int, int], ...] = (
    {},
    {BOTTOM: LEFT},
    {RIGHT: BOTTOM},
    {RIGHT: LEFT},
    {TOP: RIGHT},
    {TOP: RIGHT, BOTTOM: LEFT},
    {TOP: BOTTOM},
    {TOP: LEFT},
    {LEFT: TOP},
    {BOTTOM: TOP},
    {LEFT: TOP, RIGHT: BOTTOM},
    {RIGHT: TOP},
    {LEFT: RIGHT},
    {BOTTOM: RIGHT},
    {LEFT: BOTTOM},
    {},
)

# Exit edge -> (cell dx, cell dy, entry edge of the next cell)
STEP: dict[int, tuple[int, int, int]] = {
    TOP: (0, -1, BOTTOM),
    RIGHT: (1, 0, LEFT),
    BOTTOM: (0, 1, TOP),
    LEFT: (-1, 0, RIGHT),
}


def cell_config(bitmap: Bitmap, cx: int, cy: int) -> int:
    """Compute the 4-bit configuration index of a cell."""
    config = 0
    if bitmap.is_solid(cx, cy):
        config |= TOP_LEFT
    if bitmap.is_solid(cx + 1, cy):
        config |= TOP_RIGHT
    if bitmap.is_solid(cx + 1, cy + 1):
        config |= BOTTOM_RIGHT
    if bitmap.is_solid(cx, cy + 1):
        config |= BOTTOM_LEFT
    return config


def edge_midpoint(cx: int, cy: int, edge: int) -> Point:
    if edge == TOP:
        return Point(cx + 0.5, float(cy))
    if edge == RIGHT:
        return Point(cx + 1.0, cy + 0.5)
    if edge == BOTTOM:
        return Point(cx + 0.5, cy + 1.0)
    return Point(float(cx), cy + 0.5)


def trace_from(bitmap: Bitmap, start_x: int, start_y: int) -> Polygon:
    """Trace one outline starting at the top-left pixel of a region.

    The walk starts in the cell whose bottom-right corner is the start
    pixel, entering through its right edge. It stops when a (cell, entry
    edge) pair repeats, when a cell has no exit for the entry edge, or
    after the step limit.
    """
    cx, cy = start_x - 1, start_y - 1
    entry = RIGHT
    visited: set[tuple[int, int, int]] = set()
    points: list[Point] = []
    max_steps = 4 * (bitmap.width + 1) * (bitmap.height + 1)

    for _ in range(max_steps):
        key = (cx, cy, entry)
        if key in visited:
            break
        visited.add(key)

        exit_edge = EDGE_TABLE[cell_config(bitmap, cx, cy)].get(entry)
        if exit_edge is None:
            logger.debug("Marching Squares dead end at cell (%d, %d)", cx, cy)
            break

        points.append(edge_midpoint(cx, cy, exit_edge))
        dx, dy, entry = STEP[exit_edge]
        cx += dx
        cy += dy
    else:
        logger.warning("Marching Squares trace hit the step limit (%d)", max_steps)

    return Polygon(points=points)


def flood_fill(bitmap: Bitmap, filled: NDArray[np.bool_], start_x: int, start_y: int) -> None:
    """Mark the 4-connected solid region containing the start pixel."""
    queue = deque([(start_x, start_y)])
    filled[start_y, start_x] = True

    while queue:
        x, y = queue.popleft()
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if bitmap.is_solid(nx, ny) and not filled[ny, nx]:
                filled[ny, nx] = True
                queue.append((nx, ny))


def trace_all(bitmap: Bitmap) -> list[Polygon]:
    """Trace one outline per connected solid region, in scan order."""
    filled = np.zeros((bitmap.height, bitmap.width), dtype=bool)
    contours: list[Polygon] = []

    for y in range(bitmap.height):
        for x in range(bitmap.width):
            if filled[y, x] or not bitmap.is_edge(x, y):
                continue
            contour = trace_from(bitmap, x, y)
            flood_fill(bitmap, filled, x, y)
            if contour.points:
                contours.append(contour)

    logger.debug("Marching Squares found %d contours", len(contours))
    return contours


class MarchingSquares(ContourAlgorithm):
    """Marching Squares contour extraction (one contour per shape)."""

    name = "Marching Squares"

    def trace(self, bitmap: Bitmap) -> list[Polygon]:
        return trace_all(bitmap)
