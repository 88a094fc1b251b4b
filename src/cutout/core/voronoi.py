"""Voronoi fracture.

Seeds are generated inside the outer ring, triangulated with scipy's
Delaunay, and each seed's cell is built by clipping the bounding box of the
outer ring against the perpendicular bisector of every Delaunay neighbour.
Cells are then intersected with the outer ring and holes are subtracted.
"""

import logging
from collections.abc import Sequence

import numpy as np
from scipy.spatial import Delaunay, QhullError

from cutout.config import VoronoiConfig
from cutout.core import boolean
from cutout.core.fracture import FractureAlgorithm, ShapeInput, as_shape
from cutout.core.geometry import clip_half_plane, normalize
from cutout.core.seeds import generate_seeds
from cutout.domain import Bounds, Point, Polygon, PolygonWithHoles

logger = logging.getLogger(__name__)


def delaunay_neighbors(seeds: Sequence[Point]) -> list[set[int]]:
    """Map every seed to the indices of its Delaunay neighbours.

    Two seeds are neighbours of each other. When Qhull cannot triangulate
    (e.g. all seeds collinear) every pair counts as neighbours, which still
    yields exact cells, only with more clipping.
    """
    n = len(seeds)
    if n < 2:
        return [set() for _ in range(n)]
    if n == 2:
        return [{1}, {0}]

    try:
        triangulation = Delaunay(np.array([(p.x, p.y) for p in seeds], dtype=float))
    except QhullError:
        logger.debug("Delaunay failed for %d seeds, using all pairs", n)
        return [set(range(n)) - {i} for i in range(n)]

    indptr, indices = triangulation.vertex_neighbor_vertices
    return [set(int(j) for j in indices[indptr[i] : indptr[i + 1]]) for i in range(n)]


def voronoi_cell(index: int, seeds: Sequence[Point], neighbors: set[int], bounds: Bounds) -> list[Point]:
    """Build one seed's Voronoi cell inside ``bounds``.

    Args:
        index: Seed whose cell is built
        seeds: All seeds
        neighbors: Delaunay neighbours of the seed
        bounds: Initial quad to clip

    Returns:
        The cell ring (empty if it clipped away)
    """
    seed = seeds[index]
    cell = bounds.corners()

    for j in sorted(neighbors):
        other = seeds[j]
        midpoint = Point((seed.x + other.x) / 2.0, (seed.y + other.y) / 2.0)
        nx, ny = normalize(seed.x - other.x, seed.y - other.y)
        if nx == 0.0 and ny == 0.0:
            continue
        cell = clip_half_plane(cell, midpoint, Point(nx, ny))
        if len(cell) < 3:
            return []

    return cell


def _unique(points: Sequence[Point]) -> list[Point]:
    seen: set[Point] = set()
    result = []
    for p in points:
        if p not in seen:
            seen.add(p)
            result.append(p)
    return result


class VoronoiFracture(FractureAlgorithm):
    """Fracture into Voronoi cells around generated seed points."""

    name = "Voronoi"

    def __init__(self, config: VoronoiConfig) -> None:
        super().__init__(config)
        self.config: VoronoiConfig = config

    def generate_seeds(self, outer: Polygon) -> list[Point]:
        return generate_seeds(
            outer,
            self.config.pattern,
            self.config.fragment_count,
            min_cell_distance=self.config.min_cell_distance,
            edge_padding=self.config.edge_padding,
            rng=self.rng(),
        )

    def _fracture(self, shape: PolygonWithHoles) -> list[Polygon]:
        seeds = self.generate_seeds(shape.outer)
        return self._cells(shape, seeds)

    def fracture_with_seeds(self, shape: ShapeInput, seeds: Sequence[Point]) -> list[Polygon]:
        """Fracture using caller-supplied seed points instead of a pattern.

        Follows the same result convention as ``fracture``.
        """
        shape = as_shape(shape)
        outer = shape.outer
        if len(outer.points) < 3:
            return []

        fragments = self._cells(shape, seeds)
        if not fragments:
            return [outer.copy()]
        return fragments

    def _cells(self, shape: PolygonWithHoles, seeds: Sequence[Point]) -> list[Polygon]:
        seeds = _unique(seeds)
        if len(seeds) < 2:
            logger.debug("Voronoi: only %d seeds, nothing to fracture", len(seeds))
            return []

        outer = shape.outer.points
        bounds = shape.outer.bounding_box()
        neighbors = delaunay_neighbors(seeds)

        fragments: list[Polygon] = []
        for i in range(len(seeds)):
            cell = voronoi_cell(i, seeds, neighbors[i], bounds)
            if len(cell) < 3:
                continue
            pieces = boolean.intersect(outer, cell)
            pieces = boolean.subtract_holes(pieces, shape.holes)
            fragments.extend(Polygon(points=p) for p in pieces if len(p) >= 3)

        return fragments
