"""Seed point generation for Voronoi fracture.

Every pattern only accepts points that lie inside the polygon and are at
least ``min_cell_distance * min(padded width, padded height)`` away from
every point accepted so far. The sampling area is the polygon's bounding
box shrunk by ``edge_padding``.
"""

import logging
import math

import numpy as np

from cutout.config import GridSeeds, PoissonSeeds, RadialSeeds, RandomSeeds, SeedPattern, SpiderwebSeeds
from cutout.core.geometry import distance
from cutout.domain import Bounds, Point, Polygon

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi


class _SeedSet:
    """Accepted seeds plus the acceptance rule."""

    def __init__(self, polygon: Polygon, min_distance: float) -> None:
        self.polygon = polygon
        self.min_distance = min_distance
        self.points: list[Point] = []

    def try_add(self, point: Point) -> bool:
        if not self.polygon.contains_point(point.x, point.y):
            return False
        if self.min_distance > 0 and any(distance(point, s) < self.min_distance for s in self.points):
            return False
        self.points.append(point)
        return True


def _random_seeds(seeds: _SeedSet, area: Bounds, count: int, rng: np.random.Generator) -> None:
    attempts = count * 10
    while len(seeds.points) < count and attempts > 0:
        attempts -= 1
        seeds.try_add(
            Point(
                float(rng.uniform(area.min_x, area.max_x)),
                float(rng.uniform(area.min_y, area.max_y)),
            )
        )


def _grid_seeds(seeds: _SeedSet, area: Bounds, pattern: GridSeeds, rng: np.random.Generator) -> None:
    cell_w = area.width / pattern.cols
    cell_h = area.height / pattern.rows

    for row in range(pattern.rows):
        for col in range(pattern.cols):
            jitter_x = float(rng.uniform(-0.5, 0.5)) * cell_w * pattern.jitter
            jitter_y = float(rng.uniform(-0.5, 0.5)) * cell_h * pattern.jitter
            seeds.try_add(
                Point(
                    area.min_x + (col + 0.5) * cell_w + jitter_x,
                    area.min_y + (row + 0.5) * cell_h + jitter_y,
                )
            )


def _ring_geometry(pattern: RadialSeeds | SpiderwebSeeds, bounds: Bounds) -> tuple[Point, float, float]:
    """Return (centre, max radius, ring spacing)."""
    if pattern.origin is not None:
        center = Point(*pattern.origin)
    else:
        center = bounds.center
    max_radius = max(distance(center, corner) for corner in bounds.corners())
    ring_size = pattern.ring_size if pattern.ring_size is not None else max_radius / pattern.ring_count
    return center, max_radius, ring_size


def _radial_seeds(
    seeds: _SeedSet, bounds: Bounds, pattern: RadialSeeds, rng: np.random.Generator
) -> None:
    center, max_radius, ring_size = _ring_geometry(pattern, bounds)
    variation = pattern.radial_variation

    for ring in range(1, pattern.ring_count + 1):
        # Outer rings are longer and get more points
        in_ring = max(3, round(pattern.points_per_ring * ring / pattern.ring_count))
        base_radius = ring * ring_size

        for k in range(in_ring):
            angle = TAU * k / in_ring + float(rng.uniform(-variation, variation)) * (TAU / in_ring)
            radius = base_radius + float(rng.uniform(-variation, variation)) * (max_radius / pattern.ring_count)
            seeds.try_add(
                Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)
            )


def _spiderweb_seeds(
    seeds: _SeedSet, bounds: Bounds, pattern: SpiderwebSeeds, rng: np.random.Generator
) -> None:
    center, max_radius, ring_size = _ring_geometry(pattern, bounds)
    variation = pattern.radial_variation
    rays = pattern.points_per_ring

    seeds.try_add(center)

    for ring in range(1, pattern.ring_count + 1):
        base_radius = ring * ring_size
        for ray in range(rays):
            angle = TAU * ray / rays + float(rng.uniform(-variation, variation)) * TAU / rays / 2.0
            radius = base_radius + float(rng.uniform(-variation, variation)) * max_radius / pattern.ring_count / 2.0
            seeds.try_add(
                Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)
            )


def _poisson_seeds(
    seeds: _SeedSet, area: Bounds, count: int, pattern: PoissonSeeds, rng: np.random.Generator
) -> None:
    # Without a minimum distance the annulus would collapse onto its centre
    radius = seeds.min_distance
    if radius <= 0:
        radius = min(area.width, area.height) * 0.05
    if radius <= 0:
        return

    _random_seeds(seeds, area, 1, rng)
    active = list(seeds.points)
    budget = count * pattern.attempts

    while active and len(seeds.points) < count and budget > 0:
        index = int(rng.integers(len(active)))
        origin = active[index]

        for _ in range(pattern.attempts):
            budget -= 1
            angle = float(rng.uniform(0.0, TAU))
            r = radius * (1.0 + float(rng.uniform(0.0, 1.0)))
            candidate = Point(origin.x + math.cos(angle) * r, origin.y + math.sin(angle) * r)
            if area.contains(candidate) and seeds.try_add(candidate):
                active.append(candidate)
                break
        else:
            # Exhausted: swap-remove from the active list
            active[index] = active[-1]
            active.pop()


def generate_seeds(
    polygon: Polygon,
    pattern: SeedPattern,
    count: int,
    min_cell_distance: float = 0.05,
    edge_padding: float = 0.0,
    rng: np.random.Generator | None = None,
) -> list[Point]:
    """Generate seed points inside a polygon.

    Args:
        polygon: Polygon the seeds must lie in
        pattern: Seed pattern and its parameters
        count: Target number of seeds (random and Poisson patterns); grid and
            ring patterns derive their count from their own parameters
        min_cell_distance: Minimum spacing as a fraction of the smaller
            padded bounds side
        edge_padding: Inset of the sampling area from the bounds
        rng: Random generator; a fresh unseeded one if omitted

    Returns:
        Accepted seed points (possibly fewer than requested)
    """
    if len(polygon.points) < 3:
        return []

    rng = rng if rng is not None else np.random.default_rng()
    bounds = polygon.bounding_box()
    area = bounds.grow(-edge_padding)
    seeds = _SeedSet(polygon, min(area.width, area.height) * min_cell_distance)

    if isinstance(pattern, RandomSeeds):
        _random_seeds(seeds, area, count, rng)
    elif isinstance(pattern, GridSeeds):
        _grid_seeds(seeds, area, pattern, rng)
    elif isinstance(pattern, RadialSeeds):
        _radial_seeds(seeds, bounds, pattern, rng)
    elif isinstance(pattern, SpiderwebSeeds):
        _spiderweb_seeds(seeds, bounds, pattern, rng)
    elif isinstance(pattern, PoissonSeeds):
        _poisson_seeds(seeds, area, count, pattern, rng)
    else:
        raise TypeError(f"Unsupported seed pattern: {type(pattern).__name__}")

    logger.debug("Generated %d %s seeds", len(seeds.points), pattern.kind)
    return seeds.points
