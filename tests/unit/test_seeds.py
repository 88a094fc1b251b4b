"""Tests for Voronoi seed generation."""

import itertools

import numpy as np
import pytest

from cutout.config import GridSeeds, PoissonSeeds, RadialSeeds, RandomSeeds, SpiderwebSeeds
from cutout.core.geometry import distance
from cutout.core.seeds import generate_seeds
from cutout.domain import Point, Polygon

SQUARE = Polygon.from_tuples([(0, 0), (0, 90), (90, 90), (90, 0)])
L_SHAPE = Polygon.from_tuples([(0, 0), (0, 100), (40, 100), (40, 40), (100, 40), (100, 0)])


def min_spacing(points: list[Point]) -> float:
    return min(distance(a, b) for a, b in itertools.combinations(points, 2))


class TestRandomSeeds:
    def test_count_and_containment(self) -> None:
        seeds = generate_seeds(SQUARE, RandomSeeds(), 10, rng=np.random.default_rng(1))
        assert len(seeds) == 10
        assert all(SQUARE.contains_point(p.x, p.y) for p in seeds)

    def test_minimum_spacing(self) -> None:
        seeds = generate_seeds(SQUARE, RandomSeeds(), 12, min_cell_distance=0.1, rng=np.random.default_rng(2))
        assert min_spacing(seeds) >= 9.0

    def test_concave_polygon(self) -> None:
        seeds = generate_seeds(L_SHAPE, RandomSeeds(), 20, rng=np.random.default_rng(3))
        assert seeds
        assert all(L_SHAPE.contains_point(p.x, p.y) for p in seeds)

    def test_deterministic_for_seed(self) -> None:
        a = generate_seeds(SQUARE, RandomSeeds(), 10, rng=np.random.default_rng(42))
        b = generate_seeds(SQUARE, RandomSeeds(), 10, rng=np.random.default_rng(42))
        assert a == b

    def test_edge_padding(self) -> None:
        seeds = generate_seeds(SQUARE, RandomSeeds(), 10, edge_padding=20, rng=np.random.default_rng(4))
        assert all(20 <= p.x <= 70 and 20 <= p.y <= 70 for p in seeds)

    def test_impossible_spacing_returns_fewer(self) -> None:
        """Attempts are bounded; crowded requests come back short."""
        seeds = generate_seeds(SQUARE, RandomSeeds(), 50, min_cell_distance=0.5, rng=np.random.default_rng(5))
        assert 1 <= len(seeds) < 50


class TestGridSeeds:
    def test_cell_centres_without_jitter(self) -> None:
        seeds = generate_seeds(SQUARE, GridSeeds(rows=3, cols=3, jitter=0.0), 0, rng=np.random.default_rng(0))
        assert sorted(p.to_tuple() for p in seeds) == sorted(
            (x, y) for x in (15.0, 45.0, 75.0) for y in (15.0, 45.0, 75.0)
        )

    def test_jitter_stays_in_cell(self) -> None:
        seeds = generate_seeds(SQUARE, GridSeeds(rows=2, cols=2, jitter=0.5), 0, rng=np.random.default_rng(6))
        assert len(seeds) == 4
        assert all(0 <= p.x <= 90 and 0 <= p.y <= 90 for p in seeds)

    def test_cells_outside_polygon_skipped(self) -> None:
        seeds = generate_seeds(L_SHAPE, GridSeeds(rows=4, cols=4, jitter=0.0), 0, rng=np.random.default_rng(0))
        assert len(seeds) < 16
        assert all(L_SHAPE.contains_point(p.x, p.y) for p in seeds)


class TestRingSeeds:
    def test_radial_points_inside(self) -> None:
        pattern = RadialSeeds(ring_count=3, points_per_ring=8)
        seeds = generate_seeds(SQUARE, pattern, 0, rng=np.random.default_rng(7))
        assert seeds
        assert all(SQUARE.contains_point(p.x, p.y) for p in seeds)
        # At most 3 + 5 + 8 candidates
        assert len(seeds) <= 16

    def test_radial_custom_origin(self) -> None:
        pattern = RadialSeeds(origin=(10.0, 10.0), ring_count=2, ring_size=10.0, radial_variation=0.0)
        seeds = generate_seeds(SQUARE, pattern, 0, min_cell_distance=0.0, rng=np.random.default_rng(0))
        for p in seeds:
            assert distance(p, Point(10, 10)) in (pytest.approx(10.0), pytest.approx(20.0))

    def test_spiderweb_starts_at_centre(self) -> None:
        pattern = SpiderwebSeeds(ring_count=2, points_per_ring=6)
        seeds = generate_seeds(SQUARE, pattern, 0, rng=np.random.default_rng(8))
        assert seeds[0] == Point(45, 45)
        assert len(seeds) <= 1 + 2 * 6


class TestPoissonSeeds:
    def test_spacing_and_count(self) -> None:
        seeds = generate_seeds(SQUARE, PoissonSeeds(), 15, min_cell_distance=0.1, rng=np.random.default_rng(9))
        assert 2 <= len(seeds) <= 15
        assert min_spacing(seeds) >= 9.0
        assert all(SQUARE.contains_point(p.x, p.y) for p in seeds)

    def test_zero_spacing_uses_fallback_radius(self) -> None:
        seeds = generate_seeds(SQUARE, PoissonSeeds(), 10, min_cell_distance=0.0, rng=np.random.default_rng(10))
        assert len(seeds) >= 2


class TestDegenerateInput:
    @pytest.mark.parametrize("pattern", [RandomSeeds(), GridSeeds(), RadialSeeds(), SpiderwebSeeds(), PoissonSeeds()])
    def test_degenerate_polygon(self, pattern) -> None:
        line = Polygon.from_tuples([(0, 0), (10, 10)])
        assert generate_seeds(line, pattern, 10, rng=np.random.default_rng(0)) == []
