"""Tests for winding direction preservation across the pipeline.

Solid outlines are clockwise (negative signed area) in pixel space. Every
stage that rewrites a polygon must keep that sign, otherwise a consumer
treating counter-clockwise rings as holes would drop the fragment.
"""

import math

import pytest

from cutout.config import (
    ChaoticSlices,
    MultiSliceConfig,
    OutwardSmoothConfig,
    RadialSlices,
    RDPConfig,
    ReumannWitkamConfig,
    SliceConfig,
    VisvalingamWhyattConfig,
    VoronoiConfig,
)
from cutout.core import OutwardSmoother, RamerDouglasPeucker, ReumannWitkam, VisvalingamWhyatt, bisect
from cutout.core.registry import AlgorithmFamily, create
from cutout.domain import Point, Polygon, PolygonWithHoles, WindingDirection


def blob(count: int = 90) -> Polygon:
    """Clockwise wobbly outline, concave in places."""
    points = []
    for i in range(count):
        angle = -2 * math.pi * i / count
        r = 40 + 8 * math.sin(5 * angle)
        points.append(Point(50 + r * math.cos(angle), 50 + r * math.sin(angle)))
    return Polygon(points=points)


@pytest.fixture
def solid() -> Polygon:
    polygon = blob()
    assert polygon.winding == WindingDirection.CLOCKWISE
    return polygon


@pytest.fixture
def holed(solid: Polygon) -> PolygonWithHoles:
    hole = Polygon.from_tuples([(45, 45), (55, 45), (55, 55), (45, 55)])
    return PolygonWithHoles(outer=solid, holes=[hole])


def count_by_winding(polygons: list[Polygon]) -> dict[WindingDirection | None, int]:
    counts: dict[WindingDirection | None, int] = {}
    for p in polygons:
        counts[p.winding] = counts.get(p.winding, 0) + 1
    return counts


class TestRefinementKeepsWinding:
    @pytest.mark.parametrize(
        "refiner",
        [
            RamerDouglasPeucker(RDPConfig(epsilon=2.0)),
            ReumannWitkam(ReumannWitkamConfig(epsilon=2.0)),
            VisvalingamWhyatt(VisvalingamWhyattConfig(min_area=5.0)),
        ],
    )
    def test_simplifiers(self, solid: Polygon, refiner) -> None:
        assert refiner.simplify(solid).winding == WindingDirection.CLOCKWISE

    def test_smoother(self, solid: Polygon) -> None:
        smoothed = OutwardSmoother(OutwardSmoothConfig(expansion_radius=3.0)).smooth(solid)
        assert smoothed.winding == WindingDirection.CLOCKWISE

    def test_smoother_counter_clockwise(self, solid: Polygon) -> None:
        smoothed = OutwardSmoother(OutwardSmoothConfig()).smooth(solid.reversed())
        assert smoothed.winding == WindingDirection.COUNTER_CLOCKWISE


class TestFragmentsKeepWinding:
    @pytest.mark.parametrize(
        "config",
        [
            VoronoiConfig(fragment_count=12, seed=42),
            SliceConfig(line_start=(0, 30), line_end=(100, 70)),
            MultiSliceConfig(pattern=RadialSlices(slice_count=5, randomness=0.3), seed=2),
            MultiSliceConfig(pattern=ChaoticSlices(slice_count=6), seed=8),
        ],
    )
    def test_fragments_are_solid(self, holed: PolygonWithHoles, config) -> None:
        fragments = create(AlgorithmFamily.DESTRUCTION, config).fracture(holed)

        assert len(fragments) >= 2
        counts = count_by_winding(fragments)
        assert counts == {WindingDirection.CLOCKWISE: len(fragments)}
        assert sum(f.area() for f in fragments) == pytest.approx(holed.net_area(), rel=1e-6)

    def test_bisect_concave_with_hole(self, holed: PolygonWithHoles) -> None:
        left, right = bisect(holed, Point(0, 50), Point(100, 50))
        assert left and right
        assert all(p.winding == WindingDirection.CLOCKWISE for p in left + right)

    def test_counter_clockwise_subject_stays_counter_clockwise(self, solid: Polygon) -> None:
        shape = PolygonWithHoles(outer=solid.reversed())
        fragments = create(AlgorithmFamily.DESTRUCTION, VoronoiConfig(fragment_count=5, seed=4)).fracture(shape)
        assert all(f.winding == WindingDirection.COUNTER_CLOCKWISE for f in fragments)
