"""Tests for outward smoothing."""

import math

import pytest
from shapely.geometry import Polygon as ShapelyPolygon

from cutout.config import OutwardSmoothConfig
from cutout.core.geometry import point_in_polygon
from cutout.core.smooth import OutwardSmoother, expand_outward, interior_angle
from cutout.domain import Point, Polygon


def circle(count: int = 64, radius: float = 40.0, clockwise: bool = True) -> Polygon:
    sign = -1.0 if clockwise else 1.0
    return Polygon(
        points=[
            Point(50 + radius * math.cos(sign * 2 * math.pi * i / count), 50 + radius * math.sin(sign * 2 * math.pi * i / count))
            for i in range(count)
        ]
    )


def star(points: int = 7, outer: float = 40.0, inner: float = 18.0) -> Polygon:
    """Concave star, clockwise."""
    result = []
    for i in range(points * 2):
        r = outer if i % 2 == 0 else inner
        angle = -math.pi * i / points
        result.append(Point(50 + r * math.cos(angle), 50 + r * math.sin(angle)))
    return Polygon(points=result)


def to_shapely(polygon: Polygon) -> ShapelyPolygon:
    return ShapelyPolygon(polygon.to_tuples())


SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


class TestExpandOutward:
    """Tests for the miter offset pass."""

    def test_square_corners_offset_by_radius(self) -> None:
        expanded = expand_outward(SQUARE, radius=1.0, miter_limit=2.0)
        expected = [(-1, -1), (11, -1), (11, 11), (-1, 11)]
        for point, (x, y) in zip(expanded, expected):
            assert point.x == pytest.approx(x)
            assert point.y == pytest.approx(y)

    def test_clockwise_input_expands_too(self) -> None:
        expanded = expand_outward(SQUARE[::-1], radius=1.0, miter_limit=2.0)
        assert expanded[0].x == pytest.approx(-1)
        assert expanded[0].y == pytest.approx(11)

    def test_miter_limit_clamps_corners(self) -> None:
        expanded = expand_outward(SQUARE, radius=1.0, miter_limit=1.0)
        assert expanded[0].x == pytest.approx(-math.sqrt(0.5))
        assert expanded[0].y == pytest.approx(-math.sqrt(0.5))

    def test_zero_radius(self) -> None:
        assert expand_outward(SQUARE, radius=0.0, miter_limit=2.0) == SQUARE


class TestInteriorAngle:
    def test_right_angle(self) -> None:
        assert interior_angle(Point(0, 10), Point(0, 0), Point(10, 0)) == pytest.approx(90.0)

    def test_straight(self) -> None:
        assert interior_angle(Point(-1, 0), Point(0, 0), Point(1, 0)) == pytest.approx(180.0)

    def test_degenerate_edge(self) -> None:
        assert interior_angle(Point(0, 0), Point(0, 0), Point(1, 0)) == 180.0


class TestOutwardSmoother:
    """Tests for the full smoother."""

    @pytest.mark.parametrize("shape", [circle(), circle(clockwise=False), star()])
    def test_result_contains_original(self, shape: Polygon) -> None:
        smoothed = OutwardSmoother(OutwardSmoothConfig()).smooth(shape)
        assert to_shapely(smoothed).buffer(1e-6).contains(to_shapely(shape))

    @pytest.mark.parametrize("shape", [circle(), circle(clockwise=False), star()])
    def test_winding_preserved(self, shape: Polygon) -> None:
        smoothed = OutwardSmoother(OutwardSmoothConfig()).smooth(shape)
        assert (smoothed.signed_area() < 0) == (shape.signed_area() < 0)

    def test_area_grows(self) -> None:
        shape = circle()
        smoothed = OutwardSmoother(OutwardSmoothConfig(expansion_radius=3.0)).smooth(shape)
        assert smoothed.area() > shape.area()

    def test_point_count_unchanged(self) -> None:
        shape = star()
        assert len(OutwardSmoother(OutwardSmoothConfig()).smooth(shape)) == len(shape)

    def test_corners_preserved(self) -> None:
        """Corners sharper than the threshold are never moved."""
        config = OutwardSmoothConfig(
            expansion_radius=1.0, preserve_corners=True, corner_threshold=100.0, constrain_smoothing=False
        )
        smoothed = OutwardSmoother(config).smooth(Polygon(points=list(SQUARE)))
        expected = expand_outward(SQUARE, 1.0, config.miter_limit)
        assert smoothed.points == expected

    def test_unconstrained_can_cut_inside(self) -> None:
        config = OutwardSmoothConfig(
            expansion_radius=1.0, preserve_corners=False, constrain_smoothing=False, iterations=1
        )
        smoothed = OutwardSmoother(config).smooth(Polygon(points=list(SQUARE)))
        assert any(point_in_polygon(p, SQUARE) for p in smoothed.points)

    def test_constrained_square_stays_outside(self) -> None:
        config = OutwardSmoothConfig(expansion_radius=1.0, preserve_corners=False, iterations=1)
        smoothed = OutwardSmoother(config).smooth(Polygon(points=list(SQUARE)))
        assert not any(point_in_polygon(p, SQUARE) for p in smoothed.points)

    def test_no_iterations_is_pure_expansion(self) -> None:
        shape = circle()
        config = OutwardSmoothConfig(iterations=0)
        smoothed = OutwardSmoother(config).smooth(shape)
        assert smoothed.points == expand_outward(shape.points, config.expansion_radius, config.miter_limit)

    def test_degenerate_input_unchanged(self) -> None:
        line = Polygon.from_tuples([(0, 0), (5, 5)])
        assert OutwardSmoother(OutwardSmoothConfig()).smooth(line) == line

    def test_input_not_modified(self) -> None:
        shape = circle()
        before = list(shape.points)
        OutwardSmoother(OutwardSmoothConfig()).smooth(shape)
        assert shape.points == before
