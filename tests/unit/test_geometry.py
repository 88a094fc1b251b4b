"""Tests for geometry utilities, boolean operations, bisection and triangulation."""

import math

import pytest

from cutout.core import boolean
from cutout.core.bisection import bisect, bisect_convex
from cutout.core.geometry import (
    clip_half_plane,
    is_convex,
    line_intersection,
    point_in_polygon,
    point_line_distance,
    point_segment_distance,
    segment_crossings,
    segment_intersection,
    signed_area,
)
from cutout.core.triangulation import clean_points, ear_clip, triangulate
from cutout.domain import Point, Polygon, PolygonWithHoles
from cutout.exceptions import TriangulationError


def ring(*coords: tuple[float, float]) -> list[Point]:
    return [Point(x, y) for x, y in coords]


SQUARE = ring((0, 0), (10, 0), (10, 10), (0, 10))
U_SHAPE = ring((0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30))
BOW_TIE = ring((0, 0), (10, 10), (10, 0), (0, 10))


def total_area(polygons: list[Polygon]) -> float:
    return sum(p.area() for p in polygons)


class TestPrimitives:
    """Tests for area, containment and distances."""

    def test_signed_area_sign(self) -> None:
        assert signed_area(SQUARE) == pytest.approx(100.0)
        assert signed_area(SQUARE[::-1]) == pytest.approx(-100.0)
        assert signed_area(SQUARE[:2]) == 0.0

    def test_point_in_polygon(self) -> None:
        assert point_in_polygon(Point(5, 5), SQUARE)
        assert not point_in_polygon(Point(15, 5), SQUARE)
        assert not point_in_polygon(Point(15, 20), U_SHAPE)
        assert point_in_polygon(Point(5, 20), U_SHAPE)

    def test_point_in_polygon_boundary_is_half_open(self) -> None:
        """Left edge counts as inside, right edge as outside."""
        assert point_in_polygon(Point(0, 5), SQUARE)
        assert not point_in_polygon(Point(10, 5), SQUARE)

    def test_point_in_degenerate_polygon(self) -> None:
        assert not point_in_polygon(Point(0, 0), SQUARE[:2])

    def test_point_segment_distance(self) -> None:
        start, end = Point(0, 0), Point(10, 0)
        assert point_segment_distance(Point(5, 3), start, end) == pytest.approx(3.0)
        assert point_segment_distance(Point(13, 4), start, end) == pytest.approx(5.0)
        assert point_segment_distance(Point(3, 4), start, start) == pytest.approx(5.0)

    def test_point_line_distance_uses_infinite_line(self) -> None:
        assert point_line_distance(Point(13, 4), Point(0, 0), Point(10, 0)) == pytest.approx(4.0)
        assert point_line_distance(Point(3, 4), Point(1, 1), Point(1, 1)) == pytest.approx(math.hypot(2, 3))


class TestIntersections:
    """Tests for line and segment intersection."""

    def test_line_intersection(self) -> None:
        hit = line_intersection(Point(0, 0), Point(1, 1), Point(0, 1), Point(1, 0))
        assert hit is not None
        assert hit.x == pytest.approx(0.5)
        assert hit.y == pytest.approx(0.5)

    def test_lines_extend_past_points(self) -> None:
        hit = line_intersection(Point(0, 0), Point(1, 0), Point(5, 1), Point(5, 2))
        assert hit == Point(5, 0)

    def test_parallel_lines(self) -> None:
        assert line_intersection(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)) is None

    def test_segment_endpoints_inclusive(self) -> None:
        assert segment_intersection(Point(0, 0), Point(1, 0), Point(1, 0), Point(1, 1)) == Point(1, 0)

    def test_segments_that_miss(self) -> None:
        assert segment_intersection(Point(0, 0), Point(1, 0), Point(5, -1), Point(5, 1)) is None

    def test_segment_crossings(self) -> None:
        assert segment_crossings(SQUARE, Point(-5, 5), Point(15, 5)) == 2
        assert segment_crossings(SQUARE, Point(-5, 5), Point(5, 5)) == 1
        assert segment_crossings(SQUARE, Point(2, 2), Point(8, 8)) == 0


class TestConvexityAndClipping:
    def test_is_convex(self) -> None:
        assert is_convex(SQUARE)
        assert is_convex(SQUARE[::-1])
        assert not is_convex(U_SHAPE)

    def test_is_convex_small_inputs(self) -> None:
        assert is_convex(SQUARE[:3])
        assert not is_convex(SQUARE[:2])

    def test_collinear_vertices_ignored(self) -> None:
        with_midpoint = ring((0, 0), (5, 0), (10, 0), (10, 10), (0, 10))
        assert is_convex(with_midpoint)

    def test_clip_half_plane(self) -> None:
        clipped = clip_half_plane(SQUARE, Point(5, 0), Point(1, 0))
        assert abs(signed_area(clipped)) == pytest.approx(50.0)
        assert all(p.x >= 5 - 1e-9 for p in clipped)

    def test_clip_keeps_everything(self) -> None:
        clipped = clip_half_plane(SQUARE, Point(-5, 0), Point(1, 0))
        assert clipped == SQUARE

    def test_clip_removes_everything(self) -> None:
        assert clip_half_plane(SQUARE, Point(20, 0), Point(1, 0)) == []


class TestBoolean:
    """Tests for the shapely-backed boolean helpers."""

    def test_intersect_follows_subject_winding(self) -> None:
        other = ring((5, 5), (15, 5), (15, 15), (5, 15))
        clockwise = SQUARE[::-1]

        pieces = boolean.intersect(clockwise, other)

        assert len(pieces) == 1
        assert signed_area(pieces[0]) == pytest.approx(-25.0)

    def test_intersect_disjoint(self) -> None:
        assert boolean.intersect(SQUARE, ring((20, 20), (30, 20), (30, 30))) == []

    def test_difference_splits_interior_hole(self) -> None:
        """A hole strictly inside yields simple rings with the same total area."""
        hole = ring((4, 4), (6, 4), (6, 6), (4, 6))
        pieces = boolean.difference(SQUARE, hole)

        assert len(pieces) >= 2
        assert sum(signed_area(p) for p in pieces) == pytest.approx(96.0)

    def test_self_intersecting_input_repaired(self) -> None:
        pieces = boolean.intersect(BOW_TIE, ring((-5, -5), (15, -5), (15, 15), (-5, 15)))
        assert sum(abs(signed_area(p)) for p in pieces) == pytest.approx(50.0)

    def test_subtract_holes_skips_distant_holes(self) -> None:
        far_hole = Polygon.from_tuples([(50, 50), (60, 50), (60, 60)])
        assert boolean.subtract_holes([SQUARE], [far_hole]) == [SQUARE]

    def test_subtract_covering_hole(self) -> None:
        cover = Polygon.from_tuples([(-1, -1), (11, -1), (11, 11), (-1, 11)])
        assert boolean.subtract_holes([SQUARE], [cover]) == []


class TestBisect:
    """Tests for polygon bisection."""

    def test_diagonal_cut_of_square(self) -> None:
        """A line through the middle of a 200 x 200 square splits it in two."""
        square = Polygon.from_tuples([(0, 0), (200, 0), (200, 200), (0, 200)])
        left, right = bisect(PolygonWithHoles(square), Point(-100, 0), Point(300, 200))

        assert len(left) == 1
        assert len(right) == 1
        assert total_area(left) + total_area(right) == pytest.approx(40000.0)
        assert total_area(left) == pytest.approx(20000.0)
        # Left of the direction of travel is towards +y
        assert left[0].bounding_box().max_y == pytest.approx(200.0)

    def test_line_missing_polygon(self) -> None:
        left, right = bisect(PolygonWithHoles(Polygon(points=SQUARE)), Point(-5, 20), Point(15, 20))
        assert left == []
        assert len(right) == 1
        assert right[0].area() == pytest.approx(100.0)

    def test_zero_length_line(self) -> None:
        assert bisect(PolygonWithHoles(Polygon(points=SQUARE)), Point(5, 5), Point(5, 5)) == ([], [])

    def test_degenerate_polygon(self) -> None:
        shape = PolygonWithHoles(Polygon(points=SQUARE[:2]))
        assert bisect(shape, Point(0, 0), Point(1, 1)) == ([], [])

    def test_concave_cut_through_both_arms(self) -> None:
        left, right = bisect(PolygonWithHoles(Polygon(points=U_SHAPE)), Point(-10, 20), Point(40, 20))

        assert len(left) == 2
        assert len(right) == 1
        assert total_area(left) == pytest.approx(200.0)
        assert total_area(right) == pytest.approx(500.0)

    def test_holes_subtracted(self) -> None:
        outer = Polygon.from_tuples([(0, 0), (0, 100), (100, 100), (100, 0)])
        hole = Polygon.from_tuples([(25, 25), (75, 25), (75, 75), (25, 75)])

        left, right = bisect(PolygonWithHoles(outer, [hole]), Point(50, -10), Point(50, 110))

        assert total_area(left) == pytest.approx(3750.0)
        assert total_area(right) == pytest.approx(3750.0)
        assert all(p.bounding_box().max_x <= 50 + 1e-9 for p in left)
        assert all(p.signed_area() < 0 for p in left + right)

    def test_convex_path_keeps_winding(self) -> None:
        clockwise = SQUARE[::-1]
        left, right = bisect_convex(clockwise, Point(5, -1), Point(5, 11))
        assert all(signed_area(r) < 0 for r in left + right)
        assert sum(abs(signed_area(r)) for r in left + right) == pytest.approx(100.0)


class TestTriangulation:
    """Tests for the triangulation fallback chain."""

    def test_square(self) -> None:
        result = triangulate(SQUARE)
        assert result.method == "constrained_delaunay"
        assert result.triangle_count == 2
        assert result.area() == pytest.approx(100.0)

    def test_concave_follows_outline(self) -> None:
        result = triangulate(U_SHAPE)
        assert result.method == "constrained_delaunay"
        assert result.triangle_count == len(U_SHAPE) - 2
        assert result.area() == pytest.approx(700.0)

    def test_self_intersecting_falls_back_to_hull(self) -> None:
        result = triangulate(BOW_TIE)
        assert result.method == "convex_hull"
        assert result.area() == pytest.approx(100.0)

    def test_collinear_points(self) -> None:
        result = triangulate(ring((0, 0), (1, 1), (2, 2)))
        assert result.triangle_count == 0

    def test_too_few_points(self) -> None:
        assert triangulate(SQUARE[:2]).triangle_count == 0

    def test_ear_clip_concave(self) -> None:
        indices = ear_clip(U_SHAPE)
        assert len(indices) == 3 * (len(U_SHAPE) - 2)
        area = sum(
            abs(signed_area([U_SHAPE[indices[i]], U_SHAPE[indices[i + 1]], U_SHAPE[indices[i + 2]]]))
            for i in range(0, len(indices), 3)
        )
        assert area == pytest.approx(700.0)

    def test_ear_clip_either_winding(self) -> None:
        assert len(ear_clip(U_SHAPE[::-1])) == 18

    def test_ear_clip_rejects_degenerate(self) -> None:
        with pytest.raises(TriangulationError):
            ear_clip(ring((0, 0), (1, 1), (2, 2)))
        with pytest.raises(TriangulationError):
            ear_clip(SQUARE[:2])

    def test_clean_points_merges_neighbours(self) -> None:
        noisy = ring((0, 0), (0, 0.0001), (10, 0), (10, 10), (0, 0.0002))
        assert clean_points(noisy) == ring((0, 0), (10, 0), (10, 10))
