"""Slice-based fracture: one cut line, or many applied in sequence.

Pattern cut lines are long segments through the polygon's bounding box and
act as infinite lines. Caller-supplied cuts (single slice, manual
multi-slice) are finite strokes: a stroke only cuts a polygon whose boundary
it crosses at least twice.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from cutout.config import (
    ChaoticSlices,
    GridSlices,
    ManualSlices,
    MultiSliceConfig,
    ParallelSlices,
    RadialSlices,
    SliceConfig,
    SlicePattern,
)
from cutout.core import boolean
from cutout.core.bisection import MIN_LINE_LENGTH, bisect
from cutout.core.fracture import FractureAlgorithm
from cutout.core.geometry import distance, segment_crossings
from cutout.domain import Bounds, Point, Polygon, PolygonWithHoles

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi

# Parallel cuts with less angular randomness than this use interval culling
PARALLEL_FAST_PATH_THRESHOLD = 0.4

Segment = tuple[Point, Point]


def _segment(center: Point, angle: float, half_length: float) -> Segment:
    dx, dy = math.cos(angle), math.sin(angle)
    return (
        Point(center.x - dx * half_length, center.y - dy * half_length),
        Point(center.x + dx * half_length, center.y + dy * half_length),
    )


def _parallel_lines(pattern: ParallelSlices, bounds: Bounds, rng: np.random.Generator) -> list[Segment]:
    center = bounds.center
    max_extent = max(bounds.width, bounds.height)
    base_angle = math.radians(pattern.angle)
    max_deviation = math.radians(45.0 * pattern.angle_randomness)
    spacing = max_extent * 2.0 / (pattern.slice_count + 1)

    lines = []
    for i in range(1, pattern.slice_count + 1):
        angle = base_angle
        if pattern.angle_randomness > 0:
            angle += float(rng.uniform(-max_deviation, max_deviation))
        px, py = -math.sin(angle), math.cos(angle)
        offset = i * spacing - max_extent
        lines.append(_segment(Point(center.x + px * offset, center.y + py * offset), angle, max_extent))
    return lines


def generate_slice_lines(pattern: SlicePattern, bounds: Bounds, rng: np.random.Generator) -> list[Segment]:
    """Generate cut lines for a slice pattern around a bounding box.

    Args:
        pattern: Slice pattern and its parameters
        bounds: Bounding box of the polygon being cut
        rng: Random generator for jitter

    Returns:
        Cut segments, in application order
    """
    center = bounds.center
    max_extent = max(bounds.width, bounds.height)

    if isinstance(pattern, ManualSlices):
        return [(Point(*a), Point(*b)) for a, b in pattern.segments]

    if isinstance(pattern, RadialSlices):
        origin = Point(*pattern.origin) if pattern.origin is not None else center
        step = TAU / pattern.slice_count
        lines = []
        for i in range(pattern.slice_count):
            angle = i * step
            if pattern.randomness > 0:
                deviation = step * pattern.randomness * 0.5
                angle += float(rng.uniform(-deviation, deviation))
            lines.append(_segment(origin, angle, max_extent))
        return lines

    if isinstance(pattern, ParallelSlices):
        return _parallel_lines(pattern, bounds, rng)

    if isinstance(pattern, GridSlices):
        lines = []
        h_spacing = bounds.width / (pattern.vertical_slices + 1)
        v_spacing = bounds.height / (pattern.horizontal_slices + 1)

        for i in range(pattern.vertical_slices):
            x = bounds.min_x + pattern.vertical_offset + (i + 1) * h_spacing
            if pattern.vertical_jitter > 0:
                jitter = h_spacing * pattern.vertical_jitter * 0.5
                x += float(rng.uniform(-jitter, jitter))
            angle = math.radians(90.0)
            if pattern.vertical_angle_randomness > 0:
                deviation = math.radians(45.0 * pattern.vertical_angle_randomness)
                angle += float(rng.uniform(-deviation, deviation))
            lines.append(_segment(Point(x, center.y), angle, max_extent))

        for i in range(pattern.horizontal_slices):
            y = bounds.min_y + pattern.horizontal_offset + (i + 1) * v_spacing
            if pattern.horizontal_jitter > 0:
                jitter = v_spacing * pattern.horizontal_jitter * 0.5
                y += float(rng.uniform(-jitter, jitter))
            angle = 0.0
            if pattern.horizontal_angle_randomness > 0:
                deviation = math.radians(45.0 * pattern.horizontal_angle_randomness)
                angle += float(rng.uniform(-deviation, deviation))
            lines.append(_segment(Point(center.x, y), angle, max_extent))

        return lines

    if isinstance(pattern, ChaoticSlices):
        lines = []
        for _ in range(pattern.slice_count):
            angle = float(rng.uniform(0.0, TAU))
            offset = Point(
                float(rng.uniform(-max_extent * 0.5, max_extent * 0.5)),
                float(rng.uniform(-max_extent * 0.5, max_extent * 0.5)),
            )
            lines.append(_segment(Point(center.x + offset.x, center.y + offset.y), angle, max_extent))
        return lines

    raise TypeError(f"Unsupported slice pattern: {type(pattern).__name__}")


def cut(polygon: Polygon, start: Point, end: Point, finite: bool = False) -> list[Polygon]:
    """Cut one hole-free polygon; returns [] when the cut does not split it."""
    if distance(start, end) < MIN_LINE_LENGTH:
        return []
    if finite and segment_crossings(polygon.points, start, end) < 2:
        return []

    left, right = bisect(PolygonWithHoles(polygon), start, end)
    if not left or not right:
        return []
    return left + right


def apply_slices(outer: Polygon, segments: Sequence[Segment], finite: bool = False) -> list[Polygon]:
    """Apply cuts in order to a working set that starts as the outer ring.

    A fragment a cut does not split passes through unchanged.
    """
    current = [outer]
    for start, end in segments:
        next_fragments: list[Polygon] = []
        for fragment in current:
            pieces = cut(fragment, start, end, finite)
            next_fragments.extend(pieces if pieces else [fragment])
        current = next_fragments
    return current


def _projection_interval(points: Sequence[Point], perp: tuple[float, float], max_deviation: float) -> tuple[float, float]:
    """Projection range onto ``perp``, widened over the rotated axes at +/- ``max_deviation``."""
    angles = (0.0,) if max_deviation == 0 else (0.0, -max_deviation, max_deviation)
    lo = math.inf
    hi = -math.inf
    for a in angles:
        cos_a, sin_a = math.cos(a), math.sin(a)
        tx = perp[0] * cos_a - perp[1] * sin_a
        ty = perp[0] * sin_a + perp[1] * cos_a
        for p in points:
            proj = p.x * tx + p.y * ty
            lo = min(lo, proj)
            hi = max(hi, proj)
    return lo, hi


def apply_parallel_slices(outer: Polygon, segments: Sequence[Segment], base_angle: float, max_deviation: float) -> list[Polygon]:
    """Apply near-parallel cuts, skipping fragments a cut cannot reach.

    Fragments are kept sorted by the low end of their projection interval
    onto the axis perpendicular to the base cut direction. A cut at most
    ``max_deviation`` off that direction can only move within
    +/- sin(max_deviation) * R of its centre's projection, R being the
    distance from the cut centre to the farthest corner of the outer
    bounds. Fragments entirely outside that interval are not bisected.
    """
    perp = (-math.sin(base_angle), math.cos(base_angle))
    corners = outer.bounding_box().corners()
    spread = abs(math.sin(max_deviation))

    entries = [(*_projection_interval(outer.points, perp, max_deviation), outer)]
    skipped = 0

    for start, end in segments:
        center = Point((start.x + end.x) / 2.0, (start.y + end.y) / 2.0)
        reach = spread * max(distance(center, c) for c in corners)
        cut_proj = center.x * perp[0] + center.y * perp[1]
        cut_lo, cut_hi = cut_proj - reach, cut_proj + reach

        next_entries = []
        for index, (lo, hi, fragment) in enumerate(entries):
            if lo > cut_hi:
                # Sorted by lo: everything after is out of reach too
                skipped += len(entries) - index
                next_entries.extend(entries[index:])
                break
            if hi < cut_lo:
                skipped += 1
                next_entries.append((lo, hi, fragment))
                continue

            pieces = cut(fragment, start, end)
            if not pieces:
                next_entries.append((lo, hi, fragment))
                continue
            for piece in pieces:
                next_entries.append((*_projection_interval(piece.points, perp, max_deviation), piece))

        next_entries.sort(key=lambda entry: entry[0])
        entries = next_entries

    logger.debug("Parallel slicing skipped %d fragment/cut pairs", skipped)
    return [fragment for _, _, fragment in entries]


class SliceFracture(FractureAlgorithm):
    """Split a polygon into two sides of one cut stroke."""

    name = "Slice"

    def __init__(self, config: SliceConfig) -> None:
        super().__init__(config)
        self.config: SliceConfig = config

    def _fracture(self, shape: PolygonWithHoles) -> list[Polygon]:
        start = Point(*self.config.line_start)
        end = Point(*self.config.line_end)

        if distance(start, end) < MIN_LINE_LENGTH:
            logger.debug("Slice: zero-length line")
            return []
        if segment_crossings(shape.outer.points, start, end) < 2:
            logger.debug("Slice: stroke does not cross the polygon")
            return []

        left, right = bisect(shape, start, end)
        return left + right


class MultiSliceFracture(FractureAlgorithm):
    """Apply a sequence of cuts from a pattern or a manual list."""

    name = "Multi-Slice"

    def __init__(self, config: MultiSliceConfig) -> None:
        super().__init__(config)
        self.config: MultiSliceConfig = config

    def _fracture(self, shape: PolygonWithHoles) -> list[Polygon]:
        pattern = self.config.pattern
        segments = generate_slice_lines(pattern, shape.outer.bounding_box(), self.rng())
        segments = [(a, b) for a, b in segments if distance(a, b) >= MIN_LINE_LENGTH]
        if not segments:
            return []

        if isinstance(pattern, ParallelSlices) and pattern.angle_randomness < PARALLEL_FAST_PATH_THRESHOLD:
            fragments = apply_parallel_slices(
                shape.outer,
                segments,
                math.radians(pattern.angle),
                math.radians(45.0 * pattern.angle_randomness),
            )
        else:
            fragments = apply_slices(shape.outer, segments, finite=isinstance(pattern, ManualSlices))

        # Holes are subtracted once, after every cut
        pieces = boolean.subtract_holes([f.points for f in fragments], shape.holes)
        return [Polygon(points=p) for p in pieces if len(p) >= 3]
