"""Polygon boolean operations backed by shapely.

Rings cross the boundary as lists of ``Point``; shapely geometries never
leak out of this module. Results are flattened to simple rings (no interior
holes) and oriented to the winding sign of the subject ring, so a solid
(clockwise) input always yields solid fragments.
"""

import logging
from collections.abc import Iterable, Sequence

from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from cutout.core.geometry import signed_area
from cutout.domain import Bounds, Point, Polygon

logger = logging.getLogger(__name__)

# Pieces smaller than this are boolean-op slivers
MIN_PIECE_AREA = 1e-9


def to_shapely(points: Sequence[Point]) -> BaseGeometry:
    """Convert a ring to a valid shapely geometry.

    Self-intersecting rings are repaired with ``make_valid``, which may
    return a MultiPolygon or GeometryCollection.
    """
    geom = ShapelyPolygon([(p.x, p.y) for p in points])
    if not geom.is_valid:
        geom = make_valid(geom)
    return geom


def _iter_polygons(geom: BaseGeometry) -> Iterable[ShapelyPolygon]:
    if geom.is_empty:
        return
    if isinstance(geom, ShapelyPolygon):
        yield geom
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            yield from _iter_polygons(part)


def _split_interiors(poly: ShapelyPolygon) -> list[ShapelyPolygon]:
    """Split a polygon through its holes until no piece has an interior ring.

    Each hole is cut by a vertical line through a point inside it, turning
    the hole into a notch on both halves.
    """
    if not poly.interiors:
        return [poly]

    hole = ShapelyPolygon(poly.interiors[0])
    cut_x = hole.representative_point().x
    min_x, min_y, max_x, max_y = poly.bounds

    pieces: list[ShapelyPolygon] = []
    for half in (
        box(min_x - 1.0, min_y - 1.0, cut_x, max_y + 1.0),
        box(cut_x, min_y - 1.0, max_x + 1.0, max_y + 1.0),
    ):
        for part in _iter_polygons(poly.intersection(half)):
            if part.area > MIN_PIECE_AREA:
                pieces.extend(_split_interiors(part))
    return pieces


def _to_rings(geom: BaseGeometry, winding_sign: float) -> list[list[Point]]:
    rings: list[list[Point]] = []
    for poly in _iter_polygons(geom):
        for piece in _split_interiors(poly):
            if piece.area <= MIN_PIECE_AREA:
                continue
            coords = list(piece.exterior.coords)
            if len(coords) > 1 and coords[0] == coords[-1]:
                coords = coords[:-1]
            ring = [Point(float(x), float(y)) for x, y in coords]
            if len(ring) < 3:
                continue
            if signed_area(ring) * winding_sign < 0:
                ring.reverse()
            rings.append(ring)
    return rings


def _winding_sign(points: Sequence[Point]) -> float:
    return 1.0 if signed_area(points) > 0 else -1.0


def intersect(subject: Sequence[Point], clip: Sequence[Point]) -> list[list[Point]]:
    """Intersect two rings.

    Args:
        subject: Ring whose winding the output follows
        clip: Ring to intersect with

    Returns:
        Simple rings covering the intersection (possibly empty)
    """
    if len(subject) < 3 or len(clip) < 3:
        return []
    result = to_shapely(subject).intersection(to_shapely(clip))
    return _to_rings(result, _winding_sign(subject))


def difference(subject: Sequence[Point], clip: Sequence[Point]) -> list[list[Point]]:
    """Subtract ``clip`` from ``subject``.

    A clip ring lying strictly inside the subject would leave a hole; the
    result is split through it so every returned ring is simple.
    """
    if len(subject) < 3:
        return []
    if len(clip) < 3:
        return [list(subject)]
    result = to_shapely(subject).difference(to_shapely(clip))
    return _to_rings(result, _winding_sign(subject))


def subtract_holes(fragments: Sequence[Sequence[Point]], holes: Sequence[Polygon]) -> list[list[Point]]:
    """Subtract every hole from every fragment, skipping non-overlapping pairs.

    A hole is only considered for a fragment whose bounding box it overlaps.

    Args:
        fragments: Rings to cut holes from
        holes: Hole rings

    Returns:
        Resulting rings; fragments fully covered by a hole disappear
    """
    valid_holes = [h for h in holes if len(h.points) >= 3]
    if not valid_holes:
        return [list(f) for f in fragments]

    result: list[list[Point]] = []
    for fragment in fragments:
        pieces = [list(fragment)]
        for hole in valid_holes:
            hole_bounds = hole.bounding_box()
            next_pieces: list[list[Point]] = []
            for piece in pieces:
                if not Bounds.from_points(piece).intersects(hole_bounds):
                    next_pieces.append(piece)
                    continue
                next_pieces.extend(difference(piece, hole.points))
            pieces = next_pieces
        result.extend(pieces)

    logger.debug("Subtracted %d holes: %d -> %d fragments", len(valid_holes), len(fragments), len(result))
    return result
