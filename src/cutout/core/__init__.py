"""Core processing algorithms for cutout.

This module contains the core algorithms for:

- Bitmap sampling from image alpha channels
- Contour extraction (Moore-Neighbor, Marching Squares)
- Polygon simplification (RDP, Reumann-Witkam, Visvalingam-Whyatt)
- Outward smoothing
- Geometry utilities (area, point-in-polygon, clipping, bisection,
  triangulation)
- Destruction (Voronoi, slice and multi-slice fracture)

All algorithms are designed to be:
- Stateless between calls (safe for use in worker processes)
- Pure (no side effects on their inputs)

Key classes:
- MooreNeighbor / MarchingSquares: Contour extractors
- RamerDouglasPeucker / ReumannWitkam / VisvalingamWhyatt: Simplifiers
- OutwardSmoother: Smoother
- VoronoiFracture / SliceFracture / MultiSliceFracture: Fracture algorithms
- CutoutProcessor: Pipeline and batch orchestration
"""

from cutout.core.bisection import bisect
from cutout.core.bitmap import Bitmap, build
from cutout.core.geometry import (
    clip_half_plane,
    is_convex,
    line_intersection,
    point_in_polygon,
    signed_area,
)
from cutout.core.marching_squares import MarchingSquares
from cutout.core.moore_neighbor import MooreNeighbor
from cutout.core.processor import CutoutProcessor, run_pipeline
from cutout.core.registry import REGISTRY, AlgorithmFamily, get_entry, list_algorithms
from cutout.core.seeds import generate_seeds
from cutout.core.simplify import RamerDouglasPeucker, ReumannWitkam, VisvalingamWhyatt
from cutout.core.slice import MultiSliceFracture, SliceFracture
from cutout.core.smooth import OutwardSmoother
from cutout.core.triangulation import Triangulation, triangulate
from cutout.core.voronoi import VoronoiFracture

__all__ = [
    "REGISTRY",
    "AlgorithmFamily",
    "Bitmap",
    "CutoutProcessor",
    "MarchingSquares",
    "MooreNeighbor",
    "MultiSliceFracture",
    "OutwardSmoother",
    "RamerDouglasPeucker",
    "ReumannWitkam",
    "SliceFracture",
    "Triangulation",
    "VisvalingamWhyatt",
    "VoronoiFracture",
    "bisect",
    "build",
    "clip_half_plane",
    "generate_seeds",
    "get_entry",
    "is_convex",
    "line_intersection",
    "list_algorithms",
    "point_in_polygon",
    "run_pipeline",
    "signed_area",
    "triangulate",
]
