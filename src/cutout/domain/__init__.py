"""Domain models for cutout.

This module contains the value types that flow through the geometry
pipeline. All models are designed to be:

- Passed by value between pipeline stages (no aliasing across stages)
- Serializable for inter-process communication (batch processing)
- Independent of shapely, numpy and Pillow

Key classes:
- Point: An immutable 2D point
- Bounds: Axis-aligned bounding rectangle
- Polygon: A closed ring of points with meaningful winding
- PolygonWithHoles: Outer boundary plus hole rings
"""

from cutout.domain.polygon import Bounds, Point, Polygon, WindingDirection
from cutout.domain.shape import PolygonWithHoles

__all__: list[str] = [
    # Enums
    "WindingDirection",
    # Core types
    "Point",
    "Bounds",
    "Polygon",
    "PolygonWithHoles",
]
