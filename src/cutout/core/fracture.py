"""Fracture algorithm base class.

Result convention shared by every fracture algorithm:

- No geometry at all (no rings, or an outer ring with fewer than 3
  points): empty list.
- Nothing to do (outer area below ``min_area``, too few seeds, degenerate
  or missing cut line, no fragments produced): a single-element list
  holding a copy of the outer ring.
- Otherwise: the fragments, holes already subtracted.

None of these cases raise.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from cutout.config import MultiSliceConfig, SliceConfig, VoronoiConfig
from cutout.domain import Polygon, PolygonWithHoles

logger = logging.getLogger(__name__)

ShapeInput = PolygonWithHoles | Sequence[Polygon]


def as_shape(shape: ShapeInput) -> PolygonWithHoles:
    """Accept either a PolygonWithHoles or an ordered ring list (outer first)."""
    if isinstance(shape, PolygonWithHoles):
        return shape
    return PolygonWithHoles.from_rings(list(shape))


class FractureAlgorithm(ABC):
    """Base class for destruction algorithms."""

    name: str = ""

    def __init__(self, config: VoronoiConfig | SliceConfig | MultiSliceConfig) -> None:
        self.config = config

    def rng(self) -> np.random.Generator:
        """Fresh generator for the configured seed; equal seeds give equal results."""
        return np.random.default_rng(self.config.seed)

    def fracture(self, shape: ShapeInput) -> list[Polygon]:
        """Break a polygon with holes into fragments.

        Args:
            shape: Polygon with holes, or a ring list whose first entry is
                the outer boundary

        Returns:
            Fragment list (see module docstring for the edge cases)
        """
        shape = as_shape(shape)
        outer = shape.outer
        if len(outer.points) < 3:
            return []

        if outer.area() < self.config.min_area:
            logger.debug("%s: area %.3f below minimum, returning original", self.name, outer.area())
            return [outer.copy()]

        fragments = [f for f in self._fracture(shape) if len(f.points) >= 3]
        if not fragments:
            logger.debug("%s produced no fragments, returning original", self.name)
            return [outer.copy()]

        logger.debug("%s produced %d fragments", self.name, len(fragments))
        return fragments

    @abstractmethod
    def _fracture(self, shape: PolygonWithHoles) -> list[Polygon]:
        """Fracture a validated shape; an empty result means nothing happened."""
