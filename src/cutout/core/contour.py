"""Contour extraction base class and shared resolution pre-pass."""

import logging
from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from cutout.config import MarchingSquaresConfig, MooreNeighborConfig
from cutout.core.bitmap import Bitmap, ImageLike, read_alpha
from cutout.domain import Point, Polygon

logger = logging.getLogger(__name__)


def downscale_alpha(
    alpha: NDArray[np.float32], max_resolution: int
) -> tuple[NDArray[np.float32], float]:
    """Bilinearly shrink an alpha plane so its larger side fits ``max_resolution``.

    Args:
        alpha: Alpha plane shaped (height, width)
        max_resolution: Size limit; 0 disables the limit

    Returns:
        (alpha plane, scale factor). The scale is 1.0 when nothing changed.
    """
    height, width = alpha.shape
    max_dim = max(width, height)
    if max_resolution <= 0 or max_dim <= max_resolution:
        return alpha, 1.0

    scale = max_resolution / max_dim
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    # float32 planes load as mode "F"
    resized = Image.fromarray(np.ascontiguousarray(alpha, dtype=np.float32)).resize(
        (new_width, new_height), Image.Resampling.BILINEAR
    )
    logger.debug("Downscaled %dx%d -> %dx%d", width, height, new_width, new_height)
    return np.asarray(resized, dtype=np.float32), scale


def rescale(polygons: list[Polygon], factor: float) -> list[Polygon]:
    """Multiply every point by ``factor``."""
    if factor == 1.0:
        return polygons
    return [Polygon(points=[Point(p.x * factor, p.y * factor) for p in poly.points]) for poly in polygons]


class ContourAlgorithm(ABC):
    """Base class for bitmap boundary tracers.

    Subclasses implement ``trace``; ``calculate_boundary`` adds image
    decoding, the resolution pre-pass and mapping back to source pixel
    coordinates.
    """

    name: str = ""

    def __init__(self, config: MooreNeighborConfig | MarchingSquaresConfig) -> None:
        self.config = config

    def calculate_boundary(
        self,
        image: ImageLike | None,
        alpha_threshold: float | None = None,
        max_resolution: int | None = None,
    ) -> list[Polygon]:
        """Trace the solid outline(s) of an image.

        Args:
            image: Source image (see ``cutout.core.bitmap``); None or an
                unreadable array traces as an empty bitmap
            alpha_threshold: Override of the configured threshold
            max_resolution: Override of the configured resolution limit

        Returns:
            Contours in source pixel coordinates
        """
        threshold = self.config.alpha_threshold if alpha_threshold is None else alpha_threshold
        limit = self.config.max_resolution if max_resolution is None else max_resolution

        alpha = read_alpha(image)
        if alpha.size == 0:
            return self.trace(Bitmap.from_alpha(alpha, threshold))

        alpha, scale = downscale_alpha(alpha, limit)
        contours = self.trace(Bitmap.from_alpha(alpha, threshold))
        return rescale(contours, 1.0 / scale)

    @abstractmethod
    def trace(self, bitmap: Bitmap) -> list[Polygon]:
        """Trace contours in bitmap pixel coordinates."""
