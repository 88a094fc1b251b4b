"""Solid/empty bitmap sampled from an image's alpha channel.

Accepted image inputs:
- ``PIL.Image.Image`` in any mode (converted to RGBA)
- numpy arrays shaped (H, W) holding alpha directly, (H, W, 2) luminance +
  alpha, (H, W, 3) RGB (fully opaque) or (H, W, 4) RGBA

Integer arrays are read as 8-bit (0-255) alpha; float arrays as 0.0-1.0.
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from cutout.exceptions import ImageFormatError

logger = logging.getLogger(__name__)

ImageLike = Union[Image.Image, NDArray[Any]]


def alpha_channel(image: ImageLike) -> NDArray[np.float32]:
    """Extract a normalized (0.0-1.0) alpha plane from an image.

    Raises:
        ImageFormatError: If the array shape has no alpha interpretation
    """
    if isinstance(image, Image.Image):
        rgba = np.asarray(image.convert("RGBA"))
        return rgba[..., 3].astype(np.float32) / 255.0

    array = np.asarray(image)
    if array.ndim == 2:
        alpha = array
    elif array.ndim == 3 and array.shape[2] == 2:
        alpha = array[..., 1]
    elif array.ndim == 3 and array.shape[2] == 3:
        return np.ones(array.shape[:2], dtype=np.float32)
    elif array.ndim == 3 and array.shape[2] == 4:
        alpha = array[..., 3]
    else:
        raise ImageFormatError(f"array shape {array.shape}")

    if np.issubdtype(alpha.dtype, np.integer):
        return alpha.astype(np.float32) / 255.0
    # Float or boolean alpha
    return alpha.astype(np.float32)


def read_alpha(image: ImageLike | None) -> NDArray[np.float32]:
    """Like ``alpha_channel``, but a missing or unreadable image gives an empty plane."""
    if image is None:
        return np.zeros((0, 0), dtype=np.float32)
    try:
        return alpha_channel(image)
    except ImageFormatError as e:
        logger.debug("Treating unreadable image as empty: %s", e.details)
        return np.zeros((0, 0), dtype=np.float32)


@dataclass(frozen=True)
class Bitmap:
    """Immutable boolean grid; True marks a solid pixel.

    Attributes:
        grid: Boolean array shaped (height, width)
    """

    grid: NDArray[np.bool_]

    @classmethod
    def from_alpha(cls, alpha: NDArray[Any], alpha_threshold: float) -> "Bitmap":
        """Mark pixels with alpha >= threshold as solid."""
        grid = np.asarray(alpha) >= alpha_threshold
        grid.setflags(write=False)
        return cls(grid=grid)

    @classmethod
    def from_array(cls, solid: NDArray[Any]) -> "Bitmap":
        grid = np.array(solid, dtype=bool)
        grid.setflags(write=False)
        return cls(grid=grid)

    @property
    def width(self) -> int:
        return int(self.grid.shape[1]) if self.grid.ndim == 2 else 0

    @property
    def height(self) -> int:
        return int(self.grid.shape[0]) if self.grid.ndim == 2 else 0

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0 or not self.grid.any()

    def is_solid(self, x: int, y: int) -> bool:
        """Check a pixel; out-of-bounds coordinates are never solid."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return bool(self.grid[y, x])

    def is_edge(self, x: int, y: int) -> bool:
        """Check whether a solid pixel has at least one empty 4-neighbour."""
        if not self.is_solid(x, y):
            return False
        return not (
            self.is_solid(x - 1, y)
            and self.is_solid(x + 1, y)
            and self.is_solid(x, y - 1)
            and self.is_solid(x, y + 1)
        )

    def solid_count(self) -> int:
        return int(np.count_nonzero(self.grid))


def build(image: ImageLike, alpha_threshold: float) -> Bitmap:
    """Build a bitmap from an image: pixels with alpha >= threshold are solid."""
    return Bitmap.from_alpha(alpha_channel(image), alpha_threshold)


def is_solid(bitmap: Bitmap, x: int, y: int) -> bool:
    return bitmap.is_solid(x, y)
