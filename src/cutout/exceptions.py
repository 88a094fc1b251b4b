"""Exception hierarchy for cutout.

Expected degenerate inputs (empty images, tiny polygons, zero-length slice
lines) never raise; they produce empty or pass-through results instead.
These exceptions cover genuinely unexpected states.
"""


class CutoutError(Exception):
    """Base exception for all cutout errors."""

    pass


class ImageError(CutoutError):
    """Errors related to source images."""

    pass


class ImageLoadError(ImageError):
    """Error loading an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class ImageFormatError(ImageError):
    """Unsupported pixel layout."""

    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(f"Unsupported image format: {details}")


class GeometryError(CutoutError):
    """Errors in geometric calculations."""

    pass


class TriangulationError(GeometryError):
    """A triangulation strategy could not produce triangles."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Triangulation failed: {reason}")


class ConfigurationError(CutoutError):
    """Errors in algorithm selection or configuration."""

    pass


class UnknownAlgorithmError(ConfigurationError):
    """Requested algorithm is not registered."""

    def __init__(self, family: str, key: str) -> None:
        self.family = family
        self.key = key
        super().__init__(f"Unknown {family} algorithm '{key}'")
