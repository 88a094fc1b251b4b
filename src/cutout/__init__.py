"""Cutout - alpha-mask contour extraction and polygon fracturing.

Traces polygon outlines from the alpha channel of raster images, simplifies
and smooths them, and optionally breaks them into fragments for destruction
effects.
"""

__version__ = "0.1.0"
