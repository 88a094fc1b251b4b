"""Configuration management for cutout.

This module provides configuration management using Pydantic models.
Each algorithm variant is its own model with a ``kind`` discriminator;
families are exposed as tagged unions.

Key classes:
- MooreNeighborConfig / MarchingSquaresConfig: Contour extraction
- RDPConfig / ReumannWitkamConfig / VisvalingamWhyattConfig: Simplification
- OutwardSmoothConfig: Smoothing
- VoronoiConfig / SliceConfig / MultiSliceConfig: Destruction
- CutoutSettings: Main application settings
"""

from cutout.config.settings import (
    ChaoticSlices,
    ContourConfig,
    CutoutSettings,
    FractureConfig,
    GridSeeds,
    GridSlices,
    LoggingConfig,
    ManualSlices,
    MarchingSquaresConfig,
    MooreNeighborConfig,
    MultiSliceConfig,
    OutwardSmoothConfig,
    ParallelSlices,
    PoissonSeeds,
    ProcessingConfig,
    RadialSeeds,
    RadialSlices,
    RandomSeeds,
    RDPConfig,
    ReumannWitkamConfig,
    SeedPattern,
    SimplifyConfig,
    SliceConfig,
    SlicePattern,
    SpiderwebSeeds,
    VisvalingamWhyattConfig,
    VoronoiConfig,
    VWStopCriterion,
    get_default_settings,
)

__all__ = [
    "ChaoticSlices",
    "ContourConfig",
    "CutoutSettings",
    "FractureConfig",
    "GridSeeds",
    "GridSlices",
    "LoggingConfig",
    "ManualSlices",
    "MarchingSquaresConfig",
    "MooreNeighborConfig",
    "MultiSliceConfig",
    "OutwardSmoothConfig",
    "ParallelSlices",
    "PoissonSeeds",
    "ProcessingConfig",
    "RDPConfig",
    "RadialSeeds",
    "RadialSlices",
    "RandomSeeds",
    "ReumannWitkamConfig",
    "SeedPattern",
    "SimplifyConfig",
    "SliceConfig",
    "SlicePattern",
    "SpiderwebSeeds",
    "VWStopCriterion",
    "VisvalingamWhyattConfig",
    "VoronoiConfig",
    "get_default_settings",
]
