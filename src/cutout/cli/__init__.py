"""Command-line interface for cutout.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Contour tracing summary for a single image
- Optional fracture of the traced shape
- Listing of registered algorithms and their parameters
"""

from cutout.cli.app import cli, main

__all__ = ["cli", "main"]
