"""CLI application entry point for cutout.

This module provides the main CLI interface using Typer.
"""

import time
from pathlib import Path
from typing import Annotated

import typer
from PIL import Image, UnidentifiedImageError

from cutout import __version__
from cutout.cli.output import (
    console,
    print_algorithms,
    print_error,
    print_header,
    print_image_info,
    print_polygon_table,
    print_step,
    print_success,
)
from cutout.config import (
    CutoutSettings,
    LoggingConfig,
    MarchingSquaresConfig,
    MooreNeighborConfig,
    MultiSliceConfig,
    OutwardSmoothConfig,
    ParallelSlices,
    RDPConfig,
    VoronoiConfig,
)
from cutout.core import CutoutProcessor
from cutout.core.registry import list_algorithms
from cutout.domain import PolygonWithHoles
from cutout.exceptions import CutoutError, ImageLoadError
from cutout.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="cutout",
    help="Trace polygon outlines from image alpha masks and fracture them.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Cutout[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Trace polygon outlines from image alpha masks and fracture them."""


def _load_image(path: Path) -> Image.Image:
    try:
        image = Image.open(path)
        image.load()
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(str(path), str(e)) from e
    return image


@app.command()
def trace(
    image_path: Annotated[
        Path,
        typer.Argument(
            help="Path to an image with an alpha channel",
            show_default=False,
        ),
    ],
    algorithm: Annotated[
        str,
        typer.Option(
            "--algorithm",
            "-a",
            help="Contour algorithm (marching_squares|moore_neighbor)",
        ),
    ] = "marching_squares",
    alpha_threshold: Annotated[
        float,
        typer.Option(
            "--alpha-threshold",
            "-t",
            help="Alpha at or above this value counts as solid",
            min=0.0,
            max=1.0,
        ),
    ] = 0.5,
    max_resolution: Annotated[
        int,
        typer.Option(
            "--max-resolution",
            help="Downscale larger images to this size before tracing (0 = off)",
            min=0,
        ),
    ] = 0,
    epsilon: Annotated[
        float,
        typer.Option(
            "--epsilon",
            "-e",
            help="RDP simplification tolerance in pixels",
            min=0.0,
        ),
    ] = 1.0,
    smooth: Annotated[
        bool,
        typer.Option(
            "--smooth/--no-smooth",
            help="Apply outward smoothing",
        ),
    ] = True,
    expansion: Annotated[
        float,
        typer.Option(
            "--expansion",
            help="Outward expansion radius in pixels",
            min=0.0,
        ),
    ] = 2.0,
    fracture: Annotated[
        str | None,
        typer.Option(
            "--fracture",
            "-f",
            help="Fracture the largest contour (voronoi|multi_slice)",
        ),
    ] = None,
    fragments: Annotated[
        int,
        typer.Option(
            "--fragments",
            "-n",
            help="Voronoi fragment count / number of parallel slices",
            min=1,
        ),
    ] = 10,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            "-s",
            help="Random seed",
        ),
    ] = 0,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Trace the outline(s) of an image and optionally fracture the result.

    Example:
        cutout trace sprite.png --epsilon 1.5 --fracture voronoi -n 12
    """
    if not image_path.exists() or not image_path.is_file():
        print_error(
            f"Input file not found: {image_path}",
            details=f"The file '{image_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if algorithm == "marching_squares":
        contour_config = MarchingSquaresConfig(alpha_threshold=alpha_threshold, max_resolution=max_resolution)
    elif algorithm == "moore_neighbor":
        contour_config = MooreNeighborConfig(alpha_threshold=alpha_threshold, max_resolution=max_resolution)
    else:
        print_error(
            f"Invalid algorithm: {algorithm}",
            details="Valid values: marching_squares, moore_neighbor",
        )
        raise typer.Exit(code=1)

    if fracture is None:
        fracture_config = None
    elif fracture == "voronoi":
        fracture_config = VoronoiConfig(fragment_count=max(2, fragments), seed=seed)
    elif fracture == "multi_slice":
        fracture_config = MultiSliceConfig(pattern=ParallelSlices(slice_count=fragments), seed=seed)
    else:
        print_error(
            f"Invalid fracture algorithm: {fracture}",
            details="Valid values: voronoi, multi_slice",
        )
        raise typer.Exit(code=1)

    settings = CutoutSettings(
        contour=contour_config,
        simplify=RDPConfig(epsilon=epsilon),
        smooth=OutwardSmoothConfig(expansion_radius=expansion) if smooth else None,
        post_simplify=RDPConfig(epsilon=epsilon / 2.0),
        fracture=fracture_config,
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )

    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    try:
        start = time.time()

        if not quiet:
            print_step("Loading image")
        image = _load_image(image_path)
        if not quiet:
            print_image_info(str(image_path), image.width, image.height, image.mode)

        processor = CutoutProcessor(settings, logger=logger)

        if not quiet:
            print_step("Tracing")
        contours = processor.process_image(image, name=image_path.name)
        if not quiet:
            print_polygon_table("Contours", contours)

        fragment_count = None
        if fracture_config is not None and contours:
            if not quiet:
                print_step("Fracturing")
            largest = max(contours, key=lambda c: c.area())
            pieces = processor.fracture(PolygonWithHoles(largest), name=image_path.name)
            fragment_count = len(pieces)
            if not quiet:
                print_polygon_table("Fragments", pieces)

        if not quiet:
            print_success(
                total_time_s=time.time() - start,
                contours=len(contours),
                points=sum(len(c.points) for c in contours),
                fragments=fragment_count,
            )

    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except CutoutError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def algorithms(
    family: Annotated[
        str | None,
        typer.Argument(
            help="Only list one family (contour|simplify|smooth|destruction)",
            show_default=False,
        ),
    ] = None,
) -> None:
    """List the available algorithms and their tunable parameters."""
    try:
        entries = list_algorithms(family)
    except ValueError:
        print_error(
            f"Unknown algorithm family: {family}",
            details="Valid values: contour, simplify, smooth, destruction",
        )
        raise typer.Exit(code=1)

    print_algorithms(entries)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
