"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cutout.core.registry import AlgorithmEntry
from cutout.domain import Polygon

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Cutout[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_image_info(image_path: str, width: int, height: int, mode: str) -> None:
    """Print source image information."""
    line = Text("  ")
    line.append(image_path)
    line.append(f" ({mode})")
    console.print(line)
    console.print(f"  {width} x {height} px")


def print_polygon_table(title: str, polygons: list[Polygon], limit: int = 20) -> None:
    """Print a table with point count, area and winding of each polygon.

    Args:
        title: Table title
        polygons: Polygons to list
        limit: Maximum number of rows
    """
    table = Table(title=title, title_justify="left", show_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Points", justify="right")
    table.add_column("Area", justify="right")
    table.add_column("Winding")

    for i, poly in enumerate(polygons[:limit]):
        winding = poly.winding.name.lower().replace("_", "-") if poly.winding else "degenerate"
        table.add_row(str(i), str(len(poly.points)), f"{poly.area():.1f}", winding)

    console.print(table)
    if len(polygons) > limit:
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(polygons) - limit} more)")


def print_algorithms(entries: list[AlgorithmEntry]) -> None:
    """Print registered algorithms and their parameters."""
    for entry in entries:
        console.print(
            f"\n[bold]{entry.display_name}[/bold] {SYM_DOT} "
            f"{entry.family.value}/[cyan]{entry.key}[/cyan]"
        )
        for param in entry.parameters:
            bounds = ""
            if param.minimum is not None or param.maximum is not None:
                lo = "" if param.minimum is None else f"{param.minimum:g}"
                hi = "" if param.maximum is None else f"{param.maximum:g}"
                bounds = f" [{lo}..{hi}]"
            console.print(f"  {param.name}: {param.type_name} = {param.default!r}{bounds}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(total_time_s: float, contours: int, points: int, fragments: int | None = None) -> None:
    """Print success message with summary.

    Args:
        total_time_s: Total processing time in seconds
        contours: Number of contours traced
        points: Total number of contour points
        fragments: Number of fracture fragments, if a fracture ran
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")
    summary = f"  {contours} contours {SYM_DOT} {points} points"
    if fragments is not None:
        summary += f" {SYM_DOT} {fragments} fragments"
    console.print(summary)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
