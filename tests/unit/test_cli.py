"""Tests for the command-line interface."""

import logging
from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from cutout import __version__
from cutout.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """The trace command installs logging handlers; drop them after each test."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def sprite(tmp_path: Path) -> Path:
    """RGBA image with two opaque rectangles on a transparent background."""
    image = Image.new("RGBA", (64, 48), (0, 0, 0, 0))
    for x in range(8, 30):
        for y in range(8, 40):
            image.putpixel((x, y), (200, 30, 30, 255))
    for x in range(40, 56):
        for y in range(10, 20):
            image.putpixel((x, y), (30, 200, 30, 255))
    path = tmp_path / "sprite.png"
    image.save(path)
    return path


class TestVersionAndHelp:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "trace" in result.output
        assert "algorithms" in result.output


class TestAlgorithmsCommand:
    def test_lists_everything(self) -> None:
        result = runner.invoke(app, ["algorithms"])
        assert result.exit_code == 0
        assert "Marching Squares" in result.output
        assert "Visvalingam-Whyatt" in result.output
        assert "fragment_count" in result.output

    def test_single_family(self) -> None:
        result = runner.invoke(app, ["algorithms", "smooth"])
        assert result.exit_code == 0
        assert "expansion_radius" in result.output
        assert "Voronoi" not in result.output

    def test_unknown_family(self) -> None:
        result = runner.invoke(app, ["algorithms", "sorting"])
        assert result.exit_code == 1
        assert "Unknown algorithm family" in result.output


class TestTraceCommand:
    def test_trace(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite)])
        assert result.exit_code == 0, result.output
        assert "Contours" in result.output
        assert "2 contours" in result.output

    def test_moore_neighbor_traces_one_shape(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--algorithm", "moore_neighbor", "--no-smooth"])
        assert result.exit_code == 0, result.output
        assert "1 contours" in result.output

    def test_fracture(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--fracture", "voronoi", "-n", "5", "--seed", "7"])
        assert result.exit_code == 0, result.output
        assert "Fragments" in result.output
        assert "fragments" in result.output

    def test_multi_slice_fracture(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "-f", "multi_slice", "-n", "3"])
        assert result.exit_code == 0, result.output
        assert "Fragments" in result.output

    def test_quiet(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--quiet"])
        assert result.exit_code == 0
        assert "Contours" not in result.output

    def test_log_file(self, sprite: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "cutout.log"
        result = runner.invoke(app, ["trace", str(sprite), "-q", "--log-file", str(log_file)])
        assert result.exit_code == 0
        assert log_file.exists()
        assert "Image processed" in log_file.read_text(encoding="utf-8")

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["trace", str(tmp_path / "missing.png")])
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_not_an_image(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.png"
        path.write_text("not an image", encoding="utf-8")
        result = runner.invoke(app, ["trace", str(path)])
        assert result.exit_code == 1
        assert "Could not load image" in result.output

    def test_invalid_algorithm(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--algorithm", "flood"])
        assert result.exit_code == 1
        assert "Invalid algorithm" in result.output

    def test_invalid_fracture(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--fracture", "shatter"])
        assert result.exit_code == 1
        assert "Invalid fracture algorithm" in result.output

    def test_threshold_out_of_range(self, sprite: Path) -> None:
        result = runner.invoke(app, ["trace", str(sprite), "--alpha-threshold", "2.0"])
        assert result.exit_code != 0
