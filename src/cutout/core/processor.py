"""Pipeline orchestration and batch processing.

This module runs the full geometry pipeline (contour -> simplify -> smooth
-> simplify, with an optional fracture) and distributes batches over worker
processes with ProcessPoolExecutor.

Key components:
- run_pipeline: In-process pipeline for one image
- process_image_task / fracture_task: Top-level picklable worker functions
- CutoutProcessor: Orchestrator for single images and batches
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any

import structlog

from cutout.config import CutoutSettings, FractureConfig
from cutout.core import registry
from cutout.core.bitmap import ImageLike, read_alpha
from cutout.core.fracture import ShapeInput, as_shape
from cutout.core.registry import AlgorithmFamily
from cutout.domain import Polygon, PolygonWithHoles
from cutout.utils import ProcessingLogger, ProcessingStats

ProgressCallback = Callable[[int, int, str, bool], None]


def refine_contour(contour: Polygon, settings: CutoutSettings) -> Polygon:
    """Simplify, smooth and simplify again; contours under 3 points pass through."""
    if len(contour.points) < 3:
        return contour

    if settings.simplify is not None:
        contour = registry.create(AlgorithmFamily.SIMPLIFY, settings.simplify).simplify(contour)
    if settings.smooth is not None:
        contour = registry.create(AlgorithmFamily.SMOOTH, settings.smooth).smooth(contour)
    if settings.post_simplify is not None:
        contour = registry.create(AlgorithmFamily.SIMPLIFY, settings.post_simplify).simplify(contour)
    return contour


def run_pipeline(image: ImageLike, settings: CutoutSettings) -> list[Polygon]:
    """Trace and refine every contour of an image.

    Args:
        image: Source image
        settings: Pipeline settings

    Returns:
        Refined contours in source pixel coordinates
    """
    extractor = registry.create(AlgorithmFamily.CONTOUR, settings.contour)
    contours = extractor.calculate_boundary(image)
    return [refine_contour(c, settings) for c in contours]


def fracture_shape(shape: ShapeInput, config: FractureConfig) -> list[Polygon]:
    """Fracture one shape with the algorithm the configuration selects."""
    return registry.create(AlgorithmFamily.DESTRUCTION, config).fracture(as_shape(shape))


def process_image_task(
    alpha: Any,
    settings_dict: dict[str, Any],
    name: str,
) -> dict[str, Any]:
    """Run the pipeline on one alpha plane.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        alpha: Alpha plane (numpy array) of the image
        settings_dict: Serialized CutoutSettings
        name: Image name for reporting

    Returns:
        Dictionary containing either:
        - Success: {"name": str, "contours": [polygon dicts], "duration_ms": float}
        - Error: {"name": str, "error": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        settings = CutoutSettings.model_validate(settings_dict)
        contours = run_pipeline(alpha, settings)
        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": name,
            "contours": [c.to_dict() for c in contours],
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": name,
            "error": str(e),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


def fracture_task(
    shape_dict: dict[str, Any],
    settings_dict: dict[str, Any],
    name: str,
) -> dict[str, Any]:
    """Fracture one shape.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        shape_dict: Serialized PolygonWithHoles
        settings_dict: Serialized CutoutSettings with a fracture configuration
        name: Shape name for reporting

    Returns:
        Dictionary containing either:
        - Success: {"name": str, "fragments": [polygon dicts], "algorithm": str, "duration_ms": float}
        - Error: {"name": str, "error": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        settings = CutoutSettings.model_validate(settings_dict)
        if settings.fracture is None:
            raise ValueError("no fracture algorithm configured")
        fragments = fracture_shape(PolygonWithHoles.from_dict(shape_dict), settings.fracture)
        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": name,
            "fragments": [f.to_dict() for f in fragments],
            "algorithm": settings.fracture.kind,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": name,
            "error": str(e),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class CutoutProcessor:
    """Orchestrates contour extraction and fracturing.

    Single items run in-process; batches run in worker processes.

    Example:
        processor = CutoutProcessor(CutoutSettings())
        contours = processor.process_image(image)
        results = processor.process_batch([image_a, image_b], max_workers=2)
    """

    def __init__(
        self,
        settings: CutoutSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize processor.

        Args:
            settings: Pipeline settings (defaults if None)
            logger: Structured logger (the "cutout" logger if None)
        """
        self.settings = settings if settings is not None else CutoutSettings()
        self.logger = logger if logger is not None else structlog.get_logger("cutout")
        self.processing_logger = ProcessingLogger(self.logger)

    @property
    def stats(self) -> ProcessingStats:
        return self.processing_logger.stats

    def process_image(self, image: ImageLike, name: str = "image") -> list[Polygon]:
        """Run the pipeline on one image in-process."""
        start_time = time.time()
        self.processing_logger.log_image_start(name)

        contours = run_pipeline(image, self.settings)

        duration_ms = (time.time() - start_time) * 1000
        self.processing_logger.log_image_complete(
            image_name=name,
            contour_count=len(contours),
            point_count=sum(len(c.points) for c in contours),
            duration_ms=duration_ms,
        )
        self.stats.timings_ms.append(duration_ms)
        return contours

    def fracture(self, shape: ShapeInput, name: str = "shape") -> list[Polygon]:
        """Fracture one shape in-process with the configured algorithm.

        Returns the outer ring unchanged when no fracture is configured.
        """
        shape = as_shape(shape)
        if self.settings.fracture is None:
            return [shape.outer.copy()] if len(shape.outer.points) >= 3 else []

        start_time = time.time()
        fragments = fracture_shape(shape, self.settings.fracture)
        self.processing_logger.log_fracture_complete(
            shape_name=name,
            algorithm=self.settings.fracture.kind,
            fragment_count=len(fragments),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return fragments

    def process_batch(
        self,
        images: Sequence[ImageLike | None],
        settings: Sequence[CutoutSettings] | None = None,
        names: Sequence[str] | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> list[list[Polygon]]:
        """Run the pipeline on many images in parallel.

        Args:
            images: Source images
            settings: Per-image settings; the processor's settings for every
                image if None
            names: Image names for reporting (index-based if None)
            max_workers: Maximum worker processes (None = configured value)
            progress_callback: Optional callback(completed, total, name, success)

        Returns:
            Contours per image, in input order. A missing or unreadable
            image, or one whose processing failed, yields an empty list. A
            settings list whose length does not match the image count
            yields an empty result.
        """
        if settings is not None and len(settings) != len(images):
            self.logger.error(
                "Settings count does not match image count",
                images=len(images),
                settings=len(settings),
            )
            return []

        names = list(names) if names is not None else [f"image_{i}" for i in range(len(images))]
        per_image = list(settings) if settings is not None else [self.settings] * len(images)

        tasks = [
            (process_image_task, (read_alpha(image), s.model_dump(), name))
            for image, s, name in zip(images, per_image, names)
        ]
        results = self._run_parallel(tasks, names, max_workers, progress_callback)

        output: list[list[Polygon]] = []
        for name, result in zip(names, results):
            if result is None or "error" in result:
                output.append([])
                continue
            contours = [Polygon.from_dict(c) for c in result["contours"]]
            self.processing_logger.log_image_complete(
                image_name=name,
                contour_count=len(contours),
                point_count=sum(len(c.points) for c in contours),
                duration_ms=result.get("duration_ms", 0.0),
            )
            output.append(contours)
        return output

    def fracture_batch(
        self,
        shapes: Sequence[ShapeInput],
        names: Sequence[str] | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> list[list[Polygon]]:
        """Fracture many shapes in parallel with the configured algorithm.

        Returns:
            Fragments per shape, in input order; failures yield an empty list
        """
        if self.settings.fracture is None:
            return [self.fracture(s) for s in shapes]

        names = list(names) if names is not None else [f"shape_{i}" for i in range(len(shapes))]
        settings_dict = self.settings.model_dump()
        tasks = [
            (fracture_task, (as_shape(shape).to_dict(), settings_dict, name))
            for shape, name in zip(shapes, names)
        ]
        results = self._run_parallel(tasks, names, max_workers, progress_callback)

        output: list[list[Polygon]] = []
        for name, result in zip(names, results):
            if result is None or "error" in result:
                output.append([])
                continue
            fragments = [Polygon.from_dict(f) for f in result["fragments"]]
            self.processing_logger.log_fracture_complete(
                shape_name=name,
                algorithm=result["algorithm"],
                fragment_count=len(fragments),
                duration_ms=result.get("duration_ms", 0.0),
            )
            output.append(fragments)
        return output

    def _run_parallel(
        self,
        tasks: list[tuple[Callable[..., dict[str, Any]], tuple[Any, ...]]],
        names: list[str],
        max_workers: int | None,
        progress_callback: ProgressCallback | None,
    ) -> list[dict[str, Any] | None]:
        """Run worker tasks in a process pool, preserving input order.

        Raises:
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = self.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.settings.processing.max_workers

        results: list[dict[str, Any] | None] = [None] * len(tasks)
        if not tasks:
            stats.end_time = time.time()
            return results

        self.logger.info("Starting parallel processing", task_count=len(tasks), max_workers=max_workers)

        total = len(tasks)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, (func, args) in enumerate(tasks):
                future = executor.submit(func, *args)
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)
                    name = names[index]
                    success = False

                    try:
                        result = future.result()
                        results[index] = result

                        if "error" in result:
                            self.processing_logger.log_error(
                                item_name=name,
                                error=result["error"],
                                traceback=result.get("traceback"),
                            )
                        else:
                            success = True
                            stats.timings_ms.append(result.get("duration_ms", 0.0))

                    except Exception as e:
                        # Executor-level error
                        self.processing_logger.log_error(
                            item_name=name,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, name, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        stats.end_time = time.time()
        self.logger.info(
            "Parallel processing complete",
            completed=completed,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return results
