"""Logging utilities for cutout."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    images_processed: int = 0
    contours_found: int = 0
    fractures_run: int = 0
    fragments_created: int = 0
    error_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("cutout")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_image_start(self, image_name: str) -> None:
        """Log start of image processing."""
        self._logger.debug("Processing image", image=image_name)

    def log_image_complete(
        self,
        image_name: str,
        contour_count: int,
        point_count: int,
        duration_ms: float,
    ) -> None:
        """Log successful image processing."""
        self._logger.info(
            "Image processed",
            image=image_name,
            contours=contour_count,
            points=point_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.images_processed += 1
        self._stats.contours_found += contour_count

    def log_fracture_complete(
        self,
        shape_name: str,
        algorithm: str,
        fragment_count: int,
        duration_ms: float,
    ) -> None:
        """Log a finished fracture."""
        self._logger.info(
            "Shape fractured",
            shape=shape_name,
            algorithm=algorithm,
            fragments=fragment_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.fractures_run += 1
        self._stats.fragments_created += fragment_count

    def log_error(
        self,
        item_name: str,
        error: Exception | str,
        traceback: str | None = None,
    ) -> None:
        """Log a processing error."""
        self._logger.error(
            "Processing failed",
            item=item_name,
            error=str(error),
            error_type=type(error).__name__ if isinstance(error, Exception) else None,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((item_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
