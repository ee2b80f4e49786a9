"""
Logging configuration for histquery.

Provides structured logging with rich formatting for terminal output, plus
timed events that report how many items a cache operation touched and roughly
how much memory they occupy.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance for histquery
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = Console(stderr=True)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger("histquery")
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'histquery.database')
              If None, returns the root histquery logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("histquery")

    if not name.startswith("histquery"):
        name = f"histquery.{name}"

    return logging.getLogger(name)


class LogEvent:
    """A single timed, counted and weighed diagnostic event."""

    def __init__(self, description: str):
        self.description = description
        self.count: Optional[int] = None
        self.weight: Optional[int] = None
        self._start = time.perf_counter()

    def counted(self, count: int) -> None:
        self.count = count

    def weighed(self, collection: Any) -> None:
        from .database.weights import weigh

        self.weight = weigh(collection)

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._start

    def summary(self) -> str:
        parts = [self.description]
        if self.count is not None:
            parts.append(f"{self.count} items")
        if self.weight is not None:
            parts.append(f"~{format_bytes(self.weight)}")
        parts.append(f"{self.elapsed:.3f}s")
        return " | ".join(parts)


@contextmanager
def log_event(logger: logging.Logger, description: str, level: int = logging.INFO) -> Iterator[LogEvent]:
    """Time a block and log its outcome.

    Usage:
        with log_event(logger, "loading commits from cache") as event:
            commits = load()
            event.counted(len(commits))
            event.weighed(commits)
    """
    logger.debug("%s...", description)
    event = LogEvent(description)
    yield event
    logger.log(level, event.summary())


def format_bytes(size: int) -> str:
    """Render a byte count with a binary unit suffix."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{value:.0f}{unit}" if unit == "B" else f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}GiB"
