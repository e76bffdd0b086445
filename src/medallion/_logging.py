from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "medallion"


def configure_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a rich console handler (and optionally a file handler) to the package logger.

    Existing handlers are replaced so repeated calls do not duplicate output.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = RichHandler(console=console, show_path=False, rich_tracebacks=False)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


@contextmanager
def timed(name: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """Log how long the wrapped block took, even when it raises."""
    log = logger or logging.getLogger(PACKAGE_LOGGER)
    start = time.perf_counter()
    try:
        yield
    finally:
        log.info("%s took %.3fs", name, time.perf_counter() - start)
