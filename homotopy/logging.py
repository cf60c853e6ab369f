"""
Package logging.

All loggers live under ``homotopy``. Level, format and an optional log file
come from HOMOTOPY_LOG_LEVEL, HOMOTOPY_LOG_FORMAT (``default`` or ``json``)
and HOMOTOPY_LOG_FILE unless passed to ``setup_logging`` explicitly.
Decomposition phases are timed with ``profile_scope`` and ``timed``.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Iterator, List, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

PACKAGE_LOGGER = "homotopy"

LOG_LEVEL_ENV = "HOMOTOPY_LOG_LEVEL"
LOG_FORMAT_ENV = "HOMOTOPY_LOG_FORMAT"
LOG_FILE_ENV = "HOMOTOPY_LOG_FILE"

FORMATS = {
    "default": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    "json": (
        '{"time": "%(asctime)s", "level": "%(levelname)s", '
        '"logger": "%(name)s", "message": "%(message)s"}'
    ),
}


@dataclass
class LogSettings:
    """Resolved logging settings."""

    level: int = logging.INFO
    format_str: str = FORMATS["default"]
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LogSettings":
        level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
        format_name = os.environ.get(LOG_FORMAT_ENV, "default").lower()
        return cls(
            level=getattr(logging, level_name, logging.INFO),
            format_str=FORMATS.get(format_name, FORMATS["default"]),
            log_file=os.environ.get(LOG_FILE_ENV),
        )


_configured = False
_installed: List[logging.Handler] = []


def setup_logging(
    level: Optional[int] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach handlers to the package logger.

    Arguments left as None fall back to the environment. Without ``force`` a
    second call is a no-op; with it, previously installed handlers are
    closed and replaced.

    Returns:
        The package logger.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and not force:
        return logger

    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()

    settings = LogSettings.from_env()
    formatter = logging.Formatter(format_str or settings.format_str)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    path = log_file or settings.log_file
    if path:
        handlers.append(logging.FileHandler(path))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)

    logger.setLevel(level or settings.level)
    logger.propagate = False
    _configured = True
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Package logger, or its child ``homotopy.<name>``."""
    if not _configured:
        setup_logging()
    if name:
        return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
    return logging.getLogger(PACKAGE_LOGGER)


def LOG_DEBUG(msg: str, *args: Any, **kwargs: Any) -> None:
    get_logger().debug(msg, *args, **kwargs)


def LOG_INFO(msg: str, *args: Any, **kwargs: Any) -> None:
    get_logger().info(msg, *args, **kwargs)


def LOG_WARN(msg: str, *args: Any, **kwargs: Any) -> None:
    get_logger().warning(msg, *args, **kwargs)


def LOG_ERROR(msg: str, *args: Any, **kwargs: Any) -> None:
    get_logger().error(msg, *args, **kwargs)


# =============================================================================
# Phase Timing
# =============================================================================


@contextmanager
def profile_scope(name: str, log_level: int = logging.DEBUG) -> Iterator[None]:
    """Log the wall time spent inside the block.

    Example:
        with profile_scope("ray subdivision"):
            rays = subdivide_rays(rays, obstacles)
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        get_logger().log(log_level, f"{name} took {time.perf_counter() - started:.4f}s")


def timed(func: F) -> F:
    """Log each call's wall time at DEBUG under the function's name."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with profile_scope(func.__name__):
            return func(*args, **kwargs)

    return wrapper  # type: ignore


setup_logging()
