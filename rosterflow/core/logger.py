"""Application logger for RosterFlow runs."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import sys
from .profiles import _work_dir


_LOGGER: logging.Logger | None = None
LOGGER_NAME = "rosterflow"
# The I/O adapters log under their own package name and share the same handlers.
IO_LOGGER_NAME = "rosterflow_io"
LOG_DIR_ENV = "ROSTERFLOW_LOG_DIR"


def _log_dir(log_dir: Path | None) -> Path:
    if log_dir is not None:
        return Path(log_dir)
    env = os.getenv(LOG_DIR_ENV)
    if env:
        return Path(env)
    return _work_dir() / "logs"


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the ``rosterflow`` logger writing to <workspace>/logs/app.log.

    Service modules log through ``logging.getLogger(__name__)`` and inherit these
    handlers. Configuration happens once per process.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    base = _log_dir(log_dir)
    base.mkdir(parents=True, exist_ok=True)
    log_path = base / "app.log"

    fmt = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.addHandler(file_handler)
    logger.addHandler(console)

    io_logger = logging.getLogger(IO_LOGGER_NAME)
    io_logger.setLevel(logging.INFO)
    io_logger.propagate = False
    io_logger.addHandler(file_handler)
    io_logger.addHandler(console)

    _LOGGER = logger
    return logger


def set_level(level_name: str) -> int:
    """Apply a textual level (DEBUG/INFO/...) to the application loggers.

    Raises:
        ValueError: When ``level_name`` is not a known logging level.
    """
    level_value = getattr(logging, level_name.upper(), None)
    if not isinstance(level_value, int):
        raise ValueError(f"Unknown log level: {level_name}")
    get_logger().setLevel(level_value)
    logging.getLogger(IO_LOGGER_NAME).setLevel(level_value)
    return level_value


def reset_logger() -> None:
    """Detach and close handlers so the next get_logger() call reconfigures."""
    global _LOGGER
    closed: set[int] = set()
    for name in (LOGGER_NAME, IO_LOGGER_NAME):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            if id(handler) not in closed:
                handler.close()
                closed.add(id(handler))
    _LOGGER = None
