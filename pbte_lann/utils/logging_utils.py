"""
Logging for prediction runs.

Every module logs under the ``pbte_lann`` namespace; a run attaches a console
handler and, when it has a run directory, a ``predict.log`` file handler.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

ROOT_LOGGER = "pbte_lann"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {name}")
    return level


def close_logging() -> None:
    """Flush, close and detach every handler on the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)


def setup_logging(
    log_dir: Optional[Path] = None,
    levels: Optional[Mapping[str, str]] = None,
    log_file: str = "predict.log",
) -> logging.Logger:
    """
    Attach console and file handlers to the package logger.

    Handlers from an earlier run are closed first, so repeated runs in one
    process neither duplicate output nor leak file handles.

    Args:
        log_dir: Run directory for the log file; None logs to the console only
        levels: The ``logging`` config section (``console_level``, ``file_level``)
        log_file: Name of the log file inside ``log_dir``

    Raises:
        ValueError: If a level name is not a logging level
    """
    levels = dict(levels or {})
    console_level = _level(levels.get("console_level", "INFO"))
    file_level = _level(levels.get("file_level", "DEBUG"))

    close_logging()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Module logger ``pbte_lann.<name>``; the package logger when name is None."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def create_run_directory(
    base_dir: Path,
    run_name: str,
    timestamp: Optional[str] = None,
) -> Path:
    """
    Create ``<base_dir>/<run_name>_<timestamp>``.

    Runs started within the same second get a numeric suffix instead of
    sharing a directory.
    """
    if timestamp is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)

    run_dir = base_dir / f"{run_name}_{timestamp}"
    suffix = 1
    while run_dir.exists():
        run_dir = base_dir / f"{run_name}_{timestamp}_{suffix}"
        suffix += 1
    run_dir.mkdir()
    return run_dir
