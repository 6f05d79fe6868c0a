"""Utility modules for configuration, logging, and numerics."""

from .config import load_config, save_config, update_config, Config
from .logging_utils import setup_logging, close_logging, get_logger, create_run_directory
from .numerics import linear_space, require_finite

__all__ = [
    "load_config",
    "save_config",
    "update_config",
    "Config",
    "setup_logging",
    "close_logging",
    "get_logger",
    "create_run_directory",
    "linear_space",
    "require_finite",
]
