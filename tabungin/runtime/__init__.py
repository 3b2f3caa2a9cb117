"""Runtime infrastructure for tabungin.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings from settings.toml and the environment via load_settings()

Usage:
    from tabungin.runtime import get_logger, get_paths, load_settings

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.ledger)
"""

from tabungin.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from tabungin.runtime.paths import (
    ProjectPaths,
    get_paths,
    set_data_root,
)
from tabungin.runtime.settings import ConfigError, Settings, load_settings

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "set_data_root",
    "ProjectPaths",
    # Settings
    "ConfigError",
    "Settings",
    "load_settings",
]
