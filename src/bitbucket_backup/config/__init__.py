"""Configuration system for bitbucket-backup.

This module provides TOML-based configuration loading, validation,
and the options every backup run is executed with.
"""

from .loader import (
    ConfigError,
    find_config_file,
    load_config,
    merge_options,
    validate_options,
)
from .schema import BackupOptions, Transport

__all__ = [
    "BackupOptions",
    "Transport",
    "load_config",
    "find_config_file",
    "merge_options",
    "validate_options",
    "ConfigError",
]
