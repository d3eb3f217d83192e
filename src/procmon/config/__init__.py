"""
Configuration management for the procmon package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    reset_config_path,
    set_config_path,
)

from .loader import load_main_config, load_toml_file
from .validators import (
    validate_collection_config,
    validate_monitor_config,
    validate_server_config,
)

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "reset_config_path",
    "clear_config_cache",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_collection_config",
    "validate_monitor_config",
    "validate_server_config",
]
