"""
==============================================================================
Configuration Package
==============================================================================

Application configuration loading for idream-erp.

This package provides:
- JSON config file loading with environment variable overlay
- Version string parsing
- Singleton accessor for process-wide access

Usage:
------
    from idream.config import get_app_config, load_config

    # Process-wide singleton (exits the process on configuration errors)
    config = get_app_config()

    # Explicit loading for injection and tests (raises AppException)
    config = load_config(path)

    print(config.version_info.release)

==============================================================================
"""

from .paths import PathSettings, default_app_config_path
from .settings import (
    AppConfig,
    EnvironmentOverlay,
    MysqlConfig,
    OrmConfig,
    get_app_config,
    load_config,
    reset_app_config,
)
from .version import VersionInfo, parse_version

__all__ = [
    # Paths
    "PathSettings",
    "default_app_config_path",
    # Settings
    "AppConfig",
    "EnvironmentOverlay",
    "MysqlConfig",
    "OrmConfig",
    "get_app_config",
    "load_config",
    "reset_app_config",
    # Version
    "VersionInfo",
    "parse_version",
]
