"""
==============================================================================
Path Settings Module
==============================================================================

Locates the application configuration file.

The default location is ``<root>/config/app_config.json`` where ``<root>`` is
the current working directory. Both parts can be overridden from the environment:

- IDREAM_ROOT_DIR: base directory for relative paths
- IDREAM_APP_CONFIG_FILE: config file, absolute or relative to the root

==============================================================================
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_APP_CONFIG_FILE = Path("config") / "app_config.json"


class PathSettings(BaseSettings):
    """File system locations used during configuration loading."""

    model_config = SettingsConfigDict(
        env_prefix="IDREAM_",
        case_sensitive=False,
        extra="ignore",
    )

    root_dir: Path = Field(
        default_factory=Path.cwd,
        description="Base directory for relative paths (default: working directory)"
    )

    app_config_file: Path = Field(
        default=DEFAULT_APP_CONFIG_FILE,
        description="Application config JSON file"
    )

    @property
    def app_config_path(self) -> Path:
        """Get the resolved config file path."""
        if self.app_config_file.is_absolute():
            return self.app_config_file
        return self.root_dir / self.app_config_file


def default_app_config_path() -> Path:
    """Resolve the config file path from the current environment."""
    return PathSettings().app_config_path
