"""
==============================================================================
Application Settings Module
==============================================================================

Loads the application configuration record from the JSON config file and
overlays environment variables on top of it.

Loading Sequence:
----------------
1. Read the config file (default: <root>/config/app_config.json)
2. Deserialize JSON into AppConfig (unknown keys ignored)
3. Read FB_SDK_VERSION, FB_CLIENT_ID, FB_CLIENT_SECRET, FB_REDIRECT_URI
4. Validate FB_SDK_VERSION against ^v\\d{2,}\\.\\d$
5. Parse the raw version string into VersionInfo
6. Overlay the environment fields plus MYSQL_DSN and SERVER_ADDR

Any failure raises AppException. The singleton accessor turns that into a
diagnostic on stderr and exit status 1.

Usage:
------
    # Explicit loading (raises AppException)
    config = load_config(Path("config/app_config.json"))

    # Process-wide singleton (exits on failure)
    config = get_app_config()

==============================================================================
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from pathlib import Path
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from idream.config.paths import default_app_config_path
from idream.config.version import VersionInfo, parse_version
from idream.core import exceptions
from idream.core.exceptions import AppException


# Module logger
logger = logging.getLogger(__name__)

SDK_VERSION_PATTERN = re.compile(r"v\d{2,}\.\d", re.ASCII)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


class ConfigBlock(BaseModel):
    """
    Base for models deserialized from the config file.

    Keys are matched case-insensitively against the camelCase alias or the
    snake_case field name. Unknown keys are dropped and JSON null keeps the
    field default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Fields computed by the loader, never read from the file
    DERIVED_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def fold_key_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        known: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            if name in cls.DERIVED_FIELDS:
                continue
            known[name.lower()] = name
            if field.alias:
                known[field.alias.lower()] = name

        folded: Dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str) or value is None:
                continue
            name = known.get(key.lower())
            if name is not None:
                folded[name] = value
        return folded


class MysqlConfig(ConfigBlock):
    """
    MySQL dialect tuning flags passed through to the data-access layer.

    Attributes:
        default_string_size: Default length for string columns (0 = unsized)
        disable_date_time_precision: Use DATETIME without fractional seconds
        dont_support_rename_index: Server cannot RENAME INDEX
        dont_support_rename_column: Server cannot RENAME COLUMN
        skip_init_version: Do not query the server version on connect
    """

    default_string_size: StrictInt = Field(default=0, ge=0)
    disable_date_time_precision: StrictBool = False
    dont_support_rename_index: StrictBool = False
    dont_support_rename_column: StrictBool = False
    skip_init_version: StrictBool = False


class OrmConfig(ConfigBlock):
    """SQLAlchemy engine and session options. Not interpreted by the loader."""

    echo: StrictBool = False
    pool_size: StrictInt = Field(default=5, ge=1)
    max_overflow: StrictInt = Field(default=10, ge=0)
    pool_timeout: StrictInt = Field(default=30, ge=1)
    pool_recycle: StrictInt = Field(default=1800, ge=-1)
    pool_pre_ping: StrictBool = True
    autoflush: StrictBool = False
    expire_on_commit: StrictBool = False


class AppConfig(ConfigBlock):
    """
    Application configuration record.

    Instances are immutable; the loader builds a new record for each
    overlay step with ``model_copy``.

    Attributes:
        version: Raw version string from the config file
        version_info: Parsed form of ``version``
        fb_sdk_version: Facebook Graph SDK version (e.g. "v12.3")
        fb_client_id: OAuth client identifier
        fb_client_secret: OAuth client secret
        fb_redirect_uri: OAuth redirect URI
        server_addr: HTTP bind address, "host:port" or ":port"
        message: Free-form message
        mysql_dsn: SQLAlchemy database URL
        mysql_config: Dialect tuning block
        orm_config: Driver settings block
    """

    DERIVED_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"version_info"})

    version: StrictStr = ""
    version_info: VersionInfo = Field(default_factory=VersionInfo)
    fb_sdk_version: StrictStr = ""
    fb_client_id: StrictStr = ""
    fb_client_secret: StrictStr = Field(default="", repr=False)
    fb_redirect_uri: StrictStr = ""
    server_addr: StrictStr = ""
    message: StrictStr = ""
    mysql_dsn: StrictStr = Field(default="", repr=False)

    mysql_config: MysqlConfig = Field(default_factory=MysqlConfig)
    orm_config: OrmConfig = Field(default_factory=OrmConfig)

    def bind_address(self) -> Tuple[str, int]:
        """
        Split ``server_addr`` into host and port.

        Accepts "host:port" and ":port"; an empty address binds to
        0.0.0.0:8000.

        Raises:
            AppException: If the address has no valid port
        """
        addr = self.server_addr.strip()
        if not addr:
            return DEFAULT_HOST, DEFAULT_PORT

        host, sep, port = addr.rpartition(":")
        if not sep or not port.isdigit():
            raise exceptions.invalid_server_addr(addr)

        port_number = int(port)
        if not 0 < port_number <= 65535:
            raise exceptions.invalid_server_addr(addr)

        return host.strip("[]") or DEFAULT_HOST, port_number


class EnvironmentOverlay(BaseSettings):
    """Environment variables overlaid onto the file configuration."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        validate_default=True,
    )

    fb_sdk_version: str = Field(default="", validation_alias="FB_SDK_VERSION")
    fb_client_id: str = Field(default="", validation_alias="FB_CLIENT_ID")
    fb_client_secret: str = Field(default="", validation_alias="FB_CLIENT_SECRET", repr=False)
    fb_redirect_uri: str = Field(default="", validation_alias="FB_REDIRECT_URI")
    mysql_dsn: str = Field(default="", validation_alias="MYSQL_DSN", repr=False)
    server_addr: str = Field(default="", validation_alias="SERVER_ADDR")

    @field_validator("fb_sdk_version")
    @classmethod
    def validate_fb_sdk_version(cls, value: str) -> str:
        """
        Validate the SDK version format.

        An unset variable arrives as an empty string and fails as well.

        Raises:
            ValueError: If the value is not of the form v<NN+>.<N>
        """
        if not SDK_VERSION_PATTERN.fullmatch(value):
            raise ValueError(
                f"FB_SDK_VERSION must match {SDK_VERSION_PATTERN.pattern}"
            )
        return value


def _read_environment() -> EnvironmentOverlay:
    try:
        return EnvironmentOverlay()
    except ValidationError as exc:
        errors = exc.errors()
        value = errors[0].get("input", "") if errors else ""
        raise exceptions.sdk_version_invalid(
            str(value), f"^{SDK_VERSION_PATTERN.pattern}$"
        ) from exc


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load the configuration record from file and environment.

    Args:
        path: Config file path (defaults to the path settings location)

    Returns:
        Fully populated AppConfig

    Raises:
        AppException: CONFIG_UNREADABLE, CONFIG_INVALID or SDK_VERSION_INVALID
    """
    config_path = Path(path) if path is not None else default_app_config_path()

    try:
        raw = config_path.read_bytes()
    except OSError as exc:
        raise exceptions.config_unreadable(config_path, exc) from exc

    try:
        config = AppConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise exceptions.config_invalid(config_path, exc) from exc

    environment = _read_environment()

    config = config.model_copy(
        update={
            "version_info": parse_version(config.version),
            "fb_sdk_version": environment.fb_sdk_version,
            "fb_client_id": environment.fb_client_id,
            "fb_client_secret": environment.fb_client_secret,
            "fb_redirect_uri": environment.fb_redirect_uri,
            "mysql_dsn": environment.mysql_dsn,
            "server_addr": environment.server_addr,
        }
    )

    if not config.version_info.matched:
        logger.warning(f"Version {config.version!r} is not <major>.<minor>.<build>-<release>")

    logger.info(
        f"Configuration loaded from {config_path} "
        f"(version={config.version!r}, fb_sdk_version={config.fb_sdk_version!r})"
    )
    return config


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_app_config: Optional[AppConfig] = None
_app_config_lock = threading.Lock()


def _load_or_exit() -> AppConfig:
    try:
        return load_config()
    except AppException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)


def get_app_config() -> AppConfig:
    """
    Get the process-wide AppConfig, loading it on first access.

    Concurrent first callers block until the single load completes. A
    configuration error terminates the process with status 1.

    Returns:
        Global AppConfig instance
    """
    global _app_config

    if _app_config is None:
        with _app_config_lock:
            if _app_config is None:
                _app_config = _load_or_exit()
    return _app_config


def reset_app_config() -> None:
    """Forget the cached AppConfig. Intended for tests."""
    global _app_config

    with _app_config_lock:
        _app_config = None
