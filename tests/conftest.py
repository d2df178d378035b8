"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides environment isolation, mock config files, loaded configuration and
API client fixtures.

==============================================================================
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from idream.config import AppConfig, load_config, reset_app_config
from idream.main import create_app


MOCKS_DIR = Path(__file__).parent / "mocks"
MOCK_CONFIG_PATH = MOCKS_DIR / "app_config.json"
MOCK_MESSAGE = "This message is coming from the mocks/app_config.json"

ENVIRONMENT_VARIABLES = (
    "FB_SDK_VERSION",
    "FB_CLIENT_ID",
    "FB_CLIENT_SECRET",
    "FB_REDIRECT_URI",
    "MYSQL_DSN",
    "SERVER_ADDR",
    "IDREAM_ROOT_DIR",
    "IDREAM_APP_CONFIG_FILE",
)


# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every variable the loader reads."""
    for name in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def fresh_singleton() -> Generator[None, None, None]:
    """Start and finish each test without a cached AppConfig."""
    reset_app_config()
    yield
    reset_app_config()


@pytest.fixture
def sdk_env(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Set a valid set of Facebook SDK variables."""
    values = {
        "FB_SDK_VERSION": "v12.3",
        "FB_CLIENT_ID": "client-id",
        "FB_CLIENT_SECRET": "client-secret",
        "FB_REDIRECT_URI": "https://example.com/oauth/callback",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def mock_config_path(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default config location at the mock file."""
    monkeypatch.setenv("IDREAM_APP_CONFIG_FILE", str(MOCK_CONFIG_PATH))
    return MOCK_CONFIG_PATH


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a config file; strings are written verbatim, other values as JSON."""
    def _write(content: Any) -> Path:
        path = tmp_path / "app_config.json"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


# ============================================================================
# CONFIG AND CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def app_config(sdk_env: Dict[str, str]) -> AppConfig:
    """AppConfig loaded from the mock file."""
    return load_config(MOCK_CONFIG_PATH)


@pytest.fixture
def sqlite_config(app_config: AppConfig) -> AppConfig:
    """Mock AppConfig pointed at an in-memory SQLite database."""
    return app_config.model_copy(update={"mysql_dsn": "sqlite://"})


@pytest.fixture
def client(app_config: AppConfig) -> Generator[TestClient, None, None]:
    """Test client for an app without a database."""
    with TestClient(create_app(app_config)) as test_client:
        yield test_client


@pytest.fixture
def sqlite_client(sqlite_config: AppConfig) -> Generator[TestClient, None, None]:
    """Test client for an app backed by in-memory SQLite."""
    with TestClient(create_app(sqlite_config)) as test_client:
        yield test_client
