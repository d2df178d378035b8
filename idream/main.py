"""
==============================================================================
idream-erp - Application Entry Point
==============================================================================

FastAPI application factory and process entry point.

The factory receives the AppConfig explicitly; only ``main()`` and the
uvicorn factory fall back to the process-wide singleton.

Usage:
------
    # Development
    uvicorn idream.main:create_app --factory --reload

    # Production (binds to SERVER_ADDR)
    idream-server

==============================================================================
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from idream.api.router import api_router
from idream.config import AppConfig, get_app_config
from idream.core.exceptions import AppException, register_exception_handlers
from idream.db import DatabaseManager


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Startup and shutdown events
    - Exception handler setup
    - Router registration
    """

    def __init__(self, config: AppConfig):
        """Initialize the application for the given configuration."""
        self._config = config
        self._database = DatabaseManager(config)
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title="idream-erp",
            version=self._config.version or "0.0.0",
            lifespan=self._lifespan,
        )

        app.state.config = self._config
        app.state.database = self._database

        register_exception_handlers(app)
        app.include_router(api_router)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info(f"Starting idream-erp {self._config.version}")
        if not self._database.is_configured:
            logger.warning("MYSQL_DSN is not set, database features disabled")

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("Shutting down...")
        self._database.dispose()
        logger.info("Shutdown complete")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration to inject (defaults to the process singleton)
    """
    if config is None:
        config = get_app_config()
    return Application(config).app


# ============================================================================
# ENTRY POINT
# ============================================================================

def main() -> None:
    """Load configuration and serve the API on SERVER_ADDR."""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    config = get_app_config()
    try:
        host, port = config.bind_address()
    except AppException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)

    uvicorn.run(create_app(config), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
