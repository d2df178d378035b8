"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the configuration record and database access.

The application factory stores the AppConfig and its DatabaseManager on
``app.state``; route handlers receive them through these dependencies
instead of reaching for the process-wide singleton.

Usage Examples:
--------------
    @router.get("/version")
    async def version(config: AppConfig = Depends(get_config)):
        return {"version": config.version}

==============================================================================
"""

from __future__ import annotations

from fastapi import Request

from idream.config.settings import AppConfig
from idream.db.database import DatabaseManager


def get_config(request: Request) -> AppConfig:
    """Get the AppConfig the application was created with."""
    return request.app.state.config


def get_database_manager(request: Request) -> DatabaseManager:
    """Get the application's DatabaseManager."""
    return request.app.state.database
