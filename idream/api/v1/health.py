"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from idream.config.settings import AppConfig
from idream.core.dependencies import get_config, get_database_manager
from idream.db.database import DatabaseManager


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, config: AppConfig, db_manager: DatabaseManager):
        self._config = config
        self._db_manager = db_manager

    def check_database(self) -> str:
        """Check database connectivity."""
        if not self._db_manager.is_configured:
            return "not_configured"
        if self._db_manager.verify_connection():
            return "healthy"
        return "unhealthy"

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()

        overall = "degraded" if db_status == "unhealthy" else "healthy"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
            },
            "version": self._config.version,
        }


@router.get("")
def health_check(
    config: AppConfig = Depends(get_config),
    db_manager: DatabaseManager = Depends(get_database_manager),
):
    """
    Health check endpoint.

    Returns system status including API and database.
    """
    controller = HealthController(config, db_manager)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}


@router.get("/database")
def database_info(db_manager: DatabaseManager = Depends(get_database_manager)):
    """
    Database server details.

    Responds 503 when no database URL is configured or the database is
    unreachable.
    """
    server_version = db_manager.server_version()
    return {
        "server_version": list(server_version) if server_version else None,
        "default_string_size": db_manager.dialect_config.default_string_size,
    }
