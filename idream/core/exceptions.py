"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Library code raises it; only the process entry points decide to exit.

    Usage:
        raise AppException("Cannot read config", "CONFIG_UNREADABLE", 500)

    Error Codes:
        Configuration:
            - CONFIG_UNREADABLE (500)
            - CONFIG_INVALID (500)
            - SDK_VERSION_INVALID (500)
            - INVALID_SERVER_ADDR (500)

        Database:
            - DATABASE_NOT_CONFIGURED (503)
            - DATABASE_UNAVAILABLE (503)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "CONFIG_INVALID")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def config_unreadable(path: Path, error: OSError) -> AppException:
    """Create config file read failure exception."""
    return AppException(
        f"error loading {path.name}: {error}",
        "CONFIG_UNREADABLE",
        500,
        {"path": str(path)}
    )


def config_invalid(path: Path, error: Exception) -> AppException:
    """Create config file deserialization failure exception."""
    return AppException(
        f"error unmarshaling {path.name}: {error}",
        "CONFIG_INVALID",
        500,
        {"path": str(path)}
    )


def sdk_version_invalid(value: str, pattern: str) -> AppException:
    """Create FB_SDK_VERSION validation failure exception."""
    return AppException(
        f"FB_SDK_VERSION did not satisfy the expected version pattern {pattern} (got {value!r})",
        "SDK_VERSION_INVALID",
        500,
        {"value": value, "pattern": pattern}
    )


def invalid_server_addr(addr: str) -> AppException:
    """Create malformed server address exception."""
    return AppException(
        f"Invalid server address: {addr!r}",
        "INVALID_SERVER_ADDR",
        500,
        {"server_addr": addr}
    )


def database_not_configured() -> AppException:
    """Create missing database connection string exception."""
    return AppException(
        "Database connection string is not configured",
        "DATABASE_NOT_CONFIGURED",
        503
    )


def database_unavailable(error: Exception) -> AppException:
    """Create unreachable database exception."""
    return AppException(
        f"Database is unavailable: {error}",
        "DATABASE_UNAVAILABLE",
        503
    )
