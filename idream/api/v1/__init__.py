"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- version: Application version information

==============================================================================
"""

from . import health, version

__all__ = ["health", "version"]
