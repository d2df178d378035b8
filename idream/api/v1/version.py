"""
==============================================================================
Version Endpoint
==============================================================================

Exposes the application version and public configuration values.

==============================================================================
"""

from fastapi import APIRouter, Depends

from idream.config.settings import AppConfig
from idream.core.dependencies import get_config


router = APIRouter(prefix="/version", tags=["Version"])


@router.get("")
async def get_version(config: AppConfig = Depends(get_config)):
    """Return raw and parsed version, SDK version and message."""
    return {
        "version": config.version,
        "version_info": config.version_info.model_dump(),
        "fb_sdk_version": config.fb_sdk_version,
        "message": config.message,
    }
