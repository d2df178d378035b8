"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure configured from AppConfig.

Usage:
------
    from idream.db import DatabaseManager

    db_manager = DatabaseManager(config)
    with db_manager.session_scope() as session:
        ...

==============================================================================
"""

from .database import DatabaseManager

__all__ = [
    "DatabaseManager",
]
