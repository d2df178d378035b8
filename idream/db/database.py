"""
==============================================================================
Database Connection Management Module
==============================================================================

Database connection management using SQLAlchemy, driven by AppConfig.

This module implements:
- DatabaseManager: engine and session factory built from the injected config
- Column type helpers honoring the MySQL dialect tuning block

Configuration Sources:
---------------------
- mysql_dsn:     SQLAlchemy database URL (e.g. mysql+pymysql://user:pw@host/db)
- orm_config:    pooling, echo and session options
- mysql_config:  string size, datetime precision, server version probing

SQLite Note:
-----------
SQLite URLs skip connection pooling options and disable
'check_same_thread' so sessions can be used across threads.

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional, Tuple

from sqlalchemy import DateTime, String, create_engine, event, text
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.types import TypeEngine

from idream.config.settings import AppConfig, MysqlConfig, OrmConfig
from idream.core import exceptions


# Module logger
logger = logging.getLogger(__name__)

# Fractional seconds precision used unless disable_date_time_precision is set
DATETIME_FSP = 3


class DatabaseManager:
    """
    Database connection manager for one AppConfig.

    The engine is created lazily on first access, so constructing the
    manager never touches the database.

    Attributes:
        _config: Application configuration
        _engine: SQLAlchemy engine instance (lazy loaded)
        _session_factory: Session factory for creating sessions

    Example:
        >>> db_manager = DatabaseManager(get_app_config())
        >>> with db_manager.session_scope() as session:
        ...     session.execute(text("SELECT 1"))
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

        logger.debug("DatabaseManager initialized")

    @property
    def is_configured(self) -> bool:
        """Check if a database URL is configured."""
        return bool(self._config.mysql_dsn)

    @property
    def dialect_config(self) -> MysqlConfig:
        """Get the dialect tuning block."""
        return self._config.mysql_config

    @property
    def orm_config(self) -> OrmConfig:
        """Get the driver settings block."""
        return self._config.orm_config

    # =========================================================================
    # ENGINE MANAGEMENT
    # =========================================================================

    @property
    def engine(self) -> Engine:
        """
        Get the SQLAlchemy engine (lazy initialization).

        Raises:
            AppException: If no database URL is configured
        """
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        if not self.is_configured:
            raise exceptions.database_not_configured()

        database_url = self._config.mysql_dsn
        orm = self.orm_config

        if database_url.startswith("sqlite"):
            engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                echo=orm.echo,
            )

            # Enable foreign key support for SQLite
            @event.listens_for(engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        else:
            engine = create_engine(
                database_url,
                pool_size=orm.pool_size,
                max_overflow=orm.max_overflow,
                pool_timeout=orm.pool_timeout,
                pool_recycle=orm.pool_recycle,
                pool_pre_ping=orm.pool_pre_ping,
                echo=orm.echo,
            )

        logger.info(f"Created database engine: {self._safe_url()}")
        return engine

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    @property
    def session_factory(self) -> sessionmaker:
        """Get the session factory (lazy initialization)."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autoflush=self.orm_config.autoflush,
                expire_on_commit=self.orm_config.expire_on_commit,
            )
        return self._session_factory

    def get_session(self) -> Session:
        """
        Get a new database session.

        The caller is responsible for closing the session.
        """
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on exception and always closes the
        session.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # =========================================================================
    # DIALECT TUNING
    # =========================================================================

    def string_type(self) -> String:
        """String column type sized by default_string_size (0 = unsized)."""
        size = self.dialect_config.default_string_size
        return String(size or None)

    def datetime_type(self) -> TypeEngine:
        """DATETIME with fractional seconds unless precision is disabled."""
        if self.dialect_config.disable_date_time_precision:
            return DateTime()
        return DateTime().with_variant(mysql.DATETIME(fsp=DATETIME_FSP), "mysql")

    def server_version(self) -> Optional[Tuple[int, ...]]:
        """
        Get the database server version.

        Returns:
            Version tuple, or None when skip_init_version is set

        Raises:
            AppException: If the database is not configured or unreachable
        """
        if self.dialect_config.skip_init_version:
            return None

        try:
            with self.engine.connect():
                return self.engine.dialect.server_version_info
        except SQLAlchemyError as exc:
            logger.error(f"Database server version query failed: {exc}")
            raise exceptions.database_unavailable(exc) from exc

    # =========================================================================
    # CONNECTION MANAGEMENT
    # =========================================================================

    def verify_connection(self) -> bool:
        """
        Verify database connection is working.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.debug("Database connection verified")
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        """
        Dispose of the connection pool.

        Call this on application shutdown to clean up resources.
        """
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection pool disposed")

    def _safe_url(self) -> str:
        try:
            return make_url(self._config.mysql_dsn).render_as_string(hide_password=True)
        except ArgumentError:
            return "<unparseable url>"

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"DatabaseManager(url={self._safe_url()!r})"
