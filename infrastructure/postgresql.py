# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Database connectivity for the synchronizer and CLI tools
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Provides database connectivity for schema reconciliation:
- Connection string from DATABASE_URL or POSTGRES_* settings
- Context managers for safe resource management

Connection Priority:
1. Explicit connection string (constructor / --connection flag)
2. DATABASE_URL
3. POSTGRES_HOST / POSTGRES_PORT / POSTGRES_DB / POSTGRES_USER / POSTGRES_PASSWORD
"""

import threading
from typing import Optional
from contextlib import contextmanager

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row

from core.config.defaults import DatabaseDefaults
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)


# ============================================================================
# POSTGRESQL REPOSITORY BASE
# ============================================================================

class PostgreSQLRepository:
    """
    Base repository for PostgreSQL database operations.

    Usage:
        repo = PostgreSQLRepository()
        with repo.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        defaults: Optional[DatabaseDefaults] = None,
    ):
        """
        Initialize PostgreSQL repository.

        Args:
            connection_string: Optional explicit connection string
            defaults: Optional database settings (read from env when omitted)
        """
        self._conn_string = connection_string
        self._defaults = defaults
        self._conn_string_lock = threading.Lock()

    @property
    def conn_string(self) -> str:
        """Get or build connection string (lazy, thread-safe)."""
        if self._conn_string is None:
            with self._conn_string_lock:
                if self._conn_string is None:
                    self._conn_string = self._build_connection_string()
        return self._conn_string

    def _build_connection_string(self) -> str:
        """Build PostgreSQL connection string from settings."""
        settings = self._defaults or DatabaseDefaults.from_env()

        if settings.url:
            return settings.url

        if not settings.configured:
            raise ValueError(
                "Database connection not configured. "
                "Set DATABASE_URL, or POSTGRES_HOST and POSTGRES_DB environment variables."
            )

        conn_str = make_conninfo(
            host=settings.host,
            port=settings.port,
            dbname=settings.database,
            user=settings.user,
            password=settings.password or None,
            sslmode=settings.sslmode,
        )
        logger.debug(f"Connection string built for {settings.database}")
        return conn_str

    @contextmanager
    def get_connection(self):
        """
        Context manager for PostgreSQL connections.

        Yields:
            psycopg connection with dict_row factory
        """
        conn = None
        try:
            logger.debug("Connecting to PostgreSQL...")
            conn = psycopg.connect(self.conn_string, row_factory=dict_row)
            logger.debug("PostgreSQL connection established")
            yield conn

        except psycopg.Error as e:
            logger.error(f"PostgreSQL error: {e}")
            if conn:
                conn.rollback()
            raise

        finally:
            if conn:
                conn.close()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PostgreSQLRepository",
]
