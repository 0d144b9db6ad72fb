# ============================================================================
# CLAUDE CONTEXT - POSTGRESQL REPOSITORY
# ============================================================================
# STATUS: Core Infrastructure - PostgreSQL connection management
# PURPOSE: PostgreSQL database access for the read-only parcels API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: PostgreSQLRepository
# DEPENDENCIES: psycopg, config
# SCOPE: Read-only database operations for API serving
# PATTERNS: Repository pattern, Per-request connections, Managed identity
# ============================================================================

"""
PostgreSQL Repository - Read-Only Database Access

Provides PostgreSQL connection management with support for:
- DATABASE_URL, password, or Azure Managed Identity authentication
- Per-request connection creation (no pooling)
- Positional `$n` placeholders through psycopg.RawCursor
- Schema and table existence checks

Usage:
    from infrastructure.postgresql import PostgreSQLRepository

    repo = PostgreSQLRepository(schema_name='takehome')
    with repo._get_cursor() as cursor:
        cursor.execute("SELECT COUNT(*) AS count FROM takehome.dallas_parcels")
        result = cursor.fetchone()
"""

import logging
import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from typing import Optional, Tuple, Any
from contextlib import contextmanager

from config import get_postgres_connection_string

logger = logging.getLogger(__name__)


class PostgreSQLRepository:
    """
    PostgreSQL repository base class with connection management.

    Connection Strategy:
    -------------------
    Each operation creates a NEW connection and closes it immediately after use.
    No connection pooling is used - suitable for serverless Azure Functions
    where connection reuse across requests is not beneficial.

    Cursors are psycopg.RawCursor instances, so queries use PostgreSQL's
    native `$1, $2, ...` placeholders and rows come back as dicts in column
    order.
    """

    def __init__(self, connection_string: Optional[str] = None,
                 schema_name: str = 'takehome'):
        """
        Initialize PostgreSQL repository.

        Parameters:
        ----------
        connection_string : Optional[str]
            Explicit PostgreSQL connection string. If not provided,
            get_postgres_connection_string() is called for each connection.

        schema_name : str
            Database schema name holding the parcels table.
        """
        self.schema_name = schema_name
        self._conn_string = connection_string

        logger.info(f"PostgreSQLRepository initialized with schema: {self.schema_name}")

    @property
    def conn_string(self) -> str:
        """Explicit connection string or a freshly built one from config."""
        return self._conn_string or get_postgres_connection_string()

    @contextmanager
    def _get_connection(self):
        """
        Context manager for PostgreSQL database connections.

        1. Create connection (dict_row rows, RawCursor cursors)
        2. Yield connection to caller
        3. On error: rollback transaction
        4. Always: close connection

        Raises:
        ------
        psycopg.Error
            On connection or query failures (network, auth, syntax, etc.)
        """
        conn = None
        try:
            logger.debug(f"Opening PostgreSQL connection (schema: {self.schema_name})")
            conn = psycopg.connect(
                self.conn_string,
                row_factory=dict_row,
                cursor_factory=psycopg.RawCursor
            )
            yield conn

        except psycopg.Error as e:
            logger.error(f"PostgreSQL error: {e}")
            logger.error(f"  Error type: {type(e).__name__}")

            if conn and not conn.closed:
                try:
                    conn.rollback()
                except psycopg.Error as rollback_error:
                    logger.warning(f"Rollback failed: {rollback_error}")

            raise

        finally:
            if conn:
                conn.close()
                logger.debug("Connection closed")

    @contextmanager
    def _get_cursor(self, conn=None):
        """
        Context manager for PostgreSQL cursors.

        - With conn: caller controls the transaction
        - Without conn: a new connection is opened and committed on success
        """
        if conn:
            with conn.cursor() as cursor:
                yield cursor
        else:
            with self._get_connection() as conn:
                with conn.cursor() as cursor:
                    yield cursor
                    conn.commit()

    def schema_exists(self) -> bool:
        """
        Verify that the target database schema exists.

        Logs a warning if missing but doesn't fail - actual operations will
        fail with specific errors if the schema is genuinely missing.
        """
        row = self._execute_query(
            sql.SQL("SELECT schema_name FROM information_schema.schemata WHERE schema_name = $1"),
            (self.schema_name,),
            fetch='one'
        )
        if not row:
            logger.warning(
                f"Schema '{self.schema_name}' does not exist. "
                f"Database operations may fail."
            )
            return False
        return True

    def _execute_query(self, query: sql.Composable, params: Optional[Tuple] = None,
                       fetch: str = 'all') -> Optional[Any]:
        """
        Execute a read query built with psycopg.sql composition.

        Parameters:
        ----------
        query : sql.Composable
            SQL built using psycopg.sql composition for injection safety.
        params : Optional[Tuple]
            Values for the `$n` placeholders, in position order.
        fetch : str
            'one' or 'all'

        Raises:
        ------
        TypeError
            If query is a plain string (security requirement)
        ValueError
            If fetch parameter is invalid
        psycopg.Error
            For any database operation failure
        """
        if not isinstance(query, sql.Composable):
            raise TypeError(f"Query must be sql.Composable, got {type(query)}")

        if fetch not in ('one', 'all'):
            raise ValueError(f"Invalid fetch mode: {fetch}")

        with self._get_cursor() as cursor:
            cursor.execute(query, params)
            if fetch == 'one':
                return cursor.fetchone()
            return cursor.fetchall()

    def table_exists(self, table_name: str) -> bool:
        """
        Check if a table exists in the schema.
        """
        row = self._execute_query(
            sql.SQL("""
                SELECT EXISTS (
                    SELECT FROM information_schema.tables
                    WHERE table_schema = $1
                    AND table_name = $2
                ) AS exists
            """),
            (self.schema_name, table_name),
            fetch='one'
        )
        return bool(row and row['exists'])
