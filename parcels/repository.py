# ============================================================================
# CLAUDE CONTEXT - PARCELS REPOSITORY
# ============================================================================
# STATUS: Standalone Repository - PostGIS parcel data access
# PURPOSE: Assemble and execute the filtered parcels SELECT
# EXPORTS: ParcelsRepository, PARCEL_COLUMNS
# DEPENDENCIES: psycopg, psycopg.sql, infrastructure.postgresql
# SOURCE: PostgreSQL/PostGIS parcels table (configurable schema/table)
# VALIDATION: SQL injection prevention via psycopg.sql composition and bound $n values
# PATTERNS: Repository Pattern, SQL Composition
# ENTRY_POINTS: repo = ParcelsRepository(config); rows = repo.select_parcels(built)
# ============================================================================

"""
Parcels Repository - PostGIS Direct Access

Safety:
- Identifiers via sql.Identifier()
- WHERE fragments come from the predicate builder and contain only fixed
  column names and $n placeholders
- Every user-supplied value is bound as a parameter
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import psycopg
from psycopg import sql

from infrastructure.postgresql import PostgreSQLRepository

from .config import ParcelsConfig, get_parcels_config
from .predicates import BuiltQuery

logger = logging.getLogger(__name__)

PARCEL_COLUMNS = ("sl_uuid", "address", "county", "sqft", "total_value")


class ParcelsRepository(PostgreSQLRepository):
    """
    Read-only access to the parcels table.

    Thread Safety:
    - Each method creates its own connection
    - Safe for concurrent requests in Azure Functions
    """

    def __init__(self, config: Optional[ParcelsConfig] = None,
                 connection_string: Optional[str] = None):
        self.config = config or get_parcels_config()
        super().__init__(
            connection_string=connection_string,
            schema_name=self.config.parcels_schema
        )

    def build_select(self, built: BuiltQuery,
                     include_geometry: bool = True) -> Tuple[sql.Composed, Tuple[Any, ...]]:
        """
        Compose the SELECT for a built filter.

        Returns:
            Tuple of (query, params) where params line up with $1..$n
        """
        columns = list(PARCEL_COLUMNS)
        if include_geometry:
            columns.append(self.config.geometry_column)

        query = sql.SQL("SELECT {columns} FROM {schema}.{table}").format(
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            schema=sql.Identifier(self.config.parcels_schema),
            table=sql.Identifier(self.config.parcels_table)
        )

        if built.has_conditions:
            query = query + sql.SQL(" WHERE ") + sql.SQL(built.where_sql)

        query = query + sql.SQL(" LIMIT ") + sql.SQL(built.limit_placeholder)

        return query, built.params

    def select_parcels(self, built: BuiltQuery,
                       include_geometry: bool = True) -> List[Dict[str, Any]]:
        """
        Run the filtered parcels query.

        Returns:
            Rows as dicts in column order

        Raises:
            psycopg.Error: connection, syntax or timeout failures
        """
        query, params = self.build_select(built, include_geometry=include_geometry)

        try:
            with self._get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        sql.SQL("SET statement_timeout = {}").format(
                            sql.Literal(f"{self.config.query_timeout_seconds}s")
                        )
                    )
                    cur.execute(query, params)
                    rows = cur.fetchall()

            logger.info(
                f"Parcels query returned {len(rows)} rows "
                f"({len(built.conditions)} conditions, limit {built.limit_value})"
            )
            return rows

        except psycopg.Error as e:
            logger.error(f"Error querying parcels from '{self.config.parcels_schema}.{self.config.parcels_table}': {e}")
            raise
