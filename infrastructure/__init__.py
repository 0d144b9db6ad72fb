# ============================================================================
# CLAUDE CONTEXT - INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Core Infrastructure - Database access
# PURPOSE: Shared PostgreSQL connection management for the parcels API
# EXPORTS: PostgreSQLRepository
# DEPENDENCIES: psycopg, config
# ============================================================================

"""
Infrastructure Module

Provides shared infrastructure components:
- PostgreSQL connection management (PostgreSQLRepository)
"""

from .postgresql import PostgreSQLRepository

__version__ = "1.0.0"
__all__ = [
    "PostgreSQLRepository"
]
