# ============================================================================
# CLAUDE CONTEXT - PARCELS CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - Parcels API
# PURPOSE: Table location, limit policies and timeouts for the parcels API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ParcelsConfig, get_parcels_config
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# PATTERNS: Settings Pattern, Singleton via cached function
# ENTRY_POINTS: from parcels.config import get_parcels_config
# ============================================================================

"""
Parcels API Configuration

Environment Variables (all optional):
    - PARCELS_SCHEMA: Schema containing the parcels table (default: "takehome")
    - PARCELS_TABLE: Parcels table name (default: "dallas_parcels")
    - PARCELS_GEOMETRY_COLUMN: Binary geometry column (default: "geom")
    - PARCELS_DEFAULT_LIMIT: Rows returned by GET /parcels when no limit is given (default: 50)
    - PARCELS_MAX_LIMIT: Ceiling for GET /parcels (default: 200)
    - PARCELS_EXPORT_DEFAULT_LIMIT: Rows exported when no limit is given (default: 5000)
    - PARCELS_EXPORT_MAX_LIMIT: Ceiling for the CSV export (default: 5000)
    - PARCELS_QUERY_TIMEOUT: statement_timeout in seconds (default: 30)

Connection settings live in the application config (config.py).
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from .models import LimitPolicy


class ParcelsConfig(BaseModel):
    """
    Configuration for the parcels API.
    """

    parcels_schema: str = Field(
        default_factory=lambda: os.getenv("PARCELS_SCHEMA", "takehome"),
        description="PostgreSQL schema containing the parcels table"
    )
    parcels_table: str = Field(
        default_factory=lambda: os.getenv("PARCELS_TABLE", "dallas_parcels"),
        description="Parcels table name"
    )
    geometry_column: str = Field(
        default_factory=lambda: os.getenv("PARCELS_GEOMETRY_COLUMN", "geom"),
        description="Binary (WKB/EWKB) geometry column"
    )

    default_limit: int = Field(
        default_factory=lambda: int(os.getenv("PARCELS_DEFAULT_LIMIT", "50")),
        ge=1,
        description="Default number of rows for interactive reads"
    )
    max_limit: int = Field(
        default_factory=lambda: int(os.getenv("PARCELS_MAX_LIMIT", "200")),
        ge=1,
        description="Maximum number of rows for interactive reads"
    )
    export_default_limit: int = Field(
        default_factory=lambda: int(os.getenv("PARCELS_EXPORT_DEFAULT_LIMIT", "5000")),
        ge=1,
        description="Default number of rows for the CSV export"
    )
    export_max_limit: int = Field(
        default_factory=lambda: int(os.getenv("PARCELS_EXPORT_MAX_LIMIT", "5000")),
        ge=1,
        description="Maximum number of rows for the CSV export"
    )

    query_timeout_seconds: int = Field(
        default_factory=lambda: int(os.getenv("PARCELS_QUERY_TIMEOUT", "30")),
        ge=1,
        le=300,
        description="Maximum query execution time in seconds"
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "ParcelsConfig":
        """Defaults may not exceed their ceilings."""
        if self.default_limit > self.max_limit:
            raise ValueError("PARCELS_DEFAULT_LIMIT cannot exceed PARCELS_MAX_LIMIT")
        if self.export_default_limit > self.export_max_limit:
            raise ValueError("PARCELS_EXPORT_DEFAULT_LIMIT cannot exceed PARCELS_EXPORT_MAX_LIMIT")
        return self

    @property
    def interactive_limits(self) -> LimitPolicy:
        return LimitPolicy(default=self.default_limit, ceiling=self.max_limit)

    @property
    def export_limits(self) -> LimitPolicy:
        return LimitPolicy(default=self.export_default_limit, ceiling=self.export_max_limit)


# Singleton instance cache
_config_cache: Optional[ParcelsConfig] = None


def get_parcels_config() -> ParcelsConfig:
    """
    Get singleton parcels configuration instance.

    Returns:
        Cached configuration instance
    """
    global _config_cache

    if _config_cache is None:
        _config_cache = ParcelsConfig()

    return _config_cache
