# ============================================================================
# CLAUDE CONTEXT - PARCELS API MODULE
# ============================================================================
# STATUS: Standalone Module - Parcels query & geometry resolution
# PURPOSE: Filtered read API over the parcels table (JSON + CSV)
# EXPORTS: ParcelsService, ParcelsConfig, get_parcels_config, get_parcel_triggers
# DEPENDENCIES: psycopg, pydantic, shapely, azure-functions
# SOURCE: Environment variables for PostGIS connection and table location
# PATTERNS: Service Layer, Repository Pattern, Query Builder
# ENTRY_POINTS: from parcels import get_parcel_triggers
# ============================================================================

"""
Parcels API

Architecture:
    parcels/
    ├── config.py      # Environment-based configuration and limit policies
    ├── validation.py  # Lenient numeric parsing
    ├── models.py      # FilterSpec, LimitPolicy, ResolvedPoint
    ├── predicates.py  # WHERE fragments + positional bind values
    ├── geometry.py    # WKB decoding and representative points
    ├── csv_export.py  # CSV rendering
    ├── repository.py  # PostGIS direct access (psycopg)
    ├── service.py     # Orchestration
    └── triggers.py    # Azure Functions HTTP handlers
"""

from .config import ParcelsConfig, get_parcels_config
from .service import ParcelsService
from .triggers import get_parcel_triggers

__version__ = "1.0.0"
__all__ = [
    "ParcelsConfig",
    "ParcelsService",
    "get_parcel_triggers",
    "get_parcels_config"
]
