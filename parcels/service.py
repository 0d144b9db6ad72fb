# ============================================================================
# CLAUDE CONTEXT - PARCELS SERVICE
# ============================================================================
# STATUS: Standalone Service - Parcels API business logic
# PURPOSE: Orchestrate filter -> query -> geometry resolution -> output
# EXPORTS: ParcelsService
# DEPENDENCIES: typing, logging
# SOURCE: Repository layer (ParcelsRepository)
# PATTERNS: Service Layer, Facade Pattern
# ENTRY_POINTS: service = ParcelsService(config); rows = service.list_parcels(spec)
# ============================================================================

"""
Parcels Service - Business Logic Layer

Coordinates the predicate builder, the repository and the geometry resolver.
JSON reads select the geometry column and resolve one point per row; the CSV
export never touches geometry.
"""

from typing import Any, Dict, List, Optional

from util_logger import LoggerFactory, ComponentType

from .config import ParcelsConfig, get_parcels_config
from .csv_export import render_parcels_csv
from .geometry import annotate_rows
from .models import FilterSpec
from .predicates import build_parcel_query
from .repository import ParcelsRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ParcelsService")


class ParcelsService:
    """
    Business logic service for the parcels API.
    """

    def __init__(self, config: Optional[ParcelsConfig] = None,
                 repository: Optional[ParcelsRepository] = None):
        self.config = config or get_parcels_config()
        self.repository = repository or ParcelsRepository(self.config)

    def list_parcels(self, spec: FilterSpec) -> List[Dict[str, Any]]:
        """
        Interactive read: filtered rows with latitude/longitude added.

        Raises:
            psycopg.Error: store failures are not handled here
        """
        built = build_parcel_query(spec, self.config.interactive_limits)
        rows = self.repository.select_parcels(built, include_geometry=True)
        parcels = annotate_rows(rows, geometry_column=self.config.geometry_column)

        located = sum(1 for p in parcels if "latitude" in p)
        logger.info(
            f"Listed {len(parcels)} parcels ({located} located)",
            extra={'custom_dimensions': {
                'authenticated': spec.authenticated,
                'conditions': len(built.conditions),
                'limit': built.limit_value
            }}
        )
        return parcels

    def export_parcels_csv(self, spec: FilterSpec) -> str:
        """
        Export read: same filters, export limit policy, CSV text.
        """
        built = build_parcel_query(spec, self.config.export_limits)
        rows = self.repository.select_parcels(built, include_geometry=False)

        logger.info(
            f"Exporting {len(rows)} parcels as CSV",
            extra={'custom_dimensions': {
                'authenticated': spec.authenticated,
                'limit': built.limit_value
            }}
        )
        return render_parcels_csv(rows)
