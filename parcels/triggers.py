# ============================================================================
# CLAUDE CONTEXT - PARCELS TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - Parcels API endpoints
# PURPOSE: Azure Functions HTTP triggers for parcel reads and CSV export
# EXPORTS: get_parcel_triggers (returns list of trigger configurations)
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# PYDANTIC_MODELS: FilterSpec (lenient query parameter parsing)
# DEPENDENCIES: azure.functions, json, util_logger
# SOURCE: HTTP requests from the map/table frontend
# PATTERNS: Trigger Pattern, Factory Pattern (get_parcel_triggers)
# ENTRY_POINTS: Function App route registration via get_parcel_triggers()
# ============================================================================

"""
Parcels API HTTP Triggers - Azure Functions Handlers

- GET /api/parcels        - Filtered parcels as JSON, with latitude/longitude
- GET /api/parcels/export - Filtered parcels as CSV (no geometry)

Query Parameters (all optional, parsed leniently):
- isAuthenticated: "true" lifts the county restriction
- limit: Row cap (clamped per endpoint)
- minPrice, maxPrice: Assessed value bounds
- minSqft, maxSqft: Parcel area bounds

Malformed filter values are ignored rather than rejected. A store failure
fails the whole request with a 500.
"""

import azure.functions as func
import json
from typing import Any, Dict, List, Optional

from util_logger import LoggerFactory, ComponentType

from .models import FilterSpec
from .service import ParcelsService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ParcelsTriggers")


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_parcel_triggers() -> List[Dict[str, Any]]:
    """
    Get list of parcels API trigger configurations for function_app.py.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    return [
        {
            'route': 'parcels',
            'methods': ['GET'],
            'handler': ParcelsTrigger().handle
        },
        {
            'route': 'parcels/export',
            'methods': ['GET'],
            'handler': ParcelsExportTrigger().handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseParcelsTrigger:
    """
    Base class for parcels API triggers.

    Provides JSON/error response formatting and filter parsing.
    """

    def __init__(self, service: Optional[ParcelsService] = None):
        self.service = service or ParcelsService()

    def _parse_filters(self, req: func.HttpRequest) -> FilterSpec:
        return FilterSpec.from_query_params(req.params)

    def _json_response(
        self,
        data: Any,
        status_code: int = 200,
        content_type: str = "application/json"
    ) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Values json can't encode natively (Decimal, datetime, UUID) are
        rendered with str().
        """
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json', exclude_none=True)

        return func.HttpResponse(
            body=json.dumps(data, default=str),
            status_code=status_code,
            mimetype=content_type
        )

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest"
    ) -> func.HttpResponse:
        error_body = {
            "code": error_type,
            "description": message
        }
        return func.HttpResponse(
            body=json.dumps(error_body, indent=2),
            status_code=status_code,
            mimetype="application/json"
        )


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class ParcelsTrigger(BaseParcelsTrigger):
    """
    Endpoint: GET /api/parcels
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            spec = self._parse_filters(req)
            parcels = self.service.list_parcels(spec)
            return self._json_response(parcels)

        except Exception as e:
            logger.error(f"Error fetching parcels: {e}", exc_info=True)
            return self._error_response(
                message=f"Failed to fetch parcels: {e}",
                status_code=500,
                error_type="InternalServerError"
            )


class ParcelsExportTrigger(BaseParcelsTrigger):
    """
    Endpoint: GET /api/parcels/export

    Returns text/csv as an attachment named parcels.csv.
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            spec = self._parse_filters(req)
            body = self.service.export_parcels_csv(spec)

            return func.HttpResponse(
                body=body,
                status_code=200,
                mimetype="text/csv",
                charset="utf-8",
                headers={"Content-Disposition": 'attachment; filename="parcels.csv"'}
            )

        except Exception as e:
            logger.error(f"Error exporting parcels: {e}", exc_info=True)
            return self._error_response(
                message=f"Failed to export parcels: {e}",
                status_code=500,
                error_type="InternalServerError"
            )
