# ============================================================================
# CLAUDE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime with the parcels API
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, parcels, saved_filters, health
# ============================================================================

"""
Azure Functions Entry Point for the parcels API

Architecture:
    - Parcels API: 2 endpoints (filtered JSON read, CSV export)
    - Saved filters: 3 routes (keyed store, per-user latest filter)
    - Health checks: 2 endpoints
        - /api/health - Public (minimal response)
        - /api/health/detailed - Internal (full metrics)

Deployment:
    - Local: func start
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import azure.functions as func
import json
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = func.FunctionApp()

# ============================================================================
# Parcels API - 2 Endpoints
# ============================================================================

from parcels import get_parcel_triggers

logger.info("Registering parcels API endpoints...")

parcel_triggers = get_parcel_triggers()


@app.route(route="parcels", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def parcels_list(req: func.HttpRequest) -> func.HttpResponse:
    return parcel_triggers[0]['handler'](req)


@app.route(route="parcels/export", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def parcels_export(req: func.HttpRequest) -> func.HttpResponse:
    return parcel_triggers[1]['handler'](req)


logger.info("Parcels API registered (2 endpoints)")

# ============================================================================
# Saved Filters - 3 Routes
# ============================================================================

from saved_filters import get_saved_filter_triggers

logger.info("Registering saved filter endpoints...")

filter_triggers = get_saved_filter_triggers()


@app.route(route="saved-filters", methods=["GET", "POST"], auth_level=func.AuthLevel.ANONYMOUS)
def saved_filters(req: func.HttpRequest) -> func.HttpResponse:
    return filter_triggers[0]['handler'](req)


@app.route(route="filters", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def filters_save_latest(req: func.HttpRequest) -> func.HttpResponse:
    return filter_triggers[1]['handler'](req)


@app.route(route="filters/latest", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def filters_latest(req: func.HttpRequest) -> func.HttpResponse:
    return filter_triggers[2]['handler'](req)


logger.info("Saved filter endpoints registered (3 routes)")

# ============================================================================
# Health Check Endpoints - 2 Endpoints (Public + Detailed)
# ============================================================================


@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """
    Public health check endpoint. Always returns 200; status is in the body.
    """
    from health import get_public_health

    result = get_public_health()

    return func.HttpResponse(
        json.dumps(result, default=str),
        mimetype="application/json",
        status_code=200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


@app.route(route="health/detailed", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_detailed(req: func.HttpRequest) -> func.HttpResponse:
    """
    Detailed health check endpoint. Returns 503 if unhealthy, 200 otherwise.

    Block from external access at the gateway.
    """
    from health import get_detailed_health, HealthStatus

    result = get_detailed_health()

    status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200

    return func.HttpResponse(
        json.dumps(result, default=str, indent=2),
        mimetype="application/json",
        status_code=status_code,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


logger.info("=" * 60)
logger.info("Function App initialized successfully")
logger.info("Available endpoints:")
logger.info("  - GET /api/parcels - Filtered parcels with latitude/longitude")
logger.info("  - GET /api/parcels/export - Filtered parcels as CSV")
logger.info("  - GET/POST /api/saved-filters - Saved filters keyed by userId")
logger.info("  - POST /api/filters - Save caller's latest filter")
logger.info("  - GET /api/filters/latest - Caller's latest filter")
logger.info("  - GET /api/health - Public health check (minimal)")
logger.info("  - GET /api/health/detailed - Detailed health")
logger.info("=" * 60)
