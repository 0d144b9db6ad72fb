# ============================================================================
# CLAUDE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Health checks for load balancer probes and operations
# EXPORTS: get_public_health, get_detailed_health, HealthStatus
# DEPENDENCIES: psycopg, config, util_logger
# PATTERNS: Two-tier health checks (public/detailed)
# ============================================================================

"""
Health Check Module for the parcels API

1. Public Health (/api/health):
   - Minimal response for external callers
   - Returns only status and timestamp
   - Always returns 200 (status in body indicates health)

2. Detailed Health (/api/health/detailed):
   - Database connectivity with latency
   - Parcels table presence
   - Saved filter storage location
   - API module status
   - Returns 503 if unhealthy

Usage:
    from health import get_public_health, get_detailed_health

    result = get_public_health()
    # {"status": "healthy", "timestamp": "2026-10-19T12:00:00+00:00"}
"""

import os
import time
import uuid
import psycopg
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any

from config import get_postgres_connection_string, get_app_config
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # Non-critical components failing
    UNHEALTHY = "unhealthy"    # Critical components failing


@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Health Check Functions
# ============================================================================

def check_database_connectivity(timeout_seconds: float = 5.0) -> CheckResult:
    """
    Execute SELECT 1 against the configured database.

    Critical - failure means UNHEALTHY.
    """
    start_time = time.perf_counter()

    try:
        conn_string = get_postgres_connection_string()
        config = get_app_config()

        with psycopg.connect(conn_string, connect_timeout=int(timeout_seconds)) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()

        latency_ms = (time.perf_counter() - start_time) * 1000

        details = {"auth_mode": config.auth_mode}
        if not config.database_url:
            details.update({"host": config.postgis_host, "database": config.postgis_database})

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message="PostgreSQL connection successful",
            details=details
        )

    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Database connectivity check failed: {e}")

        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"Database connection failed: {type(e).__name__}",
            details={"error": str(e)}
        )


def check_parcels_table() -> CheckResult:
    """
    Verify the parcels schema and table exist.

    Critical - failure means UNHEALTHY.
    """
    from parcels.repository import ParcelsRepository

    start_time = time.perf_counter()

    try:
        repo = ParcelsRepository()
        schema = repo.config.parcels_schema
        table = repo.config.parcels_table

        schema_ok = repo.schema_exists()
        table_ok = schema_ok and repo.table_exists(table)

        latency_ms = (time.perf_counter() - start_time) * 1000
        details = {"schema": schema, "table": table, "schema_exists": schema_ok, "table_exists": table_ok}

        if not table_ok:
            return CheckResult(
                status="fail",
                latency_ms=latency_ms,
                message=f"Table '{schema}.{table}' does not exist",
                details=details
            )

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message=f"Table '{schema}.{table}' available",
            details=details
        )

    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Parcels table check failed: {e}")

        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"Parcels table check failed: {type(e).__name__}",
            details={"error": str(e)}
        )


def check_saved_filter_storage() -> CheckResult:
    """
    Check that saved filter files can be created where configured.

    Non-critical - failure means DEGRADED.
    """
    from saved_filters import get_saved_filters_config

    start_time = time.perf_counter()
    config = get_saved_filters_config()

    locations = {
        "saved_filters_path": os.path.dirname(os.path.abspath(config.saved_filters_path)),
        "latest_filters_dir": os.path.abspath(config.latest_filters_dir)
    }
    details: Dict[str, Any] = {}

    for name, directory in locations.items():
        # Nearest existing ancestor decides whether the directory can be created
        probe = directory
        while not os.path.exists(probe) and os.path.dirname(probe) != probe:
            probe = os.path.dirname(probe)
        details[name] = {
            "directory": directory,
            "exists": os.path.isdir(directory),
            "writable": os.access(probe, os.W_OK)
        }

    latency_ms = (time.perf_counter() - start_time) * 1000
    writable = all(d["writable"] for d in details.values())

    return CheckResult(
        status="pass" if writable else "fail",
        latency_ms=latency_ms,
        message="Saved filter storage writable" if writable else "Saved filter storage not writable",
        details=details
    )


def check_api_modules() -> CheckResult:
    """
    Verify parcels and saved_filters import and register their routes.

    Non-critical - failure means DEGRADED.
    """
    start_time = time.perf_counter()

    modules: Dict[str, Dict[str, Any]] = {}

    try:
        from parcels import get_parcel_triggers
        modules["parcels"] = {"available": True, "endpoints": len(get_parcel_triggers())}
    except Exception as e:
        modules["parcels"] = {"available": False, "error": str(e)}

    try:
        from saved_filters import get_saved_filter_triggers
        modules["saved_filters"] = {"available": True, "endpoints": len(get_saved_filter_triggers())}
    except Exception as e:
        modules["saved_filters"] = {"available": False, "error": str(e)}

    latency_ms = (time.perf_counter() - start_time) * 1000

    available = [name for name, m in modules.items() if m["available"]]
    if len(available) == len(modules):
        status, message = "pass", "All modules loaded"
    elif available:
        status, message = "pass", "Some modules unavailable"
    else:
        status, message = "fail", "No API modules available"

    return CheckResult(status=status, latency_ms=latency_ms, message=message, details=modules)


# ============================================================================
# Main Entry Points
# ============================================================================

def get_public_health() -> Dict[str, Any]:
    """
    Minimal health status: status and timestamp only.
    """
    start_time = time.perf_counter()

    db_result = check_database_connectivity(timeout_seconds=3.0)
    status = HealthStatus.HEALTHY if db_result.status == "pass" else HealthStatus.UNHEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Public health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'public'
        }
    })

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_detailed_health() -> Dict[str, Any]:
    """
    Full health report for operations.

    Database and parcels table are critical; storage and module checks only
    degrade the status.
    """
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())[:8]

    checks = {}
    critical_failures = []
    non_critical_failures = []

    db_result = check_database_connectivity()
    checks["database"] = db_result.to_dict()
    if db_result.status == "fail":
        critical_failures.append("database")

    table_result = check_parcels_table()
    checks["parcels_table"] = table_result.to_dict()
    if table_result.status == "fail":
        critical_failures.append("parcels_table")

    storage_result = check_saved_filter_storage()
    checks["saved_filter_storage"] = storage_result.to_dict()
    if storage_result.status == "fail":
        non_critical_failures.append("saved_filter_storage")

    modules_result = check_api_modules()
    checks["api_modules"] = modules_result.to_dict()
    if modules_result.status == "fail":
        non_critical_failures.append("api_modules")

    if critical_failures:
        status = HealthStatus.UNHEALTHY
    elif non_critical_failures:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Detailed health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'detailed',
            'request_id': request_id,
            'critical_failures': critical_failures,
            'non_critical_failures': non_critical_failures,
            'database_latency_ms': db_result.latency_ms
        }
    })

    return {
        "status": status.value,
        "app": "parcel-api",
        "description": "Parcel Query & Geometry Resolution API",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "checks": checks,
        "total_duration_ms": round(total_duration, 2)
    }
