# ============================================================================
# CLAUDE CONTEXT - SAVED FILTER TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - Saved filter endpoints
# PURPOSE: Azure Functions HTTP triggers for saving and reloading user filters
# EXPORTS: get_saved_filter_triggers (returns list of trigger configurations)
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# PYDANTIC_MODELS: SavedFilter
# DEPENDENCIES: azure.functions, pydantic, json, util_logger
# SOURCE: HTTP requests from the filter panel
# PATTERNS: Trigger Pattern, Factory Pattern (get_saved_filter_triggers)
# ENTRY_POINTS: Function App route registration via get_saved_filter_triggers()
# ============================================================================

"""
Saved Filter HTTP Triggers

- GET  /api/saved-filters?userId=...  - Filters saved under userId ({} if none)
- POST /api/saved-filters             - Body {"userId": ..., "filters": {...}}
- POST /api/filters                   - Save the caller's latest filter (201)
- GET  /api/filters/latest            - Caller's latest filter, or null

For /filters and /filters/latest the caller is identified by the X-User-Id
header, falling back to the userId query parameter.
"""

import azure.functions as func
import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from util_logger import LoggerFactory, ComponentType

from .config import SavedFiltersConfig, get_saved_filters_config
from .models import FILTER_FIELDS, SavedFilter
from .storage import LatestFilterStore, SavedFilterStore

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "SavedFilterTriggers")

USER_ID_HEADER = "X-User-Id"


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_saved_filter_triggers(config: Optional[SavedFiltersConfig] = None) -> List[Dict[str, Any]]:
    """
    Get list of saved filter trigger configurations for function_app.py.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    config = config or get_saved_filters_config()
    saved = SavedFilterStore(config.saved_filters_path)
    latest = LatestFilterStore(config.latest_filters_dir)

    return [
        {
            'route': 'saved-filters',
            'methods': ['GET', 'POST'],
            'handler': SavedFiltersTrigger(saved).handle
        },
        {
            'route': 'filters',
            'methods': ['POST'],
            'handler': SaveLatestFilterTrigger(latest).handle
        },
        {
            'route': 'filters/latest',
            'methods': ['GET'],
            'handler': LatestFilterTrigger(latest).handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseFilterTrigger:
    """
    Response helpers shared by the saved filter endpoints.
    """

    def _json_response(self, data: Any, status_code: int = 200) -> func.HttpResponse:
        return func.HttpResponse(
            body=json.dumps(data),
            status_code=status_code,
            mimetype="application/json"
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

    def _read_json_object(self, req: func.HttpRequest) -> Dict[str, Any]:
        """
        Parse the request body as a JSON object. An empty body reads as {}.

        Raises:
            ValueError: Body is not valid JSON or not an object
        """
        if not req.get_body():
            return {}

        body = req.get_json()
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")
        return body

    def _caller_user_id(self, req: func.HttpRequest) -> str:
        user_id = req.headers.get(USER_ID_HEADER) or req.params.get('userId') or ''
        return user_id.strip()


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class SavedFiltersTrigger(BaseFilterTrigger):
    """
    Endpoint: GET|POST /api/saved-filters
    """

    def __init__(self, store: SavedFilterStore):
        self.store = store

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            if req.method == 'POST':
                return self._save(req)
            return self._load(req)

        except Exception as e:
            logger.error(f"Error handling saved filters: {e}", exc_info=True)
            return self._error_response(
                message=f"Failed to process saved filters: {e}",
                status_code=500,
                error_type="InternalServerError"
            )

    def _load(self, req: func.HttpRequest) -> func.HttpResponse:
        user_id = (req.params.get('userId') or '').strip()
        if not user_id:
            return self._error_response("userId is required")

        return self._json_response(self.store.get(user_id))

    def _save(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            body = self._read_json_object(req)
        except ValueError as e:
            return self._error_response(f"Invalid JSON body: {e}")

        user_id = body.get('userId')
        if not isinstance(user_id, str) or not user_id.strip():
            return self._error_response("userId is required")

        filters = body.get('filters') or {}
        if not isinstance(filters, dict):
            return self._error_response("filters must be a JSON object")

        try:
            validated = SavedFilter.model_validate(filters)
        except ValidationError as e:
            return self._error_response(f"Invalid filters: {e.errors(include_url=False)}")

        self.store.put(user_id.strip(), validated.model_dump(exclude_none=True))
        return self._json_response({"ok": True})


class SaveLatestFilterTrigger(BaseFilterTrigger):
    """
    Endpoint: POST /api/filters

    Only minPrice, maxPrice, minSqft and maxSqft are kept from the body.
    """

    def __init__(self, store: LatestFilterStore):
        self.store = store

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        user_id = self._caller_user_id(req)
        if not user_id:
            return self._error_response(f"Missing userId (query or {USER_ID_HEADER} header)")

        try:
            body = self._read_json_object(req)
            filters = SavedFilter.model_validate(
                {k: body[k] for k in FILTER_FIELDS if k in body}
            )
        except ValidationError as e:
            return self._error_response(f"Invalid filters: {e.errors(include_url=False)}")
        except ValueError as e:
            return self._error_response(f"Invalid JSON body: {e}")

        try:
            self.store.path_for(user_id)
        except ValueError as e:
            return self._error_response(str(e))

        try:
            payload = self.store.save(user_id, filters)
            return self._json_response({"userId": user_id, **payload}, status_code=201)

        except Exception as e:
            logger.error(f"Error saving latest filter: {e}", exc_info=True)
            return self._error_response(
                message=f"Failed to save filters: {e}",
                status_code=500,
                error_type="InternalServerError"
            )


class LatestFilterTrigger(BaseFilterTrigger):
    """
    Endpoint: GET /api/filters/latest
    """

    def __init__(self, store: LatestFilterStore):
        self.store = store

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        user_id = self._caller_user_id(req)
        if not user_id:
            return self._error_response(f"Missing userId (query or {USER_ID_HEADER} header)")

        try:
            self.store.path_for(user_id)
        except ValueError as e:
            return self._error_response(str(e))

        try:
            return self._json_response(self.store.latest(user_id))

        except Exception as e:
            logger.error(f"Error loading latest filter: {e}", exc_info=True)
            return self._error_response(
                message=f"Failed to load filters: {e}",
                status_code=500,
                error_type="InternalServerError"
            )
