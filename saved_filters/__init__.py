# ============================================================================
# CLAUDE CONTEXT - SAVED FILTERS MODULE
# ============================================================================
# STATUS: Standalone Module - Saved user filters
# PURPOSE: Persist and reload parcel filter selections per user
# EXPORTS: SavedFilter, SavedFilterStore, LatestFilterStore, get_saved_filter_triggers
# DEPENDENCIES: pydantic, azure-functions
# SOURCE: Local JSON files (SAVED_FILTERS_PATH, LATEST_FILTERS_DIR)
# PATTERNS: Repository Pattern (file backed), Trigger Pattern
# ENTRY_POINTS: from saved_filters import get_saved_filter_triggers
# ============================================================================

"""
Saved Filters

Architecture:
    saved_filters/
    ├── config.py    # File locations from environment
    ├── models.py    # SavedFilter payload
    ├── storage.py   # Keyed JSON store and per-user latest files
    └── triggers.py  # Azure Functions HTTP handlers
"""

from .config import SavedFiltersConfig, get_saved_filters_config
from .models import SavedFilter
from .storage import LatestFilterStore, SavedFilterStore
from .triggers import get_saved_filter_triggers

__all__ = [
    "LatestFilterStore",
    "SavedFilter",
    "SavedFilterStore",
    "SavedFiltersConfig",
    "get_saved_filter_triggers",
    "get_saved_filters_config"
]
