"""
Saved filters configuration.

Environment Variables (all optional):
    - SAVED_FILTERS_PATH: JSON file keyed by user id (default: data/saved_filters.json)
    - LATEST_FILTERS_DIR: Directory of per-user latest-filter files (default: data/filters)

Relative paths resolve against the working directory of the function host.
"""

import os
from typing import Optional
from pydantic import BaseModel, Field


class SavedFiltersConfig(BaseModel):
    saved_filters_path: str = Field(
        default_factory=lambda: os.getenv("SAVED_FILTERS_PATH", os.path.join("data", "saved_filters.json")),
        description="JSON file holding every user's saved filters"
    )
    latest_filters_dir: str = Field(
        default_factory=lambda: os.getenv("LATEST_FILTERS_DIR", os.path.join("data", "filters")),
        description="Directory holding one <userId>.json per user"
    )


_config_cache: Optional[SavedFiltersConfig] = None


def get_saved_filters_config() -> SavedFiltersConfig:
    global _config_cache

    if _config_cache is None:
        _config_cache = SavedFiltersConfig()

    return _config_cache
