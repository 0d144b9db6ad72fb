# ============================================================================
# CLAUDE CONTEXT - SAVED FILTER STORAGE
# ============================================================================
# STATUS: Standalone Storage - Saved filters
# PURPOSE: Persist users' filter selections as JSON on local disk
# EXPORTS: SavedFilterStore, LatestFilterStore, safe_user_id
# DEPENDENCIES: json, os, pathlib, tempfile, util_logger
# SCOPE: Read-modify-write JSON blobs, atomic replace on write
# PATTERNS: Repository Pattern (file backed)
# ============================================================================

"""
Saved Filter Storage

Two layouts:

- SavedFilterStore: one JSON object mapping userId -> filters
- LatestFilterStore: one <safeUserId>.json file per user holding the most
  recently saved filter

Writes create the parent directory, go to a temp file in the same directory
and are moved into place with os.replace, so readers never see a partial
file. Concurrent writers are last-writer-wins.
"""

import json
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from util_logger import LoggerFactory, ComponentType, log_exceptions

from .models import SavedFilter

logger = LoggerFactory.create_logger(ComponentType.STORAGE, "SavedFilterStorage")

_UNSAFE_USER_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
MAX_USER_ID_LENGTH = 80


def safe_user_id(raw: str) -> str:
    """Strip everything but letters, digits, '_' and '-', then truncate."""
    return _UNSAFE_USER_ID_CHARS.sub("", raw)[:MAX_USER_ID_LENGTH]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class SavedFilterStore:
    """
    All users' saved filters in a single JSON file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_all(self) -> Dict[str, Dict[str, Any]]:
        """Whole store; a missing or empty file reads as {}."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        store = json.loads(text or "{}")
        if not isinstance(store, dict):
            raise ValueError(f"Saved filters file '{self.path}' does not hold a JSON object")
        return store

    def get(self, user_id: str) -> Dict[str, Any]:
        return self.read_all().get(user_id) or {}

    @log_exceptions(logger=logger)
    def put(self, user_id: str, filters: Dict[str, Any]) -> None:
        store = self.read_all()
        store[user_id] = filters
        _atomic_write_json(self.path, store)
        logger.info(f"Saved filters for user '{user_id}'", extra={'custom_dimensions': {'user_id': user_id}})


class LatestFilterStore:
    """
    Each user's latest filter in <directory>/<safeUserId>.json.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, user_id: str) -> Path:
        """
        Raises:
            ValueError: user id has no characters left after sanitizing
        """
        safe = safe_user_id(user_id)
        if not safe:
            raise ValueError("userId must contain letters, digits, '_' or '-'")
        return self.directory / f"{safe}.json"

    @log_exceptions(logger=logger)
    def save(self, user_id: str, filters: SavedFilter) -> Dict[str, Any]:
        """Stamp updatedAt, write, and return the stored payload."""
        payload = filters.model_copy(update={"updatedAt": _utc_timestamp()}).model_dump(exclude_none=True)
        _atomic_write_json(self.path_for(user_id), payload)
        logger.info(f"Saved latest filter for user '{user_id}'", extra={'custom_dimensions': {'user_id': user_id}})
        return payload

    def latest(self, user_id: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(user_id)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
