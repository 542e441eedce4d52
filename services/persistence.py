"""
Robust JSON persistence for the pet, activity and learning records.

- One file per record (pet.json, activity.json, learning.json).
- The directory is the SOULPET_DATA_DIR environment variable when set,
  else the running Kivy app's user_data_dir, else a local ./.userdata path.
- Writes are atomic: data is written to a temporary file in the same directory
  and then os.replace() swaps it into place.
"""

from __future__ import annotations

import json
import logging
import os
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

RECORD_NAMES = ("pet", "activity", "learning")


def data_dir() -> str:
    """Resolve the directory that holds every record."""
    env = os.environ.get("SOULPET_DATA_DIR")
    if env:
        return env
    # Reached only when SOULPET_DATA_DIR is unset.
    from kivy.app import App

    app = App.get_running_app()
    if app is not None and getattr(app, "user_data_dir", None):
        return app.user_data_dir
    return os.path.join(".", ".userdata")


class JsonRepository:
    """JSON-backed store for one record with atomic writes."""

    def __init__(self, name: str, base_dir: Optional[str] = None) -> None:
        """Initialize and cache the computed save path."""
        self.name = name
        self._base_dir = base_dir
        self._cached_path: Optional[str] = None

    def _compute_path(self) -> str:
        base = self._base_dir or data_dir()
        return os.path.join(base, f"{self.name}.json")

    def path(self) -> str:
        """
        Return the record's file path and ensure its parent directory exists.

        Returns:
            str: Absolute or relative path to <name>.json.
        """
        path = self._cached_path or self._compute_path()
        os.makedirs(os.path.dirname(path), exist_ok=True)
        self._cached_path = path
        return path

    def save(self, payload: Dict[str, Any]) -> bool:
        """
        Write the record to <name>.json without ever leaving a partial file.

        The JSON goes to a hidden sibling .tmp file, is fsynced, and is
        swapped in with os.replace(); the .tmp file is removed on failure.

        Returns:
            bool: True on success, False if any error occurs.
        """
        temp_name: Optional[str] = None
        try:
            path = self.path()
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=os.path.dirname(path),
                prefix=f".{self.name}-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                temp_name = tmp.name
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())

            os.replace(temp_name, path)
            return True
        except (OSError, TypeError, ValueError):
            logger.warning("could not save %s record", self.name, exc_info=True)
            if temp_name and os.path.exists(temp_name):
                try:
                    os.remove(temp_name)
                except OSError:
                    pass
            return False

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the record from disk.

        Returns:
            The decoded dict, or None if the file is missing or unreadable.
        """
        try:
            path = self.path()
            if not os.path.exists(path):
                return None
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("could not load %s record", self.name, exc_info=True)
            return None
        if not isinstance(data, dict):
            logger.warning("%s record is not an object; ignoring", self.name)
            return None
        return data

    def clear(self) -> None:
        """Delete the record file if present."""
        path = self.path()
        if os.path.exists(path):
            os.remove(path)
