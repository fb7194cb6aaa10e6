# storefront/storage/local_storage.py

"""Durable key/value store backed by a single JSON file."""

import json
import logging
from pathlib import Path
from typing import Any

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.storage")


class LocalStorage:
    """A tiny ``localStorage`` stand-in persisted to disk.

    Every write rewrites the whole file.  An unreadable or corrupt file
    is treated as empty rather than as an error.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.LOCAL_STORAGE_PATH

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Ignoring unreadable storage file %s: %s", self.path, exc,
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not an object", self.path)
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> Any:
        """Return the stored value for *key*, or ``None``."""
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under *key*."""
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug("Stored key '%s' in %s", key, self.path)

    def remove_item(self, key: str) -> None:
        """Delete *key* if present."""
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
            logger.debug("Removed key '%s' from %s", key, self.path)
