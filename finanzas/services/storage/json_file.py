"""
JSON File Storage Implementation

One file per key under a data directory, each holding the JSON value.
This is the default backend: it behaves like a browser's local storage
but survives process restarts on a single machine.

TRADEOFFS:
- No locking: two processes writing the same key race, last writer wins
- Whole values are rewritten on every save (fine for a household roster)
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from finanzas.services.storage.interface import KeyValueStore


logger = structlog.get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JSONFileStore(KeyValueStore):
    """Key-value store backed by one JSON file per key."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File that holds a key. Characters outside [A-Za-z0-9_.-] become '_'."""
        return self._data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            content = path.read_text(encoding="utf-8")
            if not content.strip():
                return None
            return json.loads(content)
        except (OSError, ValueError) as e:
            logger.warning("store_read_failed", key=key, path=str(path), error=str(e))
            return None

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            logger.error("store_serialize_failed", key=key, error=str(e))
            return False

        path = self.path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, path)
            return True
        except OSError as e:
            logger.error("store_write_failed", key=key, path=str(path), error=str(e))
            return False

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("store_remove_failed", key=key, path=str(path), error=str(e))
