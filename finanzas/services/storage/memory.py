"""
In-Memory Storage Implementation

Used for tests and throwaway sessions. Values are kept as JSON text, so
reads return fresh copies and non-serializable values fail on save just
as they would on disk.
"""

import json
from typing import Any, Optional

import structlog

from finanzas.services.storage.interface import KeyValueStore


logger = structlog.get_logger(__name__)


class InMemoryStore(KeyValueStore):
    """Process-local key-value store."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        payload = self._data.get(key)
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError as e:
            logger.warning("store_read_failed", key=key, error=str(e))
            return None

    def save(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
            return True
        except (TypeError, ValueError) as e:
            logger.error("store_serialize_failed", key=key, error=str(e))
            return False

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
