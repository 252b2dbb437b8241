"""Services package."""

from finanzas.services.storage import (
    InMemoryStore,
    JSONFileStore,
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "InMemoryStore",
    "JSONFileStore",
    "KeyValueStore",
    "StorageConnectionError",
    "StorageError",
]
