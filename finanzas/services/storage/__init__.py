"""
Storage Services Package

Provides the abstract key-value store interface and its implementations:
JSON files on disk (default), in-memory (tests), and Google Sheets.
"""

from finanzas.services.storage.interface import (
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)
from finanzas.services.storage.json_file import JSONFileStore
from finanzas.services.storage.memory import InMemoryStore
from finanzas.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsStore,
)

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JSONFileStore",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsStore",
]
