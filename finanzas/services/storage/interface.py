"""
Abstract Storage Interface

DESIGN DECISION: The ledger core only needs a key-value store holding
JSON-serializable values. Defining it as an interface allows us to:
1. Keep data in local JSON files for a single-machine install
2. Use in-memory storage for testing
3. Swap in Google Sheets (or a real database) without touching the core

The contract is deliberately fail-soft. A store never raises to its
caller: a missing or unreadable key is reported as None, and a failed
write is logged and reported as False.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the persistent key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The decoded JSON value, or None if the key is missing or its
            content cannot be decoded. Decoding failures are logged by
            the store, never raised.
        """
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> bool:
        """
        Write a JSON-serializable value under a key, replacing any previous one.

        Args:
            key: The storage key
            value: Any JSON-serializable value

        Returns:
            True if written. Failures are logged and reported as False;
            callers must tolerate a write that did not persist.
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete a key. Removing a missing key is not an error.

        Args:
            key: The storage key
        """
        pass


class StorageError(Exception):
    """Base exception for storage backends."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
