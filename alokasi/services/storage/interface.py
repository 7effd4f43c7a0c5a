"""
Abstract Storage Interface

DESIGN DECISION: The session persists through a plain key-value
interface. This allows us to:
1. Use a local JSON file on a desktop install
2. Use in-memory storage for testing
3. Swap in another local store without touching the session

The interface is intentionally tiny: the whole budget is one document
under one key, written after every change and read once at startup.
Calls are synchronous because the session commands that trigger them
are synchronous.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateStorageInterface(ABC):
    """
    Abstract interface for the key-value slot the session lives in.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Slot name
            value: Serialized document

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written."""
    pass
