"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
A local JSON file is the default backend; the in-memory one is used in tests.
"""

from alokasi.services.storage.interface import (
    StateStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from alokasi.services.storage.json_file import JsonFileStateStorage
from alokasi.services.storage.memory import InMemoryStateStorage

__all__ = [
    # Interface
    "StateStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStateStorage",
    "JsonFileStateStorage",
]
