"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The default backend is a JSON file on the user's device; tests use
the in-memory backend.
"""

from typing import Optional

from taxviet.config import StorageSettings, get_settings
from taxviet.services.storage.codec import read_json, write_json
from taxviet.services.storage.interface import (
    KeyValueStorageInterface,
    StorageCorruptedError,
    StorageError,
)
from taxviet.services.storage.json_file import JsonFileStorage
from taxviet.services.storage.keys import EntityKind, scoped_key
from taxviet.services.storage.memory import InMemoryStorage


def create_storage(settings: Optional[StorageSettings] = None) -> KeyValueStorageInterface:
    """Build the backend selected by configuration."""
    settings = settings or get_settings().storage
    if settings.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(settings.path, write_attempts=settings.write_attempts)


__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "StorageCorruptedError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    "create_storage",
    # Key layout and codec
    "EntityKind",
    "read_json",
    "scoped_key",
    "write_json",
]
