"""Services package."""

from taxviet.services.preferences import PreferencesStore
from taxviet.services.storage import (
    EntityKind,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageCorruptedError,
    StorageError,
    create_storage,
    scoped_key,
)

__all__ = [
    "PreferencesStore",
    # Storage services
    "EntityKind",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "StorageCorruptedError",
    "StorageError",
    "create_storage",
    "scoped_key",
]
