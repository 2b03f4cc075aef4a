"""JSON encoding of stored values."""

import json
from typing import Any

from taxviet.services.storage.interface import (
    KeyValueStorageInterface,
    StorageCorruptedError,
)


def read_json(storage: KeyValueStorageInterface, key: str, default: Any = None) -> Any:
    """Decode the JSON document under key, or return default if absent."""
    raw = storage.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageCorruptedError(f"Value under '{key}' is not valid JSON: {e}")


def write_json(storage: KeyValueStorageInterface, key: str, value: Any) -> None:
    storage.set(key, json.dumps(value, ensure_ascii=False))
