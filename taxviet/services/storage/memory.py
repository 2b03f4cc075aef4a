"""In-memory storage backend, used by tests and by `backend=memory`."""

from typing import Optional

from taxviet.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Dict-backed store. Nothing survives the process."""
    
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
    
    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)
    
    def set(self, key: str, value: str) -> None:
        self._data[key] = value
    
    def remove(self, key: str) -> None:
        self._data.pop(key, None)
    
    def keys(self) -> list[str]:
        return list(self._data)
    
    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored, for assertions."""
        return dict(self._data)
