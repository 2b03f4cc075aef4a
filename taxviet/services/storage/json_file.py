"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on local disk plays the role of
the device's key-value store:
1. No database setup required
2. Users can inspect or back up a single file
3. Everything stays on the device (no server-side storage)

TRADEOFFS:
- The whole file is rewritten on every mutation (fine for one user's data)
- Single writer per process; no cross-process locking

Writes go to a temporary file that is then renamed over the target,
so a crash mid-write leaves the previous contents intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from taxviet.services.storage.interface import (
    KeyValueStorageInterface,
    StorageCorruptedError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorageInterface):
    """
    File-backed store.
    
    The file is read once, on first access, and kept in memory.
    Every mutation rewrites the file before returning.
    """
    
    def __init__(self, path: Path, write_attempts: int = 3):
        self._path = Path(path)
        self._data: Optional[dict[str, str]] = None
        self._write_with_retry = retry(
            stop=stop_after_attempt(write_attempts),
            wait=wait_exponential(multiplier=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(self._write_file)
    
    @property
    def path(self) -> Path:
        return self._path
    
    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        
        if not self._path.exists():
            self._data = {}
            return self._data
        
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read storage file {self._path}: {e}")
        
        if not raw.strip():
            self._data = {}
            return self._data
        
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptedError(f"Storage file {self._path} is not valid JSON: {e}")
        
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise StorageCorruptedError(
                f"Storage file {self._path} must hold an object of strings"
            )
        
        self._data = data
        return self._data
    
    def _write_file(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    
    def _flush(self, data: dict[str, str]) -> None:
        try:
            self._write_with_retry(data)
        except OSError as e:
            logger.error("storage_write_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write storage file {self._path}: {e}")
    
    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)
    
    def set(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)
        self._data = data
    
    def remove(self, key: str) -> None:
        current = self._load()
        if key not in current:
            return
        data = dict(current)
        del data[key]
        self._flush(data)
        self._data = data
    
    def keys(self) -> list[str]:
        return list(self._load())
