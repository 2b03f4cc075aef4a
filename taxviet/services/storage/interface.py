"""
Abstract Storage Interface

DESIGN DECISION: Everything TaxViet persists goes through a flat,
string-keyed, string-valued store. This allows us to:
1. Use in-memory storage for testing
2. Keep a simple JSON file on the user's device in production
3. Keep the account/profile/record logic decoupled from the backend

The interface is intentionally tiny - values are opaque strings
(JSON documents), and the stores above decide what goes in them.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for the keyed string store.
    
    Any backend must implement these methods. Every write must be
    visible to the next read of the same key.
    """
    
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.
        
        Returns:
            The stored string, or None if the key is absent
            
        Raises:
            StorageError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under key.
        
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing an absent key is not an error."""
        pass
    
    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored, in no particular order."""
        pass
    
    def contains(self, key: str) -> bool:
        return self.get(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageCorruptedError(StorageError):
    """Stored data exists but cannot be decoded."""
    pass
