"""
Preferences Store

Device-wide flags (theme, language, notifications, Face ID). They are
not scoped to an account: they survive logout and apply to whoever
logs in next.

Theme and language are stored as bare strings, the two switches as
JSON booleans.
"""

from enum import Enum
from typing import Any, Optional, TypeVar

from pydantic import ValidationError

from taxviet.errors import InvalidInputError
from taxviet.models.preferences import Language, Preferences, ThemeMode
from taxviet.services.storage import KeyValueStorageInterface, read_json, write_json
from taxviet.services.storage.keys import (
    FACEID_KEY,
    LANGUAGE_KEY,
    NOTIFICATIONS_KEY,
    THEME_MODE_KEY,
)


E = TypeVar("E", bound=Enum)


def _stored_enum(enum_type: type[E], raw: Optional[str], default: E) -> E:
    if raw is None:
        return default
    try:
        return enum_type(raw)
    except ValueError:
        return default


class PreferencesStore:
    """Reads and writes the process-wide preference keys."""
    
    def __init__(self, storage: KeyValueStorageInterface, default_language: str = "vi"):
        self._storage = storage
        self._default_language = Language(default_language)
    
    def load(self) -> Preferences:
        """Current preferences; unknown or missing values fall back to defaults."""
        notifications = read_json(self._storage, NOTIFICATIONS_KEY, False)
        faceid = read_json(self._storage, FACEID_KEY, False)
        
        return Preferences(
            theme_mode=_stored_enum(ThemeMode, self._storage.get(THEME_MODE_KEY), ThemeMode.SYSTEM),
            language=_stored_enum(Language, self._storage.get(LANGUAGE_KEY), self._default_language),
            notifications_enabled=notifications is True,
            faceid_enabled=faceid is True,
        )
    
    def update(self, **changes: Any) -> Preferences:
        """
        Apply and persist changes.
        
        Args:
            changes: Any of theme_mode, language, notifications_enabled,
                     faceid_enabled
        
        Raises:
            InvalidInputError: Unknown field or invalid value
        """
        unknown = set(changes) - set(Preferences.model_fields)
        if unknown:
            raise InvalidInputError(", ".join(sorted(unknown)), "unknown preference")
        
        merged = self.load().model_dump()
        merged.update(changes)
        try:
            updated = Preferences.model_validate(merged)
        except ValidationError as e:
            raise InvalidInputError("preferences", str(e))
        
        self._storage.set(THEME_MODE_KEY, updated.theme_mode.value)
        self._storage.set(LANGUAGE_KEY, updated.language.value)
        write_json(self._storage, NOTIFICATIONS_KEY, updated.notifications_enabled)
        write_json(self._storage, FACEID_KEY, updated.faceid_enabled)
        return updated
