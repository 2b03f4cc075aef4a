"""
Storage Key Layout

Per-account data is addressed as (EntityKind, identifier). The only way
to turn that pair into a storage key is scoped_key(), which normalizes
the identifier, so two accounts can never share a key and no caller
can forget the normalization.
"""

from enum import Enum

from taxviet.models.account import normalize_identifier


REGISTERED_USERS_KEY = "registered-users"
LAST_SESSION_KEY = "last-session-user"

THEME_MODE_KEY = "theme-mode"
LANGUAGE_KEY = "app-language"
NOTIFICATIONS_KEY = "notifications-enabled"
FACEID_KEY = "faceid-enabled"


class EntityKind(str, Enum):
    """Per-account collections. The value is the key prefix."""
    PROFILE = "user-profile"
    RECORDS = "tax-records"


def scoped_key(kind: EntityKind, identifier: str) -> str:
    """
    Storage key for one account's collection.
    
    >>> scoped_key(EntityKind.RECORDS, " A@B.com ")
    'tax-records-a@b.com'
    """
    normalized = normalize_identifier(identifier)
    if not normalized:
        raise ValueError("Scoped keys need a non-empty identifier")
    return f"{kind.value}-{normalized}"
