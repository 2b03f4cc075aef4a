"""
User-Scoped Store

Each account owns exactly two collections: its Profile and its ordered
list of TaxRecords. Both are addressed through scoped_key(), so every
read and write is confined to one normalized identifier.

The store also keeps a view of the ACTIVE account's data. It is reloaded
from storage whenever the SessionContext changes, and reset to the
default template on logout, so nothing from the previous scope survives
a switch.
"""

from typing import Optional

from pydantic import ValidationError

from taxviet.accounts.session import SessionContext
from taxviet.accounts.store import AccountStore
from taxviet.models.account import normalize_identifier
from taxviet.models.profile import FALLBACK_DISPLAY_NAME, Profile, default_profile
from taxviet.models.record import TaxRecord
from taxviet.services.storage import (
    EntityKind,
    KeyValueStorageInterface,
    StorageCorruptedError,
    read_json,
    scoped_key,
    write_json,
)


class UserScopedStore:
    """Per-account Profile and TaxRecord persistence."""
    
    def __init__(
        self,
        storage: KeyValueStorageInterface,
        accounts: AccountStore,
        context: SessionContext,
    ):
        self._storage = storage
        self._accounts = accounts
        self._context = context
        self._profile: Profile = default_profile()
        self._records: list[TaxRecord] = []
        
        context.subscribe(self._on_scope_changed)
        self._on_scope_changed(context.current)
    
    # -------------------------------------------------------------------------
    # Active scope view
    # -------------------------------------------------------------------------
    
    @property
    def active_identifier(self) -> Optional[str]:
        return self._context.current
    
    @property
    def profile(self) -> Profile:
        return self._profile
    
    @property
    def records(self) -> list[TaxRecord]:
        return list(self._records)
    
    def _on_scope_changed(self, identifier: Optional[str]) -> None:
        if identifier is None:
            self._profile = default_profile()
            self._records = []
            return
        # Load both before swapping so a failed read leaves the view intact
        profile = self.get_profile(identifier)
        records = self.get_records(identifier)
        self._profile = profile
        self._records = records
    
    def _is_active(self, identifier: str) -> bool:
        return self._context.current == normalize_identifier(identifier)
    
    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------
    
    def get_profile(self, identifier: str) -> Profile:
        """
        The stored profile, or a default one named after the account.
        
        A synthesized default is NOT written to storage.
        """
        raw = read_json(self._storage, scoped_key(EntityKind.PROFILE, identifier))
        if raw is not None:
            try:
                return Profile.model_validate(raw)
            except ValidationError as e:
                raise StorageCorruptedError(f"Invalid profile for {identifier}: {e}")
        
        account = self._accounts.find(identifier)
        return default_profile(account.full_name if account else FALLBACK_DISPLAY_NAME)
    
    def set_profile(self, identifier: str, profile: Profile) -> None:
        write_json(
            self._storage,
            scoped_key(EntityKind.PROFILE, identifier),
            profile.to_storage_dict(),
        )
        if self._is_active(identifier):
            self._profile = profile
    
    def has_stored_profile(self, identifier: str) -> bool:
        return self._storage.contains(scoped_key(EntityKind.PROFILE, identifier))
    
    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------
    
    def get_records(self, identifier: str) -> list[TaxRecord]:
        """Records newest-first; empty if none were ever saved."""
        raw = read_json(self._storage, scoped_key(EntityKind.RECORDS, identifier), [])
        if not isinstance(raw, list):
            raise StorageCorruptedError(f"Records for {identifier} must be a JSON array")
        try:
            return [TaxRecord.model_validate(item) for item in raw]
        except ValidationError as e:
            raise StorageCorruptedError(f"Invalid record for {identifier}: {e}")
    
    def set_records(self, identifier: str, records: list[TaxRecord]) -> None:
        write_json(
            self._storage,
            scoped_key(EntityKind.RECORDS, identifier),
            [record.to_storage_dict() for record in records],
        )
        if self._is_active(identifier):
            self._records = list(records)
