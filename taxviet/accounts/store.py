"""
Account Store

Durable directory of registered accounts, persisted as one JSON array
under `registered-users`. The whole directory is rewritten on every
mutation, so a failed write leaves the previous directory in place.
"""

from typing import Optional

from pydantic import ValidationError

from taxviet.errors import AccountNotFoundError, DuplicateAccountError, InvalidInputError
from taxviet.models.account import Account, normalize_identifier
from taxviet.services.storage import (
    KeyValueStorageInterface,
    StorageCorruptedError,
    read_json,
    write_json,
)
from taxviet.services.storage.keys import REGISTERED_USERS_KEY


class AccountStore:
    """Registered accounts, unique by normalized identifier."""
    
    def __init__(self, storage: KeyValueStorageInterface):
        self._storage = storage
    
    def _load(self) -> list[Account]:
        raw = read_json(self._storage, REGISTERED_USERS_KEY, [])
        if not isinstance(raw, list):
            raise StorageCorruptedError(f"'{REGISTERED_USERS_KEY}' must be a JSON array")
        try:
            return [Account.model_validate(item) for item in raw]
        except ValidationError as e:
            raise StorageCorruptedError(f"Invalid account in directory: {e}")
    
    def _save(self, accounts: list[Account]) -> None:
        write_json(
            self._storage,
            REGISTERED_USERS_KEY,
            [account.to_storage_dict() for account in accounts],
        )
    
    def register(self, identifier: str, full_name: str, secret: str) -> Account:
        """
        Register a new account.
        
        Raises:
            InvalidInputError: Blank identifier, name or secret
            DuplicateAccountError: Identifier already taken (any case)
        """
        normalized = normalize_identifier(identifier)
        if not normalized:
            raise InvalidInputError("identifier", "must not be blank")
        if not full_name or not full_name.strip():
            raise InvalidInputError("full_name", "must not be blank")
        if not secret:
            raise InvalidInputError("secret", "must not be blank")
        
        accounts = self._load()
        if any(account.identifier == normalized for account in accounts):
            raise DuplicateAccountError(normalized)
        
        try:
            account = Account.create(normalized, full_name, secret)
        except ValidationError as e:
            raise InvalidInputError("account", str(e))
        
        self._save(accounts + [account])
        return account
    
    def find(self, identifier: str) -> Optional[Account]:
        """Case-insensitive lookup."""
        normalized = normalize_identifier(identifier)
        for account in self._load():
            if account.identifier == normalized:
                return account
        return None
    
    def exists(self, identifier: str) -> bool:
        return self.find(identifier) is not None
    
    def verify(self, identifier: str, secret: str) -> bool:
        """True iff the account exists and the secret matches exactly."""
        account = self.find(identifier)
        return account is not None and account.matches(secret)
    
    def update_full_name(self, identifier: str, full_name: str) -> Account:
        """
        Rename an account.
        
        Raises:
            AccountNotFoundError: Unknown identifier
            InvalidInputError: Blank name
        """
        if not full_name or not full_name.strip():
            raise InvalidInputError("full_name", "must not be blank")
        
        normalized = normalize_identifier(identifier)
        accounts = self._load()
        for index, account in enumerate(accounts):
            if account.identifier == normalized:
                updated = account.model_copy(update={"full_name": full_name.strip()})
                accounts[index] = updated
                self._save(accounts)
                return updated
        raise AccountNotFoundError(normalized)
    
    def list_accounts(self) -> list[Account]:
        """All accounts in registration order."""
        return self._load()
