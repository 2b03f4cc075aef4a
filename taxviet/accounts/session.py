"""
Session Tracking

The active account is held in a SessionContext that is passed to every
component that needs it, instead of living in a module global. Components
that cache per-account state subscribe to the context and reload when
the active identifier changes.

SessionStore owns the transitions (login, logout, restore) and persists
the pointer under `last-session-user` so the last session can be resumed
after a restart.
"""

from typing import Callable, Optional

import structlog

from taxviet.accounts.store import AccountStore
from taxviet.errors import (
    AccountNotFoundError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from taxviet.models.account import Account, normalize_identifier
from taxviet.services.storage import KeyValueStorageInterface, StorageError
from taxviet.services.storage.keys import LAST_SESSION_KEY


logger = structlog.get_logger(__name__)

ScopeListener = Callable[[Optional[str]], None]


class SessionContext:
    """Holds the normalized identifier of the active account, if any."""
    
    def __init__(self, identifier: Optional[str] = None):
        self._identifier = normalize_identifier(identifier) if identifier else None
        self._listeners: list[ScopeListener] = []
    
    @property
    def current(self) -> Optional[str]:
        return self._identifier
    
    @property
    def is_active(self) -> bool:
        return self._identifier is not None
    
    def require(self) -> str:
        """The active identifier, or NotAuthenticatedError."""
        if self._identifier is None:
            raise NotAuthenticatedError()
        return self._identifier
    
    def subscribe(self, listener: ScopeListener) -> None:
        """Call listener(new_identifier) after every change."""
        self._listeners.append(listener)
    
    def set(self, identifier: Optional[str]) -> None:
        """
        Switch the active identifier and notify listeners.
        
        If a listener fails, the previous identifier is reinstated and
        listeners are notified again before the error propagates.
        """
        previous = self._identifier
        self._identifier = normalize_identifier(identifier) if identifier else None
        try:
            self._notify()
        except Exception:
            self._identifier = previous
            self._notify()
            raise
    
    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self._identifier)


class SessionStore:
    """Login, logout and startup restore for the single active session."""
    
    def __init__(
        self,
        accounts: AccountStore,
        storage: KeyValueStorageInterface,
        context: Optional[SessionContext] = None,
    ):
        self._accounts = accounts
        self._storage = storage
        self._context = context or SessionContext()
    
    @property
    def context(self) -> SessionContext:
        return self._context
    
    def current(self) -> Optional[str]:
        return self._context.current
    
    def login(self, identifier: str, secret: Optional[str] = None) -> Account:
        """
        Make an account the active session.
        
        A missing or empty secret skips verification (device unlock
        flows such as Face ID log in without one).
        
        Raises:
            AccountNotFoundError: No account with this identifier
            InvalidCredentialsError: Secret supplied and wrong
        """
        normalized = normalize_identifier(identifier)
        account = self._accounts.find(normalized)
        if account is None:
            raise AccountNotFoundError(normalized)
        if secret and not account.matches(secret):
            raise InvalidCredentialsError(normalized)
        
        self._activate(account.identifier)
        return account
    
    def begin(self, identifier: str) -> Account:
        """
        Start a session for an account without checking a secret.
        
        Used right after registration.
        """
        account = self._accounts.find(identifier)
        if account is None:
            raise AccountNotFoundError(normalize_identifier(identifier))
        self._activate(account.identifier)
        return account
    
    def logout(self) -> Optional[str]:
        """Clear the session. Returns the identifier that was active."""
        previous = self._context.current
        self._storage.remove(LAST_SESSION_KEY)
        self._context.set(None)
        return previous
    
    def restore(self) -> Optional[str]:
        """
        Resume the last session at startup.
        
        The stored pointer is only a hint: credentials are not checked
        again. A pointer to an account that no longer exists, or whose
        data cannot be read, is dropped.
        """
        hint = self._storage.get(LAST_SESSION_KEY)
        if not hint:
            return None
        
        account = self._accounts.find(hint)
        if account is None:
            logger.warning("stale_session_pointer_dropped", identifier=hint)
            self._storage.remove(LAST_SESSION_KEY)
            return None
        
        try:
            self._context.set(account.identifier)
        except StorageError:
            logger.warning("unreadable_session_dropped", identifier=account.identifier)
            self._storage.remove(LAST_SESSION_KEY)
            raise
        return account.identifier
    
    def _activate(self, identifier: str) -> None:
        # The pointer is written only once the new scope has loaded
        previous = self._context.current
        self._context.set(identifier)
        try:
            self._storage.set(LAST_SESSION_KEY, identifier)
        except StorageError:
            self._context.set(previous)
            raise
