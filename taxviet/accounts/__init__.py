"""Accounts and session package."""

from taxviet.accounts.session import SessionContext, SessionStore
from taxviet.accounts.store import AccountStore

__all__ = ["AccountStore", "SessionContext", "SessionStore"]
