"""Per-account storage and record history package."""

from taxviet.ledger.record_ledger import RecordLedger, format_record_label
from taxviet.ledger.scoped_store import UserScopedStore

__all__ = ["RecordLedger", "UserScopedStore", "format_record_label"]
