"""
Record Ledger

Mutations over one account's TaxRecord history. Every operation is a
read-modify-replace of the whole collection through UserScopedStore,
so each one persists before it returns.

Ordering is newest-first: a saved estimate is always prepended.
Deleting or toggling an id that is not in the collection does nothing.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from taxviet.errors import RecordNotFoundError
from taxviet.ledger.scoped_store import UserScopedStore
from taxviet.messages import translate
from taxviet.models.calculation import CalculationResult, TaxPeriod
from taxviet.models.preferences import Language
from taxviet.models.record import LedgerSummary, RecordStatus, TaxRecord


def format_record_label(
    period: TaxPeriod,
    timestamp: datetime,
    language: Union[Language, str] = Language.VIETNAMESE,
) -> str:
    """
    Human label for a saved estimate.
    
    >>> format_record_label(TaxPeriod.YEAR, datetime(2026, 10, 19))
    'Dự toán Năm 2026 (19/10/2026)'
    """
    date_str = f"{timestamp.day}/{timestamp.month}/{timestamp.year}"
    if period == TaxPeriod.QUARTER:
        quarter = (timestamp.month - 1) // 3 + 1
        return translate(
            "label_quarter", language,
            quarter=quarter, year=timestamp.year, date=date_str,
        )
    return translate("label_year", language, year=timestamp.year, date=date_str)


def _unique_id(timestamp: datetime, records: list[TaxRecord]) -> str:
    """Millisecond timestamp, bumped past any id already in use."""
    taken = {record.id for record in records}
    candidate = int(timestamp.timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


class RecordLedger:
    """Append, delete and toggle records in an account's history."""
    
    def __init__(self, store: UserScopedStore, currency_decimal_places: int = 0):
        self._store = store
        self._places = currency_decimal_places
    
    def list_records(self, identifier: str) -> list[TaxRecord]:
        return self._store.get_records(identifier)
    
    def get(self, identifier: str, record_id: str) -> TaxRecord:
        """
        Strict lookup.
        
        Raises:
            RecordNotFoundError: No record with this id
        """
        for record in self._store.get_records(identifier):
            if record.id == record_id:
                return record
        raise RecordNotFoundError(record_id)
    
    def append_from_result(
        self,
        identifier: str,
        result: CalculationResult,
        period: Optional[TaxPeriod] = None,
        timestamp: Optional[datetime] = None,
        language: Union[Language, str] = Language.VIETNAMESE,
    ) -> TaxRecord:
        """
        Save a computed result as a new pending record.
        
        Args:
            identifier: Account the record belongs to
            result: Engine output; its total is rounded for storage
            period: Label period, defaults to the one in the result's input
            timestamp: Save time, defaults to now
            language: Language of the label
        """
        period = period or result.period
        timestamp = timestamp or datetime.now()
        records = self._store.get_records(identifier)
        
        record = TaxRecord(
            id=_unique_id(timestamp, records),
            label=format_record_label(period, timestamp, language),
            revenue=result.input.revenue,
            tax_amount=result.rounded_total(self._places),
            status=RecordStatus.PENDING,
        )
        self._store.set_records(identifier, [record] + records)
        return record
    
    def remove(self, identifier: str, record_id: str) -> bool:
        """Delete a record. Returns False (and writes nothing) if absent."""
        records = self._store.get_records(identifier)
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._store.set_records(identifier, remaining)
        return True
    
    def toggle_status(self, identifier: str, record_id: str) -> Optional[TaxRecord]:
        """Flip paid/pending. Returns the updated record, or None if absent."""
        records = self._store.get_records(identifier)
        for index, record in enumerate(records):
            if record.id == record_id:
                updated = record.with_toggled_status()
                records[index] = updated
                self._store.set_records(identifier, records)
                return updated
        return None
    
    def summarize(self, identifier: str) -> LedgerSummary:
        """Totals for the dashboard."""
        records = self._store.get_records(identifier)
        paid = [r.tax_amount for r in records if r.status == RecordStatus.PAID]
        pending = [r.tax_amount for r in records if r.status == RecordStatus.PENDING]
        return LedgerSummary(
            record_count=len(records),
            total_revenue=sum((r.revenue for r in records), Decimal("0")),
            total_tax=sum(paid + pending, Decimal("0")),
            tax_paid=sum(paid, Decimal("0")),
            tax_pending=sum(pending, Decimal("0")),
        )
