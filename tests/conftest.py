"""
Shared fixtures.

Every test gets fresh in-memory storage. Nothing touches the user's
real storage file except the JSON backend tests, which use tmp_path.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from taxviet.accounts import AccountStore, SessionContext, SessionStore
from taxviet.config import get_settings
from taxviet.engine import TaxEngine
from taxviet.ledger import RecordLedger, UserScopedStore
from taxviet.models.calculation import CalculationInput, PitMethod, TaxPeriod
from taxviet.orchestrator import TaxAssistant
from taxviet.services.storage import InMemoryStorage


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep configuration independent of the developer's environment."""
    for name in (
        "TAXVIET_STORAGE_BACKEND",
        "TAXVIET_TAX_DEFAULT_CATEGORY_ID",
        "TAXVIET_TAX_DEFAULT_VAT_RATE",
        "TAXVIET_TAX_DEFAULT_PIT_RATE",
        "TAXVIET_TAX_CURRENCY_DECIMAL_PLACES",
        "DEFAULT_LANGUAGE",
        "LOG_LEVEL",
        "APP_ENVIRONMENT",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TAXVIET_STORAGE_PATH", str(tmp_path / "storage.json"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def accounts(storage):
    return AccountStore(storage)


@pytest.fixture
def context():
    return SessionContext()


@pytest.fixture
def sessions(accounts, storage, context):
    return SessionStore(accounts, storage, context)


@pytest.fixture
def scoped_store(storage, accounts, context):
    return UserScopedStore(storage, accounts, context)


@pytest.fixture
def ledger(scoped_store):
    return RecordLedger(scoped_store)


@pytest.fixture
def engine():
    return TaxEngine()


@pytest.fixture
def assistant(storage):
    return TaxAssistant(storage=storage)


@pytest.fixture
def save_time():
    return datetime(2026, 10, 19, 9, 30, 0)


@pytest.fixture
def expense_input():
    """The worked example: 100M revenue, 20M expenses, 1% / 0.5%."""
    return CalculationInput(
        revenue=Decimal("100000000"),
        expenses=Decimal("20000000"),
        category_label="Phân phối, cung cấp hàng hóa",
        vat_rate=Decimal("0.01"),
        pit_rate=Decimal("0.005"),
        period=TaxPeriod.YEAR,
        pit_method=PitMethod.EXPENSE,
    )
