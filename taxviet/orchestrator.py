"""
Main Orchestrator for TaxViet

This module ties together all the components and exposes the boundary
the UI layer calls:
1. Accounts (register → login → logout, resume last session)
2. Profile (read, update)
3. Calculation (inputs → engine → result)
4. History (save result → record, delete, toggle paid/pending)
5. Preferences (theme, language, notification and Face ID switches)

DESIGN DECISION: The orchestrator is the ONLY place where domain errors
are recovered. Every operation returns an ActionResult; a failure carries
an error code and a localized message for the UI's notification, and is
never fatal. Nothing is retried - a failed attempt needs a new user action.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from taxviet.accounts import AccountStore, SessionContext, SessionStore
from taxviet.audit import AuditLogger, configure_logging
from taxviet.config import Settings, get_settings
from taxviet.engine import TaxEngine
from taxviet.errors import InvalidInputError, TaxVietError
from taxviet.ledger import RecordLedger, UserScopedStore
from taxviet.messages import translate
from taxviet.models.account import normalize_identifier
from taxviet.models.action import ActionResult
from taxviet.models.calculation import (
    CalculationInput,
    CalculationResult,
    PitMethod,
    TaxPeriod,
)
from taxviet.models.preferences import Language
from taxviet.models.profile import Profile
from taxviet.models.record import RecordStatus
from taxviet.services.preferences import PreferencesStore
from taxviet.services.storage import (
    KeyValueStorageInterface,
    StorageError,
    create_storage,
)


class TaxAssistant:
    """
    Boundary facade over the stores, the ledger and the engine.
    
    All scoped operations act on the account of the active session.
    """
    
    def __init__(
        self,
        storage: Optional[KeyValueStorageInterface] = None,
        engine: Optional[TaxEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
        context: Optional[SessionContext] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._storage = storage or create_storage(self._settings.storage)
        self._context = context or SessionContext()
        self._accounts = AccountStore(self._storage)
        self._sessions = SessionStore(self._accounts, self._storage, self._context)
        self._scoped = UserScopedStore(self._storage, self._accounts, self._context)
        self._ledger = RecordLedger(
            self._scoped,
            currency_decimal_places=self._settings.tax.currency_decimal_places,
        )
        self._engine = engine or TaxEngine()
        self._preferences = PreferencesStore(
            self._storage,
            default_language=self._settings.app.default_language,
        )
        self._audit_logger = audit_logger or AuditLogger()
    
    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    
    @property
    def context(self) -> SessionContext:
        return self._context
    
    @property
    def accounts(self) -> AccountStore:
        return self._accounts
    
    @property
    def scoped_store(self) -> UserScopedStore:
        return self._scoped
    
    @property
    def ledger(self) -> RecordLedger:
        return self._ledger
    
    @property
    def engine(self) -> TaxEngine:
        return self._engine
    
    @property
    def current_user(self) -> Optional[str]:
        return self._context.current
    
    @property
    def language(self) -> Language:
        try:
            return self._preferences.load().language
        except StorageError:
            return Language(self._settings.app.default_language)
    
    # -------------------------------------------------------------------------
    # Error translation
    # -------------------------------------------------------------------------
    
    def _fail(self, action: str, error: Exception) -> ActionResult:
        """Log a recovered failure and turn it into a notification."""
        scope = self._context.current
        if isinstance(error, StorageError):
            self._audit_logger.log_storage_error(action, str(error), scope)
            return ActionResult.failure("storage_error", translate("storage_error", self.language))
        
        code = error.code if isinstance(error, TaxVietError) else InvalidInputError.code
        self._audit_logger.log_action_rejected(action, code, str(error), scope)
        return ActionResult.failure(code, translate(code, self.language))
    
    def _guarded(self, action: str, operation: Callable[[], ActionResult]) -> ActionResult:
        try:
            return operation()
        except (TaxVietError, StorageError, ValidationError) as e:
            return self._fail(action, e)
    
    # -------------------------------------------------------------------------
    # Accounts and sessions
    # -------------------------------------------------------------------------
    
    def restore_session(self) -> ActionResult:
        """
        Resume the last session at startup.
        
        Returns the restored identifier as value, or None.
        """
        def operation() -> ActionResult:
            identifier = self._sessions.restore()
            if identifier:
                self._audit_logger.log_session_restored(identifier)
            return ActionResult.success(identifier)
        
        return self._guarded("restore_session", operation)
    
    def register(self, identifier: str, full_name: str, secret: str) -> ActionResult:
        """Register an account and log straight into it."""
        try:
            account = self._accounts.register(identifier, full_name, secret)
            self._sessions.begin(account.identifier)
        except TaxVietError as e:
            self._audit_logger.log_registration_rejected(normalize_identifier(identifier), e.code)
            return ActionResult.failure(e.code, translate(e.code, self.language))
        except StorageError as e:
            return self._fail("register", e)
        
        self._audit_logger.log_account_registered(account.identifier)
        return ActionResult.success(account, translate("registered", self.language))
    
    def login(self, identifier: str, secret: Optional[str] = None) -> ActionResult:
        try:
            account = self._sessions.login(identifier, secret)
        except TaxVietError as e:
            self._audit_logger.log_login_failed(normalize_identifier(identifier), e.code)
            return ActionResult.failure(e.code, translate(e.code, self.language))
        except StorageError as e:
            return self._fail("login", e)
        
        self._audit_logger.log_login_succeeded(account.identifier)
        return ActionResult.success(
            account,
            translate("welcome_back", self.language, name=account.full_name),
        )
    
    def logout(self) -> ActionResult:
        def operation() -> ActionResult:
            previous = self._sessions.logout()
            self._audit_logger.log_logged_out(previous)
            return ActionResult.success(previous, translate("logged_out", self.language))
        
        return self._guarded("logout", operation)
    
    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------
    
    def get_profile(self) -> ActionResult:
        """Profile of the active account (the default template when logged out)."""
        return ActionResult.success(self._scoped.profile)
    
    def update_profile(self, profile: Optional[Profile] = None, **changes: Any) -> ActionResult:
        """
        Replace the active profile, or apply field changes to it.
        
        Changing business_category_id without giving rates explicitly
        applies the category's default rates.
        """
        def operation() -> ActionResult:
            identifier = self._context.require()
            if profile is not None:
                updated = Profile.model_validate(profile.model_dump())
                fields = list(Profile.model_fields)
            else:
                updated = self._apply_profile_changes(self._scoped.profile, changes)
                fields = sorted(changes)
            
            self._scoped.set_profile(identifier, updated)
            self._audit_logger.log_profile_updated(identifier, fields)
            return ActionResult.success(updated, translate("profile_updated", self.language))
        
        return self._guarded("update_profile", operation)
    
    def _apply_profile_changes(self, current: Profile, changes: dict[str, Any]) -> Profile:
        unknown = set(changes) - set(Profile.model_fields)
        if unknown:
            raise InvalidInputError(", ".join(sorted(unknown)), "unknown profile field")
        
        merged = current.model_dump()
        category_id = changes.get("business_category_id")
        if category_id is not None and category_id != current.business_category_id:
            category = self._engine.category_for(category_id)
            if category is None:
                raise InvalidInputError("business_category_id", f"unknown category {category_id}")
            merged["vat_rate"] = category.vat_rate
            merged["pit_rate"] = category.pit_rate
        merged.update(changes)
        return Profile.model_validate(merged)
    
    # -------------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------------
    
    def compute_tax(
        self,
        calc_input: Union[CalculationInput, dict[str, Any]],
    ) -> ActionResult:
        """Run the engine. Needs no session; nothing is persisted."""
        def compute() -> CalculationResult:
            data = calc_input
            if not isinstance(data, CalculationInput):
                data = CalculationInput.model_validate(data)
            return self._engine.compute(data)
        
        return self._calculate(compute)
    
    def estimate(
        self,
        revenue: Decimal,
        expenses: Decimal = Decimal("0"),
        period: TaxPeriod = TaxPeriod.YEAR,
        pit_method: PitMethod = PitMethod.THRESHOLD,
    ) -> ActionResult:
        """Compute with the category and rates of the active profile."""
        return self._calculate(
            lambda: self._engine.estimate_for_profile(
                self._scoped.profile,
                revenue,
                expenses,
                period,
                pit_method,
            )
        )
    
    def _calculate(self, compute: Callable[[], CalculationResult]) -> ActionResult:
        scope = self._context.current
        try:
            result = compute()
        except (InvalidInputError, ValidationError) as e:
            self._audit_logger.log_calculation_rejected(scope, str(e))
            return ActionResult.failure(
                InvalidInputError.code,
                translate(InvalidInputError.code, self.language),
            )
        
        self._audit_logger.log_tax_computed(
            scope,
            result.input.pit_method.value,
            result.period.value,
            str(result.total),
        )
        return ActionResult.success(result)
    
    def list_categories(self) -> ActionResult:
        return ActionResult.success(list(self._engine.categories))
    
    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------
    
    def save_result(
        self,
        result: CalculationResult,
        period: Optional[TaxPeriod] = None,
        timestamp: Optional[datetime] = None,
    ) -> ActionResult:
        """Persist a computed result as a pending record of the active account."""
        def operation() -> ActionResult:
            identifier = self._context.require()
            record = self._ledger.append_from_result(
                identifier,
                result,
                period=period,
                timestamp=timestamp,
                language=self.language,
            )
            self._audit_logger.log_record_saved(identifier, record.id, str(record.tax_amount))
            return ActionResult.success(record, translate("record_saved", self.language))
        
        return self._guarded("save_result", operation)
    
    def delete_record(self, record_id: str) -> ActionResult:
        """Delete a record. An unknown id is a silent no-op (value False)."""
        def operation() -> ActionResult:
            identifier = self._context.require()
            existed = self._ledger.remove(identifier, record_id)
            self._audit_logger.log_record_deleted(identifier, record_id, existed)
            message = translate("record_deleted", self.language) if existed else ""
            return ActionResult.success(existed, message)
        
        return self._guarded("delete_record", operation)
    
    def toggle_record_status(self, record_id: str) -> ActionResult:
        """Flip paid/pending. An unknown id is a silent no-op (value None)."""
        def operation() -> ActionResult:
            identifier = self._context.require()
            record = self._ledger.toggle_status(identifier, record_id)
            self._audit_logger.log_record_status_toggled(
                identifier,
                record_id,
                record.status.value if record else None,
            )
            if record is None:
                return ActionResult.success(None)
            key = (
                "record_marked_paid" if record.status == RecordStatus.PAID
                else "record_marked_pending"
            )
            return ActionResult.success(record, translate(key, self.language))
        
        return self._guarded("toggle_record_status", operation)
    
    def list_records(self) -> ActionResult:
        """Records of the active account, newest first (empty when logged out)."""
        return ActionResult.success(self._scoped.records)
    
    def get_record(self, record_id: str) -> ActionResult:
        def operation() -> ActionResult:
            identifier = self._context.require()
            return ActionResult.success(self._ledger.get(identifier, record_id))
        
        return self._guarded("get_record", operation)
    
    def summary(self) -> ActionResult:
        def operation() -> ActionResult:
            identifier = self._context.require()
            return ActionResult.success(self._ledger.summarize(identifier))
        
        return self._guarded("summary", operation)
    
    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------
    
    def get_preferences(self) -> ActionResult:
        return self._guarded(
            "get_preferences",
            lambda: ActionResult.success(self._preferences.load()),
        )
    
    def update_preferences(self, **changes: Any) -> ActionResult:
        def operation() -> ActionResult:
            updated = self._preferences.update(**changes)
            self._audit_logger.log_preferences_updated(
                {name: str(value) for name, value in changes.items()}
            )
            return ActionResult.success(updated, translate("preferences_updated", updated.language))
        
        return self._guarded("update_preferences", operation)


def create_app(
    storage: Optional[KeyValueStorageInterface] = None,
    restore_session: bool = True,
) -> TaxAssistant:
    """
    Factory function to create the application facade.
    
    Applies the configured log level before anything is logged.
    
    Args:
        storage: Storage backend. Defaults to the configured one.
        restore_session: Resume the last active session, as the app
                         does at startup.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)
    
    assistant = TaxAssistant(storage=storage, settings=settings)
    if restore_session:
        assistant.restore_session()
    return assistant
