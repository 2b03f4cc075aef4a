"""
End-to-end tests of the TaxAssistant boundary.

Every failure must come back as an ActionResult with an error code
and a message, never as an exception.
"""

import json
from decimal import Decimal

import pytest

from taxviet.models.action import NotificationKind
from taxviet.models.calculation import CalculationResult, PitMethod, TaxPeriod
from taxviet.models.preferences import Language, ThemeMode
from taxviet.models.record import RecordStatus
from taxviet.orchestrator import TaxAssistant, create_app
from taxviet.services.storage import InMemoryStorage, StorageError


CALC_FORM = {
    "revenue": "100000000",
    "expenses": "20000000",
    "categoryLabel": "Phân phối, cung cấp hàng hóa",
    "vatRate": "0.01",
    "pitRate": "0.005",
    "period": "quarter",
    "pitMethod": "expense",
}


class FailingStorage(InMemoryStorage):
    """Accepts reads, rejects every write."""
    
    def set(self, key: str, value: str) -> None:
        raise StorageError("disk full")


class TestAccountsFlow:
    
    def test_register_logs_in(self, assistant):
        result = assistant.register("Lan@Example.com", "Lan", "pw")
        assert result.ok
        assert result.kind == NotificationKind.SUCCESS
        assert result.message == "Đăng ký thành công!"
        assert assistant.current_user == "lan@example.com"
        assert assistant.get_profile().value.display_name == "Lan"
    
    def test_register_duplicate(self, assistant):
        assistant.register("A@B.com", "An", "pw")
        assistant.logout()
        
        result = assistant.register("a@b.com", "Other", "pw2")
        assert not result.ok
        assert result.kind == NotificationKind.ERROR
        assert result.error_code == "duplicate_account"
        assert result.message == "Email/SĐT này đã được đăng ký"
        assert assistant.current_user is None
        assert len(assistant.accounts.list_accounts()) == 1
    
    def test_login_case_insensitive(self, assistant):
        assistant.register("A@B.com", "An", "pw")
        assistant.logout()
        
        result = assistant.login("a@b.com", "pw")
        assert result.ok
        assert result.message == "Chào mừng quay lại, An"
        assert assistant.current_user == "a@b.com"
    
    def test_login_unknown(self, assistant):
        result = assistant.login("ghost@b.com", "pw")
        assert result.error_code == "account_not_found"
        assert result.message == "Tài khoản không tồn tại"
    
    def test_login_wrong_password(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        assistant.logout()
        result = assistant.login("a@b.com", "nope")
        assert result.error_code == "invalid_credentials"
        assert result.message == "Mật khẩu không chính xác"
        assert assistant.current_user is None
    
    def test_logout_resets_view(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        assistant.logout()
        assert assistant.current_user is None
        assert assistant.list_records().value == []
        assert assistant.get_profile().value.display_name == "Người dùng mới"
    
    def test_restart_resumes_last_session(self, storage):
        first = TaxAssistant(storage=storage)
        first.register("a@b.com", "An", "pw")
        
        restarted = create_app(storage=storage)
        assert restarted.current_user == "a@b.com"
        assert restarted.get_profile().value.display_name == "An"
    
    def test_restart_after_logout_has_no_session(self, storage):
        first = TaxAssistant(storage=storage)
        first.register("a@b.com", "An", "pw")
        first.logout()
        
        assert create_app(storage=storage).current_user is None
    
    def test_create_app_without_restore(self, storage):
        TaxAssistant(storage=storage).register("a@b.com", "An", "pw")
        assert create_app(storage=storage, restore_session=False).current_user is None


class TestCalculationFlow:
    
    def test_compute_from_form_data(self, assistant):
        result = assistant.compute_tax(CALC_FORM)
        assert result.ok
        assert isinstance(result.value, CalculationResult)
        assert result.value.total == Decimal("1200000")
        assert result.value.period == TaxPeriod.QUARTER
    
    def test_compute_needs_no_session(self, assistant):
        assert assistant.current_user is None
        assert assistant.compute_tax(CALC_FORM).ok
    
    def test_negative_revenue_rejected(self, assistant):
        result = assistant.compute_tax({**CALC_FORM, "revenue": "-1"})
        assert not result.ok
        assert result.error_code == "invalid_input"
    
    def test_malformed_form_rejected(self, assistant):
        result = assistant.compute_tax({**CALC_FORM, "pitMethod": "magic"})
        assert result.error_code == "invalid_input"
    
    def test_estimate_uses_active_profile(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        assistant.update_profile(business_category_id="2")
        
        result = assistant.estimate(Decimal("200000000"), pit_method=PitMethod.THRESHOLD)
        assert result.value.total == Decimal("14000000")
    
    def test_estimate_matches_engine(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        profile = assistant.get_profile().value
        
        result = assistant.estimate(
            Decimal("100000000"),
            Decimal("20000000"),
            TaxPeriod.QUARTER,
            PitMethod.EXPENSE,
        ).value
        expected = assistant.engine.estimate_for_profile(
            profile,
            Decimal("100000000"),
            Decimal("20000000"),
            TaxPeriod.QUARTER,
            PitMethod.EXPENSE,
        )
        assert result == expected
        assert result.input.category_label == assistant.engine.category_for("1").label
    
    def test_estimate_rejects_negative_revenue(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        result = assistant.estimate(Decimal("-1"))
        assert result.error_code == "invalid_input"
    
    def test_list_categories(self, assistant):
        assert [c.id for c in assistant.list_categories().value] == ["1", "2", "3", "4"]


class TestProfileFlow:
    
    def test_update_requires_session(self, assistant):
        result = assistant.update_profile(tax_id_number="123")
        assert result.error_code == "not_authenticated"
    
    def test_update_fields(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        result = assistant.update_profile(tax_id_number="8012345678", display_name="An Shop")
        assert result.ok
        assert result.message == "Cập nhật thành công"
        assert assistant.get_profile().value.tax_id_number == "8012345678"
        assert assistant.get_profile().value.display_name == "An Shop"
    
    def test_category_change_applies_its_rates(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        profile = assistant.update_profile(business_category_id="3").value
        assert profile.vat_rate == Decimal("0.03")
        assert profile.pit_rate == Decimal("0.015")
    
    def test_explicit_rates_win_over_category(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        profile = assistant.update_profile(business_category_id="3", vat_rate="0.02").value
        assert profile.vat_rate == Decimal("0.02")
        assert profile.pit_rate == Decimal("0.015")
    
    def test_unknown_category_rejected(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        result = assistant.update_profile(business_category_id="42")
        assert result.error_code == "invalid_input"
    
    def test_invalid_rate_rejected(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        result = assistant.update_profile(vat_rate="1.5")
        assert result.error_code == "invalid_input"
        assert assistant.get_profile().value.vat_rate == Decimal("0.01")
    
    def test_unknown_field_rejected(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        assert assistant.update_profile(favourite_colour="red").error_code == "invalid_input"
    
    def test_replace_whole_profile(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        replacement = assistant.get_profile().value.model_copy(update={"business_type": "Cá nhân"})
        assert assistant.update_profile(replacement).ok
        assert assistant.get_profile().value.business_type == "Cá nhân"


class TestHistoryFlow:
    
    @pytest.fixture
    def logged_in(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        return assistant
    
    def test_save_requires_session(self, assistant):
        calc = assistant.compute_tax(CALC_FORM).value
        result = assistant.save_result(calc)
        assert result.error_code == "not_authenticated"
    
    def test_save_prepends(self, logged_in, save_time):
        calc = logged_in.compute_tax(CALC_FORM).value
        first = logged_in.save_result(calc, timestamp=save_time).value
        second = logged_in.save_result(calc, TaxPeriod.YEAR, timestamp=save_time).value
        
        records = logged_in.list_records().value
        assert [r.id for r in records] == [second.id, first.id]
        assert first.label == "Dự toán Quý 4/2026 (19/10/2026)"
        assert second.label == "Dự toán Năm 2026 (19/10/2026)"
    
    def test_save_message(self, logged_in, save_time):
        calc = logged_in.compute_tax(CALC_FORM).value
        assert logged_in.save_result(calc, timestamp=save_time).message == "Đã lưu vào lịch sử cá nhân"
    
    def test_toggle_twice(self, logged_in, save_time):
        calc = logged_in.compute_tax(CALC_FORM).value
        record = logged_in.save_result(calc, timestamp=save_time).value
        
        assert logged_in.toggle_record_status(record.id).value.status == RecordStatus.PAID
        assert logged_in.toggle_record_status(record.id).value.status == RecordStatus.PENDING
    
    def test_toggle_unknown_is_silent(self, logged_in):
        result = logged_in.toggle_record_status("missing")
        assert result.ok
        assert result.value is None
        assert result.message == ""
    
    def test_delete(self, logged_in, save_time):
        calc = logged_in.compute_tax(CALC_FORM).value
        record = logged_in.save_result(calc, timestamp=save_time).value
        
        assert logged_in.delete_record(record.id).value is True
        assert logged_in.list_records().value == []
    
    def test_delete_unknown_is_silent(self, logged_in):
        result = logged_in.delete_record("missing")
        assert result.ok
        assert result.value is False
    
    def test_get_record_unknown(self, logged_in):
        assert logged_in.get_record("missing").error_code == "record_not_found"
    
    def test_summary(self, logged_in, save_time):
        calc = logged_in.compute_tax(CALC_FORM).value
        record = logged_in.save_result(calc, timestamp=save_time).value
        logged_in.toggle_record_status(record.id)
        
        summary = logged_in.summary().value
        assert summary.record_count == 1
        assert summary.tax_paid == Decimal("1200000")
    
    def test_accounts_do_not_see_each_other(self, assistant, save_time):
        calc = assistant.compute_tax(CALC_FORM).value
        assistant.register("a@b.com", "An", "pw")
        assistant.save_result(calc, timestamp=save_time)
        assistant.logout()
        
        assistant.register("c@d.com", "Cường", "pw")
        assert assistant.list_records().value == []
        assert assistant.get_profile().value.display_name == "Cường"
        assistant.logout()
        
        assistant.login("A@B.com", "pw")
        assert len(assistant.list_records().value) == 1


class TestPreferencesFlow:
    
    def test_defaults(self, assistant):
        prefs = assistant.get_preferences().value
        assert prefs.theme_mode == ThemeMode.SYSTEM
        assert prefs.language == Language.VIETNAMESE
        assert prefs.notifications_enabled is False
        assert prefs.faceid_enabled is False
    
    def test_update_persists_under_flat_keys(self, assistant, storage):
        result = assistant.update_preferences(theme_mode="dark", notifications_enabled=True)
        assert result.ok
        assert storage.get("theme-mode") == "dark"
        assert storage.get("notifications-enabled") == "true"
        assert storage.get("faceid-enabled") == "false"
    
    def test_language_switches_messages(self, assistant):
        result = assistant.update_preferences(language="en")
        assert result.message == "Settings saved"
        assert assistant.login("ghost@b.com").message == "Account does not exist"
    
    def test_preferences_survive_logout(self, assistant):
        assistant.register("a@b.com", "An", "pw")
        assistant.update_preferences(faceid_enabled=True)
        assistant.logout()
        assert assistant.get_preferences().value.faceid_enabled is True
    
    def test_invalid_preference(self, assistant):
        assert assistant.update_preferences(theme_mode="neon").error_code == "invalid_input"
        assert assistant.update_preferences(volume=11).error_code == "invalid_input"
    
    def test_garbage_stored_values_fall_back(self, storage):
        storage.set("theme-mode", "neon")
        storage.set("app-language", "fr")
        prefs = TaxAssistant(storage=storage).get_preferences().value
        assert prefs.theme_mode == ThemeMode.SYSTEM
        assert prefs.language == Language.VIETNAMESE
    
    def test_stored_values_load(self, storage):
        storage.set("theme-mode", "dark")
        storage.set("app-language", "en")
        prefs = TaxAssistant(storage=storage).get_preferences().value
        assert prefs.theme_mode == ThemeMode.DARK
        assert prefs.language == Language.ENGLISH


class TestStorageFailures:
    """A failing backend produces a notification, never an exception."""
    
    def test_register_reports_storage_error(self):
        assistant = TaxAssistant(storage=FailingStorage())
        result = assistant.register("a@b.com", "An", "pw")
        assert result.error_code == "storage_error"
        assert result.message == "Không thể lưu dữ liệu, vui lòng thử lại"
        assert assistant.current_user is None
    
    def test_failed_switch_keeps_accounts_apart(self, assistant, storage):
        assistant.register("binh@x.com", "Bình", "pw-binh")
        assistant.register("an@x.com", "An", "pw-an")
        assistant.update_profile(tax_id_number="AN-MST")
        unreadable = json.dumps({"name": "Bình"})
        storage.set("user-profile-binh@x.com", unreadable)
        
        result = assistant.login("binh@x.com", "pw-binh")
        assert result.error_code == "storage_error"
        assert assistant.current_user == "an@x.com"
        assert storage.get("last-session-user") == "an@x.com"
        assert assistant.get_profile().value.tax_id_number == "AN-MST"
        
        assert assistant.update_profile(display_name="An Shop").ok
        assert storage.get("user-profile-binh@x.com") == unreadable
        assert json.loads(storage.get("user-profile-an@x.com"))["mst"] == "AN-MST"
    
    def test_restart_drops_unreadable_session(self, storage):
        TaxAssistant(storage=storage).register("a@b.com", "An", "pw")
        storage.set("tax-records-a@b.com", "not json")
        
        restarted = create_app(storage=storage)
        assert restarted.current_user is None
        assert storage.get("last-session-user") is None
        assert restarted.list_records().value == []
