"""
User-facing Messages

Notification texts in Vietnamese and English. The language comes from
the device preferences; Vietnamese is the fallback for any missing key.
"""

from typing import Union

from taxviet.models.preferences import Language


MESSAGES: dict[str, dict[str, str]] = {
    # Success
    "registered": {
        "vi": "Đăng ký thành công!",
        "en": "Registration successful!",
    },
    "welcome_back": {
        "vi": "Chào mừng quay lại, {name}",
        "en": "Welcome back, {name}",
    },
    "logged_out": {
        "vi": "Đã đăng xuất",
        "en": "Logged out",
    },
    "profile_updated": {
        "vi": "Cập nhật thành công",
        "en": "Profile updated",
    },
    "record_saved": {
        "vi": "Đã lưu vào lịch sử cá nhân",
        "en": "Saved to your history",
    },
    "record_deleted": {
        "vi": "Đã xóa bản ghi",
        "en": "Record deleted",
    },
    "record_marked_paid": {
        "vi": "Đã đánh dấu đã nộp",
        "en": "Marked as paid",
    },
    "record_marked_pending": {
        "vi": "Đã đánh dấu chưa nộp",
        "en": "Marked as pending",
    },
    "preferences_updated": {
        "vi": "Đã lưu cài đặt",
        "en": "Settings saved",
    },
    # Failures
    "duplicate_account": {
        "vi": "Email/SĐT này đã được đăng ký",
        "en": "This email/phone is already registered",
    },
    "account_not_found": {
        "vi": "Tài khoản không tồn tại",
        "en": "Account does not exist",
    },
    "invalid_credentials": {
        "vi": "Mật khẩu không chính xác",
        "en": "Incorrect password",
    },
    "invalid_input": {
        "vi": "Dữ liệu không hợp lệ",
        "en": "Invalid input",
    },
    "record_not_found": {
        "vi": "Không tìm thấy bản ghi",
        "en": "Record not found",
    },
    "not_authenticated": {
        "vi": "Vui lòng đăng nhập",
        "en": "Please log in",
    },
    "storage_error": {
        "vi": "Không thể lưu dữ liệu, vui lòng thử lại",
        "en": "Could not save your data, please try again",
    },
    # Record labels
    "label_quarter": {
        "vi": "Dự toán Quý {quarter}/{year} ({date})",
        "en": "Estimate Q{quarter} {year} ({date})",
    },
    "label_year": {
        "vi": "Dự toán Năm {year} ({date})",
        "en": "Estimate {year} ({date})",
    },
}


def translate(key: str, language: Union[Language, str] = Language.VIETNAMESE, **params) -> str:
    """Look up a message and fill in its placeholders."""
    lang = Language(language).value
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    template = entry.get(lang) or entry[Language.VIETNAMESE.value]
    return template.format(**params)
