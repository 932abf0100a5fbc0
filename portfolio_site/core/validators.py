"""
Shared validation rules and display helpers for contact submissions.
"""

import re
from typing import Dict, Mapping, Optional, Tuple

# Department choices offered by the contact form
DEPARTMENTS: Tuple[str, ...] = (
    "営業部",
    "プロダクトデザイン・マーケティンググループ",
    "人事部",
    "経理部",
    "カスタマーサポート",
    "取締役",
    "経営企画",
    "バックオフィス",
    "その他",
)

# Deliberately loose: anything@anything.anything
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

TERMS_AGREED = "agreed"

NOT_ENTERED = "未入力"
NOT_SELECTED = "未選択"

# Client-side messages, keyed by the field the error is shown under
MESSAGES: Dict[str, str] = {
    "name": "名前を入力してください",
    "email_required": "メールアドレスを入力してください",
    "email_invalid": "有効なメールアドレスを入力してください",
    "message": "メッセージを入力してください",
    "birthdate": "生年月日をすべて選択してください",
    "departmentName": "お問い合わせ部署を一覧から選択してください",
    "address": "住所を入力してください",
    "termOfService": "利用規約に同意してください",
    "recaptcha": "reCAPTCHAを完了してください",
}

SERVER_REQUIRED_FIELDS: Tuple[str, ...] = ("name", "email", "message")


def is_valid_email(email: str) -> bool:
    """Return True if ``email`` looks like local@domain.tld."""
    return bool(email) and EMAIL_PATTERN.search(email) is not None


def validate_email(email: str) -> Optional[str]:
    """
    Validate the email field.

    Returns:
        Error message, or None when the value is acceptable
    """
    if not email:
        return MESSAGES["email_required"]
    if not is_valid_email(email):
        return MESSAGES["email_invalid"]
    return None


def validate_birthdate(year: str, month: str, day: str) -> Optional[str]:
    """
    Validate the partial-birthdate rule.

    A year without month and day is rejected. Month or day without a year is
    left alone; such a birthdate simply renders as not entered.
    """
    if year and (not month or not day):
        return MESSAGES["birthdate"]
    return None


def validate_department(department: str) -> Optional[str]:
    if department and department not in DEPARTMENTS:
        return MESSAGES["departmentName"]
    return None


def missing_required_fields(data: Mapping[str, str]) -> Tuple[str, ...]:
    """Return the server-side required fields that are empty in ``data``."""
    return tuple(field for field in SERVER_REQUIRED_FIELDS if not data.get(field))


def format_birthdate(year: str, month: str, day: str) -> str:
    """Join birthdate parts for display, or the not-entered placeholder."""
    if year and month and day:
        return f"{year}年{month}月{day}日"
    return NOT_ENTERED
