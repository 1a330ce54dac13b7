"""Validações de campo usadas pelos routers."""

import re
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{7,20}$")

MIN_PASSWORD_LENGTH = 6


def is_valid_email(email: Optional[str]) -> bool:
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def is_valid_phone(phone: Optional[str]) -> bool:
    """7 a 15 dígitos; aceita +, espaços, hífens e parênteses."""
    if not phone or not isinstance(phone, str):
        return False
    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        return False
    digits = re.sub(r"\D", "", phone)
    return 7 <= len(digits) <= 15


def is_valid_password(password: Optional[str]) -> bool:
    return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH


def sanitize_string(value: Optional[str]) -> Optional[str]:
    # remove tags e normaliza espaços
    if value is None:
        return None
    value = re.sub(r"[<>]", "", str(value))
    return re.sub(r"\s+", " ", value).strip()


def is_valid_latitude(value: Any) -> bool:
    try:
        return -90 <= float(value) <= 90
    except (TypeError, ValueError):
        return False


def is_valid_longitude(value: Any) -> bool:
    try:
        return -180 <= float(value) <= 180
    except (TypeError, ValueError):
        return False
