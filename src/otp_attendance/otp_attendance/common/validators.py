from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_NAME_LENGTH, TOTP_DIGITS
from ..core.exceptions import ValidationError

_CODE_RE = re.compile(rf"[0-9]{{{TOTP_DIGITS}}}")
_USERNAME_RE = re.compile(r"[^A-Za-z0-9_\-]")


def normalize_code(value: Optional[str]) -> str:
    """Drop every whitespace character ("123 456" -> "123456")."""
    if not value:
        return ""
    return "".join(value.split())


def is_valid_code(value: Optional[str]) -> bool:
    return bool(_CODE_RE.fullmatch(normalize_code(value)))


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak valid")
    return value.strip()


def require_positive_int(value, field_name: str) -> int:
    # JSON true/false and fractional numbers are not ids
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} tidak valid")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} tidak valid") from None
    if number <= 0:
        raise ValidationError(f"{field_name} tidak valid")
    return number


def sanitize_name(value: Optional[str]) -> str:
    """Keep letters, spaces, apostrophes and hyphens; cap the length."""
    if not value:
        return ""
    cleaned = "".join(ch for ch in value if ch.isalpha() or ch in " '-")
    cleaned = " ".join(cleaned.split())
    return cleaned[:MAX_NAME_LENGTH].strip()


def sanitize_username(value: Optional[str]) -> str:
    if not value:
        return ""
    return _USERNAME_RE.sub("", value)
