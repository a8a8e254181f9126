from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", field=field_name)
    return value


def require_email(value: Optional[str], field_name: str = "email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid email address", field=field_name)
    return value.lower()


def require_digits(value: Any, field_name: str) -> int:
    s = str(value).strip() if value is not None else ""
    if not (s.isascii() and s.isdigit()):
        raise ValidationError(f"{field_name} must be a whole number", field=field_name)
    return int(s)


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} is not valid", field=field_name)
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not valid", field=field_name)
    if n <= 0:
        raise ValidationError(f"{field_name} is not valid", field=field_name)
    return n


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in {"1", "true", "yes", "on"}:
        return True
    if s in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"{field_name} must be true or false", field=field_name)
