from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def normalize_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def require_email(value: Optional[str], field_name: str = "Email") -> str:
    email = normalize_email(require_non_empty(value, field_name))
    if "@" not in email:
        raise ValidationError(f"{field_name} is not a valid email address")
    return email


def require_date(value: Optional[str], field_name: str) -> date:
    raw = require_non_empty(value, field_name)
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
